"""AI Behavior Strategy Classes

This module implements the Strategy design pattern for autonomous fighters.
A behavior is attached to a Fighter as its controller and, once per tick,
may issue one command through the same interface a human input source uses
(attack(), block(), move(direction)). The state machine validates those
commands exactly like human input, so a command issued into a cooldown is
simply dropped.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

import numpy as np

from ...core.config import AITuning
from ...core.data import AIChoice, FighterAction, FighterSnapshot, RangeTier
from ...core.events import AIDecisionMade, LogMessage

if TYPE_CHECKING:
    from ..fighter import Fighter
    from ..match import MatchContext


class AIType(Enum):
    """Available AI behavior types."""
    RANGE_TIER = auto()
    INACTIVE = auto()


@dataclass
class AIDecision:
    """Represents an AI decision with reasoning."""
    choice: AIChoice
    tier: RangeTier
    accepted: bool
    distance: float
    reasoning: str = ""


class AIBehavior(ABC):
    """Abstract base class for decision strategies."""

    @abstractmethod
    def update(self, fighter: "Fighter", opponent: Optional[FighterSnapshot],
               delta_ms: float, ctx: "MatchContext") -> Optional[AIDecision]:
        """Advance the strategy by one tick and possibly issue a command.

        Args:
            fighter: The fighter this behavior drives
            opponent: Read-only snapshot of the opposing fighter
            delta_ms: Tick length in milliseconds
            ctx: Match context

        Returns:
            The decision taken this tick, or None
        """
        pass

    @abstractmethod
    def get_behavior_name(self) -> str:
        """Get the name of this AI behavior."""
        pass


# Probability tables per range tier. Close range favors attack/block,
# far range always approaches.
TIER_WEIGHTS: dict[RangeTier, dict[AIChoice, float]] = {
    RangeTier.CLOSE: {
        AIChoice.ATTACK: 0.50,
        AIChoice.BLOCK: 0.25,
        AIChoice.RETREAT: 0.25,
        AIChoice.APPROACH: 0.0,
    },
    RangeTier.MEDIUM: {
        AIChoice.ATTACK: 0.30,
        AIChoice.BLOCK: 0.0,
        AIChoice.RETREAT: 0.0,
        AIChoice.APPROACH: 0.70,
    },
    RangeTier.FAR: {
        AIChoice.ATTACK: 0.0,
        AIChoice.BLOCK: 0.0,
        AIChoice.RETREAT: 0.0,
        AIChoice.APPROACH: 1.0,
    },
}

# Used at close range while the opponent is mid-attack
THREATENED_WEIGHTS: dict[AIChoice, float] = {
    AIChoice.ATTACK: 0.20,
    AIChoice.BLOCK: 0.60,
    AIChoice.RETREAT: 0.20,
    AIChoice.APPROACH: 0.0,
}

# Re-evaluation delay after a decision; tempo rises with proximity
TIER_COOLDOWN_MS: dict[RangeTier, float] = {
    RangeTier.CLOSE: 400.0,
    RangeTier.MEDIUM: 700.0,
    RangeTier.FAR: 1000.0,
}

CHOICE_ORDER = (AIChoice.ATTACK, AIChoice.BLOCK, AIChoice.RETREAT, AIChoice.APPROACH)


class RangeTierAI(AIBehavior):
    """Reactive fighter AI driven by distance tiers.

    Every time the decision cooldown expires (and the fighter is free to
    act) the opponent's distance is classified as close, medium or far, one
    choice is drawn from that tier's distribution and the matching command
    is issued. The cooldown is then reset to the tier's delay.

    Args:
        tuning: Range thresholds and aggression
        rng: Seeded random source; swap it to force decision sequences
    """

    def __init__(self, tuning: Optional[AITuning] = None,
                 rng: Optional[np.random.Generator] = None):
        self.tuning = tuning or AITuning()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.decision_cooldown = 0.0
        self.last_decision: Optional[AIDecision] = None
        self._approaching = False

    @property
    def aggression(self) -> float:
        return self.tuning.aggression

    def classify(self, distance: float) -> RangeTier:
        """Map an absolute distance to a range tier."""
        if distance < self.tuning.close_range:
            return RangeTier.CLOSE
        if distance < self.tuning.medium_range:
            return RangeTier.MEDIUM
        return RangeTier.FAR

    def weights_for(self, tier: RangeTier, opponent_attacking: bool = False) -> np.ndarray:
        """Normalized probabilities over CHOICE_ORDER for a tier."""
        if tier is RangeTier.CLOSE and opponent_attacking:
            table = THREATENED_WEIGHTS
        else:
            table = TIER_WEIGHTS[tier]

        weights = np.array([table[choice] for choice in CHOICE_ORDER], dtype=float)
        weights[0] *= 0.5 + self.tuning.aggression
        total = weights.sum()
        if total <= 0:
            # Degenerate table; fall back to approaching
            weights = np.array([0.0, 0.0, 0.0, 1.0])
            total = 1.0
        return weights / total

    def draw(self, tier: RangeTier, opponent_attacking: bool = False) -> AIChoice:
        """Draw one categorical choice for a tier."""
        probabilities = self.weights_for(tier, opponent_attacking)
        index = int(self.rng.choice(len(CHOICE_ORDER), p=probabilities))
        return CHOICE_ORDER[index]

    def update(self, fighter: "Fighter", opponent: Optional[FighterSnapshot],
               delta_ms: float, ctx: "MatchContext") -> Optional[AIDecision]:
        self.decision_cooldown = max(0.0, self.decision_cooldown - delta_ms)

        own = fighter.snapshot()
        if own.locked or own.current_action is FighterAction.DEFEATED:
            self._approaching = False
            return None

        # An approach walk ends once the opponent is within close range
        if self._approaching and opponent is not None:
            if own.current_action is not FighterAction.WALK:
                self._approaching = False
            elif abs(opponent.x - own.x) < self.tuning.close_range:
                fighter.move(0)
                self._approaching = False

        if self.decision_cooldown > 0 or opponent is None:
            return None

        signed_distance = opponent.x - own.x
        distance = abs(signed_distance)
        toward = 1 if signed_distance > 0 else -1 if signed_distance < 0 else own.facing

        tier = self.classify(distance)
        choice = self.draw(tier, opponent.attacking)

        if choice is AIChoice.ATTACK:
            accepted = fighter.attack()
        elif choice is AIChoice.BLOCK:
            accepted = fighter.block(True)
        elif choice is AIChoice.RETREAT:
            accepted = fighter.move(-toward)
        else:
            accepted = fighter.move(toward)
        self._approaching = choice is AIChoice.APPROACH and accepted

        self.decision_cooldown = TIER_COOLDOWN_MS[tier]

        reasoning = f"{tier.name.lower()} range ({distance:.0f})"
        if tier is RangeTier.CLOSE and opponent.attacking:
            reasoning += ", opponent attacking"
        decision = AIDecision(choice=choice, tier=tier, accepted=accepted,
                              distance=distance, reasoning=reasoning)
        self.last_decision = decision

        ctx.event_manager.publish(
            AIDecisionMade(tick=ctx.tick, fighter_id=fighter.fighter_id,
                           choice=choice, tier=tier, reasoning=reasoning),
            source="RangeTierAI"
        )
        ctx.event_manager.publish(
            LogMessage(
                tick=ctx.tick,
                message=f"{fighter.fighter_id} decides to {choice.value}: {reasoning}"
                        + ("" if accepted else " (rejected)"),
                category="AI",
                level="DEBUG",
                source="RangeTierAI"
            ),
            source="RangeTierAI"
        )
        return decision

    def get_behavior_name(self) -> str:
        return "Range Tier"


class InactiveAI(AIBehavior):
    """Inactive AI that never issues a command."""

    def update(self, fighter: "Fighter", opponent: Optional[FighterSnapshot],
               delta_ms: float, ctx: "MatchContext") -> Optional[AIDecision]:
        """Always do nothing."""
        return None

    def get_behavior_name(self) -> str:
        return "Inactive"


def create_ai_behavior(ai_type: AIType,
                       tuning: Optional[AITuning] = None,
                       rng: Optional[np.random.Generator] = None) -> AIBehavior:
    """Factory function to create AI behavior instances.

    Args:
        ai_type: Type of AI behavior to create
        tuning: Decision engine constants
        rng: Random source handed to the behavior

    Returns:
        AIBehavior instance

    Raises:
        ValueError: If ai_type is not supported
    """
    if ai_type == AIType.RANGE_TIER:
        return RangeTierAI(tuning, rng)
    elif ai_type == AIType.INACTIVE:
        return InactiveAI()
    else:
        raise ValueError(f"Unsupported AI type: {ai_type}")
