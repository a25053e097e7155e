"""
Match orchestration.

The MatchController owns both fighters and the round/stage progression.
It is driven by one external periodic tick callback and runs everything
synchronously inside that tick: decision engines issue commands, deferred
tasks fire, each fighter runs its state machine, and terminal conditions
are checked. Queued events are delivered to subscribers at the end of
every tick.

All shared state lives in an explicit MatchContext handed to every
component call; nothing is process-wide.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..core.config import MatchConfig
from ..core.data import FighterRole, FighterSnapshot, MatchOutcome, Vector2
from ..core.engine import AnimationLibrary, AnimationProvider, DeferredScheduler, DeferredTask, PhysicsIntegrator
from ..core.events import (
    DebugMessage,
    EventManager,
    FighterDefeated,
    LogMessage,
    MatchTerminal,
    RoundAdvanced,
)
from .ai.ai_behaviors import AIType, create_ai_behavior
from .combat_resolver import CombatResolver
from .fighter import Fighter


CONTROLLED_ID = "player"
AUTONOMOUS_ID = "enemy"


@dataclass
class MatchState:
    """Round and stage bookkeeping."""
    max_rounds: int = 3
    round_index: int = 1
    stage_index: int = 0
    terminal: bool = False
    winner_id: Optional[str] = None
    loser_id: Optional[str] = None
    outcome: Optional[MatchOutcome] = None

    @property
    def is_decided(self) -> bool:
        """True once the whole match has a result."""
        return self.outcome is not None


class MatchContext:
    """Everything a component call may touch during a tick.

    Args:
        config: Match configuration
        event_manager: Event bus for notifications and logging
        rng: Seeded random source shared by the match
    """

    def __init__(self, config: MatchConfig, event_manager: EventManager, rng: np.random.Generator):
        self.config = config
        self.event_manager = event_manager
        self.rng = rng
        self.fighters: dict[str, Fighter] = {}
        self.tick = 0
        self.clock_ms = 0.0

        self.scheduler = DeferredScheduler(self._generation_of, self._report_stale)
        self.combat_resolver = CombatResolver(config.combat, event_manager, rng)
        self.physics = self.build_physics(0)

    def build_physics(self, stage_index: int) -> PhysicsIntegrator:
        stage = self.config.stage(stage_index)
        min_x, max_x = self.config.horizontal_bounds
        return PhysicsIntegrator(self.config.physics, stage.floor, min_x, max_x)

    def _generation_of(self, fighter_id: str) -> Optional[int]:
        fighter = self.fighters.get(fighter_id)
        return fighter.action_generation if fighter is not None else None

    def _report_stale(self, task: DeferredTask) -> None:
        self.event_manager.publish(
            DebugMessage(tick=self.tick, message=f"Dropped stale task: {task.description}",
                         source="DeferredScheduler"),
            source="DeferredScheduler"
        )

    def get(self, fighter_id: str) -> Fighter:
        return self.fighters[fighter_id]

    def opponent_of(self, fighter: Fighter) -> Optional[Fighter]:
        for other in self.fighters.values():
            if other.fighter_id != fighter.fighter_id:
                return other
        return None

    @property
    def controlled(self) -> Fighter:
        return self.fighters[CONTROLLED_ID]

    @property
    def autonomous(self) -> Fighter:
        return self.fighters[AUTONOMOUS_ID]


class MatchController:
    """Owns both fighters and drives rounds.

    Args:
        config: Match configuration (built-in defaults when omitted)
        event_manager: Event bus (a private one is created when omitted)
        seed: Seed for the match random source
        rng: Explicit random source; takes precedence over seed
        animations: Animation providers per role
        ai_type: Decision engine attached to the autonomous fighter
    """

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        event_manager: Optional[EventManager] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        animations: Optional[dict[FighterRole, AnimationProvider]] = None,
        ai_type: AIType = AIType.RANGE_TIER,
    ):
        self.config = config or MatchConfig()
        self.event_manager = event_manager or EventManager()
        self.ai_type = ai_type
        self._animations = animations or {}

        self.state = MatchState(max_rounds=self.config.max_rounds)
        self.context = MatchContext(
            self.config,
            self.event_manager,
            rng if rng is not None else np.random.default_rng(seed),
        )
        self._spawn_fighters()
        self._emit_log(f"Round 1 - {self.stage_name}. Fight!", "ROUND")

    # ============== Accessors ==============

    @property
    def controlled(self) -> Fighter:
        return self.context.controlled

    @property
    def autonomous(self) -> Fighter:
        return self.context.autonomous

    @property
    def stage_name(self) -> str:
        return self.config.stage(self.state.stage_index).name

    def snapshots(self) -> dict[str, FighterSnapshot]:
        """Read-only state of both fighters."""
        return {fid: fighter.snapshot() for fid, fighter in self.context.fighters.items()}

    # ============== Tick ==============

    def tick(self, delta_ms: float) -> dict[str, FighterSnapshot]:
        """Advance the whole simulation by one tick.

        Args:
            delta_ms: Wall-clock length of the tick in milliseconds

        Returns:
            Snapshots of both fighters after the tick
        """
        if delta_ms < 0:
            raise ValueError(f"delta_ms cannot be negative, got {delta_ms}")

        ctx = self.context
        if self.state.terminal:
            self.event_manager.process_events()
            return self.snapshots()

        ctx.tick += 1
        ctx.clock_ms += delta_ms

        # Command intake from decision engines
        for fighter in list(ctx.fighters.values()):
            if fighter.controller is not None:
                opponent = ctx.opponent_of(fighter)
                fighter.controller.update(
                    fighter, opponent.snapshot() if opponent is not None else None, delta_ms, ctx
                )

        ctx.scheduler.advance(delta_ms)

        if not self._check_terminal():
            for fighter in (ctx.controlled, ctx.autonomous):
                fighter.update(delta_ms, ctx)
                if self._check_terminal():
                    break

        self.event_manager.process_events()
        return self.snapshots()

    def _check_terminal(self) -> bool:
        """Detect zero health and freeze the round."""
        if self.state.terminal:
            return True

        ctx = self.context
        losers = [f for f in ctx.fighters.values() if f.health <= 0]
        if not losers:
            return False

        for loser in losers:
            loser.defeat()
            ctx.event_manager.publish(
                FighterDefeated(tick=ctx.tick, fighter_id=loser.fighter_id),
                source="MatchController"
            )

        survivors = [f for f in ctx.fighters.values() if f.health > 0]
        winner = survivors[0] if survivors else None
        loser = losers[0]

        self.state.terminal = True
        self.state.winner_id = winner.fighter_id if winner else None
        self.state.loser_id = loser.fighter_id

        if ctx.controlled.health <= 0:
            self.state.outcome = MatchOutcome.DEFEAT
        elif self.state.round_index >= self.state.max_rounds:
            self.state.outcome = MatchOutcome.VICTORY

        # Nothing deferred may land after the round is decided
        ctx.scheduler.clear()
        for fighter in ctx.fighters.values():
            fighter.publish_pending(ctx)

        ctx.event_manager.publish(
            MatchTerminal(tick=ctx.tick, winner_id=self.state.winner_id, loser_id=loser.fighter_id),
            source="MatchController"
        )
        self._emit_log(f"{loser.fighter_id} defeated! Winner: {self.state.winner_id or 'nobody'}", "ROUND")
        if self.state.outcome is MatchOutcome.VICTORY:
            self._emit_log("Victory! All opponents defeated.", "ROUND")
        elif self.state.outcome is MatchOutcome.DEFEAT:
            self._emit_log("Defeat!", "ROUND")
        return True

    # ============== Rounds ==============

    def advance_round(self) -> bool:
        """Start the next round on the next stage.

        Only valid after a round ended and while the match is undecided.

        Returns:
            True if a new round started
        """
        if not self.state.terminal or self.state.is_decided:
            reason = "match is decided" if self.state.is_decided else "round still in progress"
            self._emit_log(f"Round advance rejected: {reason}", "WARNING", "WARNING")
            self.event_manager.process_events()
            return False

        self.state.round_index += 1
        self.state.stage_index = (self.state.stage_index + 1) % len(self.config.stages)
        self._start_round()
        return True

    def restart(self) -> None:
        """Return to round 1 on the first stage."""
        self.state = MatchState(max_rounds=self.config.max_rounds)
        self._start_round()

    def _start_round(self) -> None:
        ctx = self.context
        self.state.terminal = False
        self.state.winner_id = None
        self.state.loser_id = None

        ctx.scheduler.clear()
        ctx.physics = ctx.build_physics(self.state.stage_index)
        self._spawn_fighters()

        ctx.event_manager.publish(
            RoundAdvanced(tick=ctx.tick, round_index=self.state.round_index,
                          stage_index=self.state.stage_index, stage_name=self.stage_name),
            source="MatchController"
        )
        self._emit_log(f"Round {self.state.round_index} - {self.stage_name}. Fight!", "ROUND")
        self.event_manager.process_events()

    def _spawn_fighters(self) -> None:
        """Create both fighters with full vitals at their initial positions."""
        ctx = self.context
        floor = ctx.physics.floor
        positions = self.config.initial_positions

        default_provider = AnimationLibrary(self.config.animations)
        ai_rng = np.random.default_rng(int(ctx.rng.integers(0, 2**32)))

        controlled = Fighter(
            CONTROLLED_ID,
            self.config.fighter,
            Vector2(positions.controlled, floor),
            animations=self._animations.get(FighterRole.CONTROLLED, default_provider),
            facing=1,
        )
        autonomous = Fighter(
            AUTONOMOUS_ID,
            self.config.fighter,
            Vector2(positions.autonomous, floor),
            animations=self._animations.get(FighterRole.AUTONOMOUS, default_provider),
            controller=create_ai_behavior(self.ai_type, self.config.ai, ai_rng),
            facing=-1,
        )
        ctx.fighters = {CONTROLLED_ID: controlled, AUTONOMOUS_ID: autonomous}

    def _emit_log(self, message: str, category: str = "SYSTEM", level: str = "INFO") -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                tick=self.context.tick,
                message=message,
                category=category,
                level=level,
                source="MatchController"
            ),
            source="MatchController"
        )
