"""
Combat resolution system for applying hits.

This module handles the combat math of a single hit: range check,
invulnerability, block reduction, damage band and health clamping. It has
no knowledge of animation timing; the fighter state machine decides when
a hit is evaluated and the attacker's latch guarantees at most one
application per attack activation.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import numpy as np

from ..core.config import CombatTuning
from ..core.data import FighterRole, HitOutcome
from ..core.events import AttackResolved, ComboScored, FighterDamaged, LogMessage

if TYPE_CHECKING:
    from ..core.events import EventManager
    from .fighter import Fighter
    from .match import MatchContext


@dataclass
class CombatResult:
    """Result of one hit evaluation."""
    outcome: HitOutcome
    damage: float = 0.0
    distance: float = 0.0
    defender_health: Optional[float] = None

    @property
    def landed(self) -> bool:
        return self.outcome in (HitOutcome.HIT, HitOutcome.BLOCKED) and self.damage > 0


class CombatResolver:
    """Evaluates an attacker's hit against a defender.

    Args:
        tuning: Range, damage and block constants
        event_manager: Bus for damage notifications and battle log
        rng: Random source for the damage band
    """

    # Combos shorter than this are not announced
    MIN_ANNOUNCED_COMBO = 2

    def __init__(
        self,
        tuning: CombatTuning,
        event_manager: "EventManager",
        rng: Optional[np.random.Generator] = None
    ):
        self.tuning = tuning
        self.event_manager = event_manager
        self.rng = rng if rng is not None else np.random.default_rng()

    def roll_damage(self) -> float:
        """Base damage, optionally spread uniformly within the variance band."""
        base = self.tuning.base_damage
        if self.tuning.damage_variance <= 0:
            return base
        spread = self.tuning.damage_variance
        return float(base + self.rng.uniform(-spread, spread))

    def resolve(self, attacker: "Fighter", defender: "Fighter",
                ctx: Optional["MatchContext"] = None) -> CombatResult:
        """Resolve the attacker's current activation against the defender.

        The attacker's latch is set on every evaluation, hit or miss, so
        repeated calls within the same activation never apply damage twice.

        Args:
            attacker: Fighter whose hit window is live
            defender: Fighter being struck
            ctx: Match context, used for the tick stamp on events

        Returns:
            CombatResult describing what happened
        """
        tick = ctx.tick if ctx is not None else 0

        if not attacker.attacking or attacker.has_landed_this_activation:
            return CombatResult(outcome=HitOutcome.NO_ATTACK)

        attacker.has_landed_this_activation = True
        distance = attacker.position.horizontal_distance_to(defender.position)

        if distance >= self.tuning.attack_range or defender.is_defeated:
            result = CombatResult(outcome=HitOutcome.MISS, distance=distance,
                                  defender_health=defender.health)
        elif defender.invulnerable:
            result = CombatResult(outcome=HitOutcome.EVADED, distance=distance,
                                  defender_health=defender.health)
        else:
            damage = self.roll_damage()
            outcome = HitOutcome.HIT
            if defender.blocking:
                damage *= self.tuning.block_reduction
                outcome = HitOutcome.BLOCKED

            applied = defender.take_damage(damage)
            result = CombatResult(outcome=outcome, damage=applied, distance=distance,
                                  defender_health=defender.health)

            self.event_manager.publish(
                FighterDamaged(tick=tick, fighter_id=defender.fighter_id,
                               amount=applied, resulting_health=defender.health),
                source="CombatResolver"
            )

            # Only the controlled fighter builds combos; they last the whole round
            if outcome is HitOutcome.HIT and attacker.role is FighterRole.CONTROLLED:
                attacker.combo += 1
                if attacker.combo >= self.MIN_ANNOUNCED_COMBO:
                    self.event_manager.publish(
                        ComboScored(tick=tick, fighter_id=attacker.fighter_id, combo=attacker.combo),
                        source="CombatResolver"
                    )

        self.event_manager.publish(
            AttackResolved(tick=tick, attacker_id=attacker.fighter_id,
                           defender_id=defender.fighter_id, outcome=result.outcome,
                           damage=result.damage, distance=distance),
            source="CombatResolver"
        )
        self._emit_log(tick, self._describe(attacker, defender, result))
        return result

    def _describe(self, attacker: "Fighter", defender: "Fighter", result: CombatResult) -> str:
        if result.outcome is HitOutcome.MISS:
            return f"{attacker.fighter_id} swings at {defender.fighter_id} and misses ({result.distance:.0f} away)"
        if result.outcome is HitOutcome.EVADED:
            return f"{defender.fighter_id} evades {attacker.fighter_id}'s attack"
        verb = "hits" if result.outcome is HitOutcome.HIT else "is blocked by"
        return (f"{attacker.fighter_id} {verb} {defender.fighter_id} "
                f"({result.damage:.1f} damage, {defender.health:.1f} HP left)")

    def _emit_log(self, tick: int, message: str, level: str = "INFO") -> None:
        """Emit a log message event."""
        self.event_manager.publish(
            LogMessage(
                tick=tick,
                message=message,
                category="BATTLE",
                level=level,
                source="CombatResolver"
            ),
            source="CombatResolver"
        )
