"""Fighter combat/animation state machine.

A Fighter owns one combatant's vitals, combat flags, cooldowns, kinematic
body and animation clips. Commands (move, attack, block, dodge) are the
same for human input and for the decision engine; the state machine
validates each one and silently drops anything illegal in the current
state. Per-tick work happens in update(), in a fixed order:

    command intake -> cooldown decay -> animation advance
    -> hit-window check -> physics -> lock completion

States:
    Idle, Walk      free states, accept every command
    Attack          locked until its clip finishes
    Block           locked while the guard is held, capped in duration
    Dodge           locked and invulnerable until its clip finishes
    Defeated        terminal for the round, rejects everything
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..core.config import FighterConfig
from ..core.data import FighterAction, FighterRole, FighterSnapshot, Vector2, LOCKED_ACTIONS
from ..core.engine import AnimationClip, AnimationLibrary, AnimationProvider, KinematicBody, build_clips
from ..core.events import ActionChanged

if TYPE_CHECKING:
    from .ai.ai_behaviors import AIBehavior
    from .match import MatchContext


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


class Fighter:
    """One combatant.

    Polymorphism over human and autonomous fighters is a matter of
    composition: an autonomous fighter simply carries a decision engine
    in `controller`, which issues commands through the public interface.

    Args:
        fighter_id: Stable identifier used in events and snapshots
        config: Vitals, costs and timings
        position: Spawn position (body center at foot level)
        animations: Provider of per-action frame geometry
        controller: Decision engine for autonomous fighters
        facing: Initial facing, +1 right or -1 left
    """

    def __init__(
        self,
        fighter_id: str,
        config: FighterConfig,
        position: Vector2,
        animations: Optional[AnimationProvider] = None,
        controller: Optional["AIBehavior"] = None,
        facing: int = 1,
    ):
        self.fighter_id = fighter_id
        self.config = config
        self.controller = controller

        self.body = KinematicBody(position=position.copy(), width=config.width,
                                  facing=1 if facing >= 0 else -1)

        # Vitals
        self.health = config.max_health
        self.stamina = config.max_stamina

        # Combat flags
        self.attacking = False
        self.blocking = False
        self.dodging = False
        self.invulnerable = False

        # Timers (ms)
        self.attack_cooldown = 0.0
        self.dodge_cooldown = 0.0

        # Hit latch for the current attack activation
        self.has_landed_this_activation = False
        # Clean hits landed this round (controlled fighter only)
        self.combo = 0

        self._animations = animations or AnimationLibrary()
        self._clips = build_clips(self._animations)
        self._action = FighterAction.IDLE
        self._locked = False
        self._generation = 0

        self._move_direction = 0
        self._block_held = False
        self._block_cap_pending = False
        self._hit_scheduled = False
        self._pending_transitions: list[tuple[FighterAction, FighterAction]] = []

    # ============== Read-only State ==============

    @property
    def role(self) -> FighterRole:
        return FighterRole.AUTONOMOUS if self.controller is not None else FighterRole.CONTROLLED

    @property
    def current_action(self) -> FighterAction:
        return self._action

    @property
    def clip(self) -> AnimationClip:
        """Clip of the current action."""
        return self._clips[self._action]

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def is_defeated(self) -> bool:
        return self._action is FighterAction.DEFEATED

    @property
    def action_generation(self) -> int:
        """Bumped on every action transition; keys deferred tasks."""
        return self._generation

    @property
    def position(self) -> Vector2:
        return self.body.position

    @property
    def velocity(self) -> Vector2:
        return self.body.velocity

    @property
    def facing(self) -> int:
        return self.body.facing

    @property
    def grounded(self) -> bool:
        return self.body.grounded

    @property
    def move_direction(self) -> int:
        return self._move_direction

    @property
    def block_held(self) -> bool:
        return self._block_held

    @property
    def animation_ready(self) -> bool:
        return self._animations.is_ready(self._action)

    def snapshot(self) -> FighterSnapshot:
        """Read-only view for rendering and for the opponent's AI."""
        return FighterSnapshot(
            fighter_id=self.fighter_id,
            role=self.role,
            position=self.body.position.to_tuple(),
            facing=self.body.facing,
            current_action=self._action,
            frame_index=self.clip.frame_index,
            health=self.health,
            max_health=self.config.max_health,
            stamina=self.stamina,
            locked=self._locked,
            attacking=self.attacking,
            blocking=self.blocking,
            animation_ready=self.animation_ready,
        )

    # ============== Commands ==============

    def move(self, direction: int) -> bool:
        """Hold a walking direction (-1 left, +1 right, 0 stop).

        Returns:
            True if the command was accepted
        """
        if self._locked or self.is_defeated:
            return False

        direction = _sign(direction)
        self._move_direction = direction
        if direction != 0:
            self.body.velocity.x = direction * self.config.move_speed
            if self.body.grounded:
                self._set_action(FighterAction.WALK)
        return True

    def attack(self) -> bool:
        """Commit to an attack activation.

        Rejected while locked, while the attack cooldown runs, or without
        enough stamina.
        """
        if self._locked or self.is_defeated:
            return False
        if self.attack_cooldown > 0 or self.stamina < self.config.attack_stamina_cost:
            return False

        self.stamina -= self.config.attack_stamina_cost
        self.attacking = True
        self.has_landed_this_activation = False
        self._hit_scheduled = False
        self.attack_cooldown = self.config.attack_cooldown_ms
        self._enter_locked(FighterAction.ATTACK)
        return True

    def block(self, held: bool = True) -> bool:
        """Raise or release the guard.

        Raising enters a locked Block that lasts while the guard is held,
        capped at block_max_hold_ms. Releasing only ends the hold; the
        state machine performs the Block -> Idle completion on its next
        tick.
        """
        if not held:
            if self._action is FighterAction.BLOCK:
                self._block_held = False
                return True
            return False

        if self._locked or self.is_defeated:
            return False

        self.blocking = True
        self._block_held = True
        self._block_cap_pending = True
        self._enter_locked(FighterAction.BLOCK)
        return True

    def dodge(self, direction: Optional[int] = None) -> bool:
        """Dodge with an instantaneous impulse.

        Args:
            direction: Input direction; when omitted the fighter backsteps
                away from where it faces.
        """
        if self._locked or self.is_defeated or not self.body.grounded:
            return False
        if self.dodge_cooldown > 0 or self.stamina < self.config.dodge_stamina_cost:
            return False

        self.stamina -= self.config.dodge_stamina_cost
        self.dodging = True
        self.invulnerable = True
        self.dodge_cooldown = self.config.dodge_cooldown_ms
        self._enter_locked(FighterAction.DODGE)

        impulse_direction = _sign(direction) if direction else -self.body.facing
        self.body.velocity.x = impulse_direction * self.config.dodge_impulse
        return True

    # ============== Match-driven Transitions ==============

    def take_damage(self, amount: float) -> float:
        """Reduce health, clamped to [0, max_health].

        Returns:
            Damage actually applied
        """
        if amount <= 0 or self.is_defeated:
            return 0.0

        new_health = max(0.0, min(self.config.max_health, self.health - amount))
        applied = self.health - new_health
        self.health = new_health
        return applied

    def defeat(self) -> bool:
        """Force the terminal Defeated state. Irreversible for the round."""
        if self.is_defeated:
            return False

        self.attacking = False
        self.blocking = False
        self.dodging = False
        self.invulnerable = False
        self._locked = False
        self._block_held = False
        self._move_direction = 0
        self.body.velocity = Vector2(0.0, 0.0)
        self._set_action(FighterAction.DEFEATED)
        return True

    # ============== Tick ==============

    def update(self, delta_ms: float, ctx: "MatchContext") -> None:
        """Advance this fighter by one tick."""
        if self.is_defeated:
            self.publish_pending(ctx)
            return

        opponent = ctx.opponent_of(self)

        self._intake(ctx)

        self.attack_cooldown = max(0.0, self.attack_cooldown - delta_ms)
        self.dodge_cooldown = max(0.0, self.dodge_cooldown - delta_ms)
        if not self.attacking and not self.dodging:
            self.stamina = min(self.config.max_stamina, self.stamina + self.config.stamina_regen)

        self.clip.advance(delta_ms)

        if (self.attacking and opponent is not None
                and (self.clip.is_in_hit_window() or self.clip.swept_hit_window)
                and not self.has_landed_this_activation
                and not self._hit_scheduled):
            self._commit_hit(opponent, ctx)

        ctx.physics.integrate(self.body, opponent.body.position.x if opponent is not None else None)

        if (self._action is FighterAction.WALK and self._move_direction == 0
                and abs(self.body.velocity.x) < self.config.walk_stop_speed):
            self._set_action(FighterAction.IDLE)

        self._check_lock_completion()
        self.publish_pending(ctx)

    def publish_pending(self, ctx: "MatchContext") -> None:
        """Publish queued ActionChanged events."""
        for old_action, new_action in self._pending_transitions:
            ctx.event_manager.publish(
                ActionChanged(tick=ctx.tick, fighter_id=self.fighter_id,
                              old_action=old_action, new_action=new_action),
                source=f"Fighter.{self.fighter_id}"
            )
        self._pending_transitions.clear()

    # ============== Internals ==============

    def _intake(self, ctx: "MatchContext") -> None:
        """Apply held input and arm deferred tasks for newly entered actions."""
        if self._block_cap_pending and self._action is FighterAction.BLOCK:
            ctx.scheduler.schedule(
                self.config.block_max_hold_ms,
                self.fighter_id,
                self._generation,
                self._release_block_hold,
                description=f"{self.fighter_id} block hold cap",
            )
        self._block_cap_pending = False

        if not self._locked and self._move_direction != 0:
            self.body.velocity.x = self._move_direction * self.config.move_speed

    def _release_block_hold(self) -> None:
        self._block_held = False

    def _commit_hit(self, opponent: "Fighter", ctx: "MatchContext") -> None:
        delay = ctx.config.combat.hit_delay_ms
        if delay <= 0:
            ctx.combat_resolver.resolve(self, opponent, ctx)
            return

        self._hit_scheduled = True
        ctx.scheduler.schedule(
            delay,
            self.fighter_id,
            self._generation,
            lambda: ctx.combat_resolver.resolve(self, opponent, ctx),
            description=f"{self.fighter_id} delayed hit",
        )

    def _check_lock_completion(self) -> None:
        if not self._locked:
            return

        if self._action in (FighterAction.ATTACK, FighterAction.DODGE):
            done = self.clip.finished
        elif self._action is FighterAction.BLOCK:
            done = not self._block_held
        else:
            done = True

        if done:
            self._finish_lock()

    def _finish_lock(self) -> None:
        self._locked = False
        self.attacking = False
        self.blocking = False
        self.dodging = False
        self.invulnerable = False
        self.has_landed_this_activation = False
        self._hit_scheduled = False
        self._block_held = False
        self._set_action(FighterAction.IDLE)

    def _enter_locked(self, action: FighterAction) -> None:
        assert action in LOCKED_ACTIONS
        self._move_direction = 0
        self._locked = True
        self._set_action(action)

    def _set_action(self, action: FighterAction) -> None:
        if action is self._action:
            return
        old_action = self._action
        self._action = action
        self._generation += 1
        self._clips[action].reset()
        self._pending_transitions.append((old_action, action))

    def __repr__(self) -> str:
        return (f"Fighter({self.fighter_id!r}, action={self._action.value}, "
                f"health={self.health:.1f}, x={self.body.position.x:.1f})")
