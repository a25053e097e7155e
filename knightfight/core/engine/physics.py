"""Per-tick kinematics for fighters.

Velocities are expressed in stage units per tick, matching a fixed frame
cadence: the integrator adds velocity to position once per tick regardless
of the tick's wall-clock length. Timers elsewhere in the core use
milliseconds.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..config import PhysicsTuning
from ..data.data_structures import Vector2


@dataclass
class KinematicBody:
    """Position, velocity and ground contact of one fighter.

    facing is written only by the integrator, which derives it from the
    opponent's relative position (or the last meaningful horizontal
    velocity when there is no opponent to face).
    """
    position: Vector2
    velocity: Vector2 = field(default_factory=lambda: Vector2(0.0, 0.0))
    width: float = 80.0
    facing: int = 1
    grounded: bool = True

    @property
    def half_width(self) -> float:
        return self.width / 2


class PhysicsIntegrator:
    """Advances bodies inside one stage's bounds.

    Args:
        tuning: Gravity and friction constants
        floor: Floor height (y) of the current stage
        min_x: Smallest allowed body center
        max_x: Largest allowed body center
    """

    # Horizontal speed below which velocity does not change facing
    FACING_SPEED_THRESHOLD = 0.5

    def __init__(self, tuning: PhysicsTuning, floor: float, min_x: float, max_x: float):
        self.tuning = tuning
        self.floor = floor
        self.min_x = min_x
        self.max_x = max_x

    def integrate(self, body: KinematicBody, opponent_x: Optional[float] = None) -> None:
        """Run one tick of integration on a body."""
        if not body.grounded:
            body.velocity.y += self.tuning.gravity

        body.position.x += body.velocity.x
        body.position.y += body.velocity.y

        body.velocity.x *= self.tuning.friction

        # Ground collision
        if body.position.y >= self.floor:
            body.position.y = self.floor
            body.velocity.y = 0.0
            body.grounded = True
        else:
            body.grounded = False

        body.position.x = max(self.min_x, min(self.max_x, body.position.x))

        self.update_facing(body, opponent_x)

    def update_facing(self, body: KinematicBody, opponent_x: Optional[float]) -> None:
        """Face the opponent, or the direction of travel without one."""
        if opponent_x is not None and opponent_x != body.position.x:
            body.facing = 1 if opponent_x > body.position.x else -1
        elif body.velocity.x > self.FACING_SPEED_THRESHOLD:
            body.facing = 1
        elif body.velocity.x < -self.FACING_SPEED_THRESHOLD:
            body.facing = -1

    def place(self, body: KinematicBody, x: float) -> None:
        """Put a body on the floor at x, at rest."""
        body.position = Vector2(max(self.min_x, min(self.max_x, x)), self.floor)
        body.velocity = Vector2(0.0, 0.0)
        body.grounded = True
