"""Shared value types.

Data Flow:
1. Fighter (game logic) -> FighterSnapshot (read-only view for rendering)
2. Input -> Processing -> Output

Fighter state itself is never handed to presentation code; collaborators
receive a frozen snapshot taken at the end of each tick.
"""

from dataclasses import dataclass
import math

from .game_enums import FighterAction, FighterRole


@dataclass
class Vector2:
    """2D vector for stage positions and velocities.

    Uses (x, y) ordering. x grows to the right, y grows downwards so the
    floor is a larger y than anything standing on it. A fighter's position
    is the horizontal center of its body at foot level.
    """
    x: float
    y: float

    def __add__(self, other: "Vector2") -> "Vector2":
        """Vector addition."""
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        """Vector subtraction."""
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2":
        """Scalar multiplication."""
        return Vector2(self.x * scalar, self.y * scalar)

    def __iter__(self):
        """Make Vector2 iterable for unpacking (x, y order)."""
        yield self.x
        yield self.y

    def copy(self) -> "Vector2":
        return Vector2(self.x, self.y)

    def horizontal_distance_to(self, other: "Vector2") -> float:
        """Absolute distance along the x axis."""
        return abs(self.x - other.x)

    def distance_to(self, other: "Vector2") -> float:
        """Euclidean distance."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"({self.x:.1f}, {self.y:.1f})"


@dataclass(frozen=True)
class FighterSnapshot:
    """Read-only view of one fighter, produced once per tick.

    Consumed by rendering and health-bar display as well as by the
    decision engine when it inspects its opponent.
    """
    fighter_id: str
    role: FighterRole
    position: tuple[float, float]
    facing: int
    current_action: FighterAction
    frame_index: int
    health: float
    max_health: float
    stamina: float
    locked: bool
    attacking: bool
    blocking: bool
    animation_ready: bool = True

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def health_percent(self) -> float:
        if self.max_health <= 0:
            return 0.0
        return self.health / self.max_health
