"""Combat events and notifications.

This module defines all events that collaborators can subscribe to,
following the event-driven architecture with tick-based timing.

Event Design Principles:
- Events are immutable dataclasses
- All events include the tick number they were produced on
- Events carry fighter ids, never live Fighter objects, so subscribers
  cannot mutate combat state through them
- Events use proper enums instead of magic strings
"""

from dataclasses import dataclass, field
from typing import Optional
from abc import ABC
from enum import Enum, auto

from ..data.game_enums import FighterAction, HitOutcome, AIChoice, RangeTier


class EventType(Enum):
    """Types of events that collaborators can subscribe to."""
    # Fighter Events
    FIGHTER_DAMAGED = auto()
    FIGHTER_DEFEATED = auto()
    ACTION_CHANGED = auto()

    # Combat Events
    ATTACK_RESOLVED = auto()
    COMBO_SCORED = auto()

    # AI Events
    AI_DECISION_MADE = auto()

    # Match Events
    MATCH_TERMINAL = auto()
    ROUND_ADVANCED = auto()

    # Logging Events
    LOG_MESSAGE = auto()
    DEBUG_MESSAGE = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all events."""
    tick: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class FighterDamaged(GameEvent):
    """Event emitted when damage is applied to a fighter."""
    fighter_id: str
    amount: float
    resulting_health: float

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.FIGHTER_DAMAGED)


@dataclass(frozen=True)
class FighterDefeated(GameEvent):
    """Event emitted when a fighter enters the Defeated state."""
    fighter_id: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.FIGHTER_DEFEATED)


@dataclass(frozen=True)
class ActionChanged(GameEvent):
    """Event emitted on every fighter state transition."""
    fighter_id: str
    old_action: FighterAction
    new_action: FighterAction

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ACTION_CHANGED)


@dataclass(frozen=True)
class AttackResolved(GameEvent):
    """Event emitted once per attack activation when the hit is evaluated."""
    attacker_id: str
    defender_id: str
    outcome: HitOutcome
    damage: float
    distance: float

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ATTACK_RESOLVED)


@dataclass(frozen=True)
class ComboScored(GameEvent):
    """Event emitted when a fighter chains two or more clean hits."""
    fighter_id: str
    combo: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.COMBO_SCORED)


@dataclass(frozen=True)
class AIDecisionMade(GameEvent):
    """Event emitted when the decision engine issues a command."""
    fighter_id: str
    choice: AIChoice
    tier: RangeTier
    reasoning: str = ""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.AI_DECISION_MADE)


@dataclass(frozen=True)
class MatchTerminal(GameEvent):
    """Event emitted when a round ends because a fighter reached zero health."""
    winner_id: Optional[str]
    loser_id: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.MATCH_TERMINAL)


@dataclass(frozen=True)
class RoundAdvanced(GameEvent):
    """Event emitted after fighters are reset for a new round."""
    round_index: int
    stage_index: int
    stage_name: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ROUND_ADVANCED)


@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: str = "INFO"
    source: str = "unknown"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class DebugMessage(GameEvent):
    """Event emitted for debug-specific messages."""
    message: str
    source: str
    context: Optional[dict] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DEBUG_MESSAGE)
