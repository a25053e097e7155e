"""Event system for publisher-subscriber communication.

This package contains the complete event-driven architecture:
- event_manager.py: Publisher-subscriber event routing
- events.py: Event definitions exposed to presentation and input code
"""

from .event_manager import EventManager
from .events import (
    GameEvent,
    EventType,
    FighterDamaged,
    FighterDefeated,
    ActionChanged,
    AttackResolved,
    ComboScored,
    AIDecisionMade,
    MatchTerminal,
    RoundAdvanced,
    LogMessage,
    DebugMessage,
)

__all__ = [
    "EventManager",
    "GameEvent",
    "EventType",
    "FighterDamaged",
    "FighterDefeated",
    "ActionChanged",
    "AttackResolved",
    "ComboScored",
    "AIDecisionMade",
    "MatchTerminal",
    "RoundAdvanced",
    "LogMessage",
    "DebugMessage",
]
