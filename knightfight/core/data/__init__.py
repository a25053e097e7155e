"""Core data structures and definitions.

This package contains fundamental data types:
- data_structures.py: Vector2 and the per-fighter read-only snapshot
- game_enums.py: Centralized enums for fighter actions, roles and AI choices
"""

from .data_structures import Vector2, FighterSnapshot
from .game_enums import (
    FighterAction,
    FighterRole,
    AIChoice,
    RangeTier,
    HitOutcome,
    MatchOutcome,
    LOCKED_ACTIONS,
    ACTION_NAMES,
)

__all__ = [
    "Vector2",
    "FighterSnapshot",
    "FighterAction",
    "FighterRole",
    "AIChoice",
    "RangeTier",
    "HitOutcome",
    "MatchOutcome",
    "LOCKED_ACTIONS",
    "ACTION_NAMES",
]
