"""Centralized game enums and constants.

This module contains all core enums that are used across multiple modules,
eliminating duplication and providing a single source of truth.
"""

from enum import Enum, auto


class FighterRole(Enum):
    """Who issues commands to a fighter."""
    CONTROLLED = "controlled"
    AUTONOMOUS = "autonomous"


class FighterAction(Enum):
    """Combat/animation states of a fighter."""
    IDLE = "idle"
    WALK = "walk"
    ATTACK = "attack"
    BLOCK = "block"
    DODGE = "dodge"
    DEFEATED = "defeated"


class AIChoice(Enum):
    """Commands the decision engine can draw."""
    ATTACK = "attack"
    BLOCK = "block"
    RETREAT = "retreat"
    APPROACH = "approach"


class RangeTier(Enum):
    """Distance classification used by the decision engine."""
    CLOSE = auto()
    MEDIUM = auto()
    FAR = auto()


class HitOutcome(Enum):
    """Result of a single hit resolution."""
    HIT = auto()
    BLOCKED = auto()
    EVADED = auto()     # Defender invulnerable
    MISS = auto()       # Out of range
    NO_ATTACK = auto()  # Attacker not in a live activation


class MatchOutcome(Enum):
    """Overall result once the match is decided."""
    VICTORY = auto()
    DEFEAT = auto()


# Actions that must run to completion once committed
LOCKED_ACTIONS = frozenset({
    FighterAction.ATTACK,
    FighterAction.BLOCK,
    FighterAction.DODGE,
})

ACTION_NAMES = {
    FighterAction.IDLE: "Idle",
    FighterAction.WALK: "Walk",
    FighterAction.ATTACK: "Attack",
    FighterAction.BLOCK: "Block",
    FighterAction.DODGE: "Dodge",
    FighterAction.DEFEATED: "Defeated",
}
