"""Knight Fight combat core.

Real-time two-fighter duel simulation: a frame-based animation clock,
combat state machine, hit resolution and an autonomous decision engine,
all driven by a single external tick callback.
"""

from .core.config import MatchConfig, load_match_config
from .game.input_handler import InputCommand, InputHandler
from .game.log_manager import LogManager
from .game.match import MatchController, MatchContext

__all__ = [
    "MatchConfig",
    "load_match_config",
    "InputCommand",
    "InputHandler",
    "LogManager",
    "MatchController",
    "MatchContext",
]
