"""
Input routing for the controlled fighter.

Front ends translate device events into discrete InputCommands and hand
them to the InputHandler, which dispatches each one to the controlled
fighter of the match context. The fighter validates commands itself; a
rejected command is not an error and simply has no effect.

Intake is switched off when a round ends and back on when the next round
starts, driven by MatchTerminal and RoundAdvanced notifications. Move keys
that stay down through a locked action resume walking once the fighter is
back to Idle.
"""

from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from ..core.data import FighterAction
from ..core.events import ActionChanged, EventType, LogMessage

if TYPE_CHECKING:
    from ..core.events import EventManager, GameEvent
    from .fighter import Fighter
    from .match import MatchContext


class InputCommand(Enum):
    """Discrete commands accepted from an input source."""
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    MOVE_STOP = "move_stop"
    ATTACK_PRESSED = "attack_pressed"
    BLOCK_HELD = "block_held"
    BLOCK_RELEASED = "block_released"
    DODGE_PRESSED = "dodge_pressed"


# Default keyboard layout: (key name, pressed) -> command
DEFAULT_KEY_BINDINGS: dict[tuple[str, bool], InputCommand] = {
    ("a", True): InputCommand.MOVE_LEFT,
    ("left", True): InputCommand.MOVE_LEFT,
    ("d", True): InputCommand.MOVE_RIGHT,
    ("right", True): InputCommand.MOVE_RIGHT,
    ("j", True): InputCommand.ATTACK_PRESSED,
    ("k", True): InputCommand.BLOCK_HELD,
    ("k", False): InputCommand.BLOCK_RELEASED,
    ("space", True): InputCommand.DODGE_PRESSED,
}


class InputHandler:
    """Dispatches input commands to the controlled fighter.

    Args:
        ctx: Match context whose controlled fighter receives the commands
        event_manager: Event bus for round notifications and logging
        key_bindings: Optional key layout used by handle_key()
    """

    def __init__(
        self,
        ctx: "MatchContext",
        event_manager: "EventManager",
        key_bindings: Optional[dict[tuple[str, bool], InputCommand]] = None,
    ):
        self.ctx = ctx
        self.event_manager = event_manager
        self.key_bindings = dict(key_bindings or DEFAULT_KEY_BINDINGS)
        self.enabled = True

        # Horizontal keys currently down; the latest press wins
        self._held_directions: list[int] = []

        self._actions: dict[InputCommand, Callable[["Fighter"], bool]] = {
            InputCommand.MOVE_LEFT: lambda f: self._press_direction(f, -1),
            InputCommand.MOVE_RIGHT: lambda f: self._press_direction(f, 1),
            InputCommand.MOVE_STOP: self._stop,
            InputCommand.ATTACK_PRESSED: lambda f: f.attack(),
            InputCommand.BLOCK_HELD: lambda f: f.block(True),
            InputCommand.BLOCK_RELEASED: lambda f: f.block(False),
            InputCommand.DODGE_PRESSED: lambda f: f.dodge(self.held_direction or None),
        }

        self.event_manager.subscribe(
            EventType.MATCH_TERMINAL,
            self._on_match_terminal,
            subscriber_name="InputHandler.match_terminal"
        )
        self.event_manager.subscribe(
            EventType.ROUND_ADVANCED,
            self._on_round_advanced,
            subscriber_name="InputHandler.round_advanced"
        )
        self.event_manager.subscribe(
            EventType.ACTION_CHANGED,
            self._on_action_changed,
            subscriber_name="InputHandler.action_changed"
        )

    @property
    def held_direction(self) -> int:
        """Direction of the most recently pressed, still held, move key."""
        return self._held_directions[-1] if self._held_directions else 0

    def handle_command(self, command: InputCommand) -> bool:
        """Route one command to the controlled fighter.

        Returns:
            True if the fighter accepted the command
        """
        if not self.enabled:
            return False

        fighter = self.ctx.controlled
        accepted = self._actions[command](fighter)
        if accepted:
            self._emit_log(f"{fighter.fighter_id}: {command.value}")
        return accepted

    def handle_key(self, key: str, pressed: bool) -> bool:
        """Translate a key event through the bindings and route it.

        Releasing a move key stops walking once no move key is held.
        """
        key = key.lower()
        command = self.key_bindings.get((key, pressed))
        if command is not None:
            return self.handle_command(command)

        if not pressed:
            released = self.key_bindings.get((key, True))
            if released is InputCommand.MOVE_LEFT:
                return self._release_direction(-1)
            if released is InputCommand.MOVE_RIGHT:
                return self._release_direction(1)
        return False

    def _press_direction(self, fighter: "Fighter", direction: int) -> bool:
        if direction in self._held_directions:
            self._held_directions.remove(direction)
        self._held_directions.append(direction)
        return fighter.move(direction)

    def _release_direction(self, direction: int) -> bool:
        if direction in self._held_directions:
            self._held_directions.remove(direction)
        if not self.enabled:
            return False
        fighter = self.ctx.controlled
        if self.held_direction:
            return fighter.move(self.held_direction)
        return self.handle_command(InputCommand.MOVE_STOP)

    def _stop(self, fighter: "Fighter") -> bool:
        self._held_directions.clear()
        return fighter.move(0)

    def _on_action_changed(self, event: "GameEvent") -> None:
        """Resume walking when a locked action ends with a move key still down."""
        if not isinstance(event, ActionChanged) or not self.enabled or not self.held_direction:
            return
        fighter = self.ctx.controlled
        if (event.fighter_id != fighter.fighter_id
                or event.new_action is not FighterAction.IDLE
                or fighter.current_action is not FighterAction.IDLE):
            return
        fighter.move(self.held_direction)

    def _on_match_terminal(self, event: "GameEvent") -> None:
        self.enabled = False
        self._held_directions.clear()

    def _on_round_advanced(self, event: "GameEvent") -> None:
        self.enabled = True
        self._held_directions.clear()

    def _emit_log(self, message: str) -> None:
        self.event_manager.publish(
            LogMessage(
                tick=self.ctx.tick,
                message=message,
                category="INPUT",
                level="DEBUG",
                source="InputHandler"
            ),
            source="InputHandler"
        )
