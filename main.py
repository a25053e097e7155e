#!/usr/bin/env python3
"""Headless demonstration match.

A scripted input source drives the controlled fighter against the
autonomous one at a fixed 60 Hz tick. The collected log is printed at
the end.
"""

import argparse

from knightfight import MatchController, load_match_config
from knightfight.core.config import MatchConfig
from knightfight.core.data import FighterAction
from knightfight.core.events import EventManager
from knightfight.game.input_handler import InputCommand, InputHandler
from knightfight.game.log_manager import LogManager, LogLevel

TICK_MS = 1000.0 / 60


def scripted_command(controller: MatchController) -> InputCommand:
    """Walk toward the opponent, then trade blows and guard when threatened."""
    player = controller.controlled.snapshot()
    enemy = controller.autonomous.snapshot()
    distance = enemy.x - player.x

    if enemy.attacking and abs(distance) < 110:
        return InputCommand.BLOCK_HELD
    if player.current_action is FighterAction.BLOCK:
        return InputCommand.BLOCK_RELEASED
    if abs(distance) > 90:
        return InputCommand.MOVE_RIGHT if distance > 0 else InputCommand.MOVE_LEFT
    return InputCommand.ATTACK_PRESSED


def main():
    parser = argparse.ArgumentParser(description="Run a headless Knight Fight match")
    parser.add_argument("--config", help="Path to a match YAML file")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument("--ticks", type=int, default=3600, help="Maximum number of ticks")
    parser.add_argument("--debug", action="store_true", help="Show AI and input messages")
    args = parser.parse_args()

    config = load_match_config(args.config) if args.config else MatchConfig()

    event_manager = EventManager()
    log_manager = LogManager(event_manager, default_level=LogLevel.INFO)
    if args.debug:
        log_manager.toggle_debug()

    controller = MatchController(config, event_manager, seed=args.seed)
    input_handler = InputHandler(controller.context, event_manager)

    for _ in range(args.ticks):
        if controller.state.terminal:
            if controller.state.is_decided or not controller.advance_round():
                break
            continue
        input_handler.handle_command(scripted_command(controller))
        controller.tick(TICK_MS)

    for message in log_manager.get_messages():
        print(message.format(include_tick=True))

    outcome = controller.state.outcome
    print(f"\nResult: {outcome.name if outcome else 'undecided'} "
          f"after round {controller.state.round_index}")


if __name__ == "__main__":
    main()
