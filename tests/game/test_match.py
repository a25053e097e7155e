"""
Unit tests for the MatchController.

Tests terminal detection, freezing, round and stage progression, match
outcome and the context handed to components.
"""

import pytest

from knightfight.core.config import StageConfig
from knightfight.core.data import FighterAction, MatchOutcome
from knightfight.core.events import EventType
from knightfight.game.ai.ai_behaviors import AIType, RangeTierAI


def win_round(controller, advance):
    """Let the controlled fighter finish off the autonomous one."""
    controller.autonomous.health = 5.0
    controller.controlled.attack()
    advance(controller, 13)
    assert controller.state.terminal


class TestContext:
    """Test MatchContext lookups."""

    def test_opponent_lookup(self, ctx):
        """Each fighter's opponent is the other one."""
        assert ctx.opponent_of(ctx.controlled) is ctx.autonomous
        assert ctx.opponent_of(ctx.autonomous) is ctx.controlled
        assert ctx.get("player") is ctx.controlled

    def test_physics_uses_stage_floor_and_bounds(self, ctx):
        """The integrator is built for the current stage."""
        assert ctx.physics.floor == 450.0
        assert (ctx.physics.min_x, ctx.physics.max_x) == (90.0, 934.0)


class TestTick:
    """Test the tick entry point."""

    def test_tick_returns_snapshots(self, controller):
        """Each tick reports both fighters."""
        snapshots = controller.tick(20.0)
        assert set(snapshots) == {"player", "enemy"}
        assert controller.context.tick == 1
        assert controller.context.clock_ms == 20.0

    def test_negative_delta_rejected(self, controller):
        """Time cannot run backwards."""
        with pytest.raises(ValueError):
            controller.tick(-1.0)

    def test_long_tick_still_lands_hit(self, close_match):
        """A tick long enough to skip the whole hit window still connects once."""
        close_match.controlled.attack()
        close_match.tick(700.0)

        assert close_match.autonomous.health == 88.0
        assert close_match.controlled.has_landed_this_activation

        close_match.tick(20.0)
        assert close_match.autonomous.health == 88.0

    def test_events_delivered_each_tick(self, controller, events_of):
        """Queued notifications reach subscribers at the end of the tick."""
        controller.controlled.move(1)
        controller.tick(20.0)
        assert len(events_of(EventType.ACTION_CHANGED)) == 1


class TestTerminal:
    """Test terminal detection and freezing."""

    def test_defeat_marks_terminal(self, close_match, advance, events_of):
        """Zero health defeats the fighter and ends the round."""
        win_round(close_match, advance)
        state = close_match.state

        assert close_match.autonomous.current_action is FighterAction.DEFEATED
        assert state.winner_id == "player"
        assert state.loser_id == "enemy"
        assert state.outcome is None

        terminal = events_of(EventType.MATCH_TERMINAL)
        assert len(terminal) == 1
        assert terminal[0].winner_id == "player"
        assert [e.fighter_id for e in events_of(EventType.FIGHTER_DEFEATED)] == ["enemy"]

    def test_killing_blow_delivered_before_defeat(self, close_match, advance, recorded_events):
        """Subscribers see the final damage before the round ends."""
        win_round(close_match, advance)
        watched = {EventType.FIGHTER_DAMAGED, EventType.FIGHTER_DEFEATED, EventType.MATCH_TERMINAL}

        order = [e.event_type for e in recorded_events if e.event_type in watched]
        assert order == [EventType.FIGHTER_DAMAGED, EventType.FIGHTER_DEFEATED, EventType.MATCH_TERMINAL]

    def test_terminal_freezes_fighters(self, close_match, advance):
        """No further state-machine updates run once terminal."""
        win_round(close_match, advance)
        frozen = close_match.snapshots()
        tick = close_match.context.tick

        snapshots = advance(close_match, 50)

        assert snapshots == frozen
        assert close_match.context.tick == tick

    def test_controlled_defeat_decides_match(self, close_match, advance):
        """Losing a round as the controlled fighter is a defeat."""
        close_match.controlled.health = 5.0
        close_match.autonomous.attack()
        advance(close_match, 13)

        assert close_match.state.terminal
        assert close_match.state.outcome is MatchOutcome.DEFEAT
        assert close_match.state.winner_id == "enemy"
        assert not close_match.advance_round()

    def test_final_round_win_is_victory(self, make_match, advance):
        """Winning the last round wins the match."""
        controller = make_match(controlled_x=200.0, autonomous_x=260.0, max_rounds=1)
        win_round(controller, advance)
        assert controller.state.outcome is MatchOutcome.VICTORY
        assert controller.state.is_decided

    def test_double_knockout(self, controller):
        """Both fighters at zero health leave no winner."""
        controller.controlled.health = 0.0
        controller.autonomous.health = 0.0
        controller.tick(20.0)

        assert controller.state.terminal
        assert controller.state.winner_id is None
        assert controller.state.outcome is MatchOutcome.DEFEAT
        assert controller.controlled.is_defeated
        assert controller.autonomous.is_defeated

    def test_pending_tasks_dropped_on_terminal(self, close_match, advance):
        """Deferred work does not survive the end of a round."""
        close_match.controlled.block(True)
        advance(close_match, 1)
        assert close_match.context.scheduler.pending_count == 1

        close_match.autonomous.health = 0.0
        advance(close_match, 1)
        assert close_match.context.scheduler.pending_count == 0


class TestRounds:
    """Test round and stage progression."""

    def test_advance_round_resets_fighters(self, close_match, advance, events_of):
        """A new round recreates both fighters on the next stage."""
        win_round(close_match, advance)
        assert close_match.advance_round()

        state = close_match.state
        assert state.round_index == 2
        assert state.stage_index == 1
        assert not state.terminal
        assert close_match.stage_name == "Dark Dungeon"

        player, enemy = close_match.controlled, close_match.autonomous
        assert player.health == 100.0 and enemy.health == 100.0
        assert player.position.x == 200.0 and enemy.position.x == 260.0
        assert enemy.current_action is FighterAction.IDLE

        advanced = events_of(EventType.ROUND_ADVANCED)
        assert len(advanced) == 1
        assert advanced[0].stage_index == 1
        assert advanced[0].stage_name == "Dark Dungeon"

    def test_advance_rejected_mid_round(self, controller):
        """Rounds only advance after a terminal state."""
        assert not controller.advance_round()
        assert controller.state.round_index == 1

    def test_stage_index_wraps(self, make_match, advance):
        """Stages cycle once every stage has been used."""
        controller = make_match(controlled_x=200.0, autonomous_x=260.0, max_rounds=5)
        for _ in range(3):
            win_round(controller, advance)
            assert controller.advance_round()

        assert controller.state.round_index == 4
        assert controller.state.stage_index == 0

    def test_stage_floor_applies(self, make_match, advance):
        """Fighters spawn on the floor of the current stage."""
        controller = make_match(controlled_x=200.0, autonomous_x=260.0,
                                stages=(StageConfig("Low", 450.0), StageConfig("High", 400.0)))
        win_round(controller, advance)
        controller.advance_round()

        assert controller.context.physics.floor == 400.0
        assert controller.controlled.position.y == 400.0
        advance(controller, 5)
        assert controller.controlled.position.y == 400.0

    def test_restart(self, close_match, advance):
        """restart() returns to round 1 on the first stage."""
        win_round(close_match, advance)
        close_match.advance_round()
        close_match.restart()

        assert close_match.state.round_index == 1
        assert close_match.state.stage_index == 0
        assert close_match.state.outcome is None
        assert close_match.controlled.health == 100.0

    def test_autonomous_fighter_gets_decision_engine(self, make_match):
        """The default match drives the autonomous fighter with the range-tier engine."""
        controller = make_match(ai_type=AIType.RANGE_TIER)
        assert isinstance(controller.autonomous.controller, RangeTierAI)
        assert controller.controlled.controller is None
