"""
Unit tests for the LogManager.

Tests event-driven collection, category/level filtering and the
debug toggle.
"""

import pytest

from knightfight.core.events import DebugMessage, LogMessage
from knightfight.game.log_manager import LogCategory, LogEntry, LogLevel, LogManager


@pytest.fixture
def log_manager(event_manager):
    return LogManager(event_manager, max_messages=50)


def publish_log(event_manager, message, category="SYSTEM", level="INFO", tick=0):
    event_manager.publish(LogMessage(tick=tick, message=message, category=category, level=level))
    event_manager.process_events()


class TestLogEntry:
    """Test entry formatting."""

    def test_format_with_category(self):
        entry = LogEntry(text="player hits enemy", category=LogCategory.BATTLE, tick=12)
        assert entry.format() == "[BTL] player hits enemy"
        assert entry.format(include_tick=True) == "[t00012] [BTL] player hits enemy"
        assert entry.format(include_category=False) == "player hits enemy"


class TestCollection:
    """Test collecting log events."""

    def test_collects_log_events(self, log_manager, event_manager):
        """LogMessage events land in the buffer with their category."""
        publish_log(event_manager, "Round 1 - Castle Arena. Fight!", category="ROUND", tick=3)

        messages = log_manager.get_messages()
        assert len(messages) == 1
        assert messages[0].category is LogCategory.ROUND
        assert messages[0].tick == 3

    def test_unknown_category_falls_back_to_system(self, log_manager, event_manager):
        publish_log(event_manager, "odd", category="NOT_A_CATEGORY")
        assert log_manager.get_messages()[0].category is LogCategory.SYSTEM

    def test_debug_message_events(self, log_manager, event_manager):
        """DebugMessage events are stored under DEBUG."""
        event_manager.publish(DebugMessage(tick=1, message="dropped", source="DeferredScheduler"))
        event_manager.process_events()

        entries = log_manager.get_messages(categories={LogCategory.DEBUG})
        assert entries[0].text == "[DeferredScheduler] dropped"

    def test_buffer_is_bounded(self, event_manager):
        """Old messages are discarded beyond max_messages."""
        log_manager = LogManager(event_manager, max_messages=3)
        for i in range(5):
            log_manager.system(f"message {i}")
        assert [m.text for m in log_manager.get_messages()] == ["message 2", "message 3", "message 4"]


class TestFiltering:
    """Test level and category filtering."""

    def test_debug_hidden_by_default(self, log_manager, event_manager):
        """AI and DEBUG-level messages need debug mode."""
        publish_log(event_manager, "enemy decides", category="AI", level="DEBUG")
        publish_log(event_manager, "player hits", category="BATTLE")

        assert [m.text for m in log_manager.get_messages()] == ["player hits"]

        log_manager.toggle_debug()
        assert log_manager.is_debug_enabled()
        assert len(log_manager.get_messages()) == 2

        log_manager.toggle_debug()
        assert not log_manager.is_debug_enabled()
        assert len(log_manager.get_messages()) == 1

    def test_disable_category(self, log_manager):
        log_manager.battle("hit")
        log_manager.round("round over")
        log_manager.disable_category(LogCategory.BATTLE)
        assert [m.text for m in log_manager.get_messages()] == ["round over"]

        log_manager.enable_category(LogCategory.BATTLE)
        assert len(log_manager.get_messages()) == 2

    def test_warning_level(self, log_manager):
        """Raising the level hides informational messages."""
        log_manager.system("info")
        log_manager.warning("careful")
        log_manager.error("broken")
        log_manager.set_log_level(LogLevel.WARNING)
        assert [m.text for m in log_manager.get_messages()] == ["careful", "broken"]

    def test_count_returns_most_recent(self, log_manager):
        for i in range(5):
            log_manager.system(f"m{i}")
        assert [m.text for m in log_manager.get_messages(count=2)] == ["m3", "m4"]

    def test_clear(self, log_manager):
        log_manager.system("gone")
        log_manager.clear()
        assert log_manager.get_messages() == []


class TestMatchLogging:
    """Test what a match writes to the log."""

    def test_hit_and_round_messages(self, close_match, event_manager, advance):
        """A decisive hit produces battle and round messages."""
        log_manager = LogManager(event_manager)
        close_match.autonomous.health = 5.0
        close_match.controlled.attack()
        advance(close_match, 13)

        battle = log_manager.get_messages(categories={LogCategory.BATTLE})
        rounds = log_manager.get_messages(categories={LogCategory.ROUND})
        assert any("player hits enemy" in m.text for m in battle)
        assert any("enemy defeated" in m.text for m in rounds)
