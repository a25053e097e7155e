"""
Basic test fixtures for the knightfight test suite.

Provides fresh event buses, configurations and matches. Matches built by
these fixtures use an inactive decision engine unless a test asks for the
real one, so fighter behaviour is fully scripted by the test.
"""

import sys
import os
from typing import Optional

import numpy as np
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from knightfight.core.config import (
    CombatTuning,
    FighterConfig,
    InitialPositions,
    MatchConfig,
)
from knightfight.core.events import EventManager, EventType
from knightfight.game.ai.ai_behaviors import AIType
from knightfight.game.match import MatchController

# Round numbers keep frame arithmetic exact: 125 ms frames span 6.25 ticks
TICK_MS = 20.0


def run_ticks(controller: MatchController, count: int, delta_ms: float = TICK_MS):
    """Tick a match `count` times and return the last snapshots."""
    snapshots = controller.snapshots()
    for _ in range(count):
        snapshots = controller.tick(delta_ms)
    return snapshots


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager()


@pytest.fixture
def match_config():
    """Built-in default configuration."""
    return MatchConfig()


@pytest.fixture
def rng():
    """Deterministic random source."""
    return np.random.default_rng(1234)


@pytest.fixture
def make_match(event_manager):
    """Factory for matches with custom spawn positions and tuning."""

    def _make(controlled_x: float = 200.0,
              autonomous_x: float = 700.0,
              fighter: Optional[FighterConfig] = None,
              combat: Optional[CombatTuning] = None,
              ai_type: AIType = AIType.INACTIVE,
              seed: int = 1234,
              **config_overrides) -> MatchController:
        config = MatchConfig(
            initial_positions=InitialPositions(controlled=controlled_x, autonomous=autonomous_x),
            fighter=fighter or FighterConfig(),
            combat=combat or CombatTuning(),
            **config_overrides,
        )
        return MatchController(config, event_manager, seed=seed, ai_type=ai_type)

    return _make


@pytest.fixture
def controller(make_match):
    """Default match with both fighters at their initial positions."""
    return make_match()


@pytest.fixture
def close_match(make_match):
    """Fighters 60 units apart, well inside attack range."""
    return make_match(controlled_x=200.0, autonomous_x=260.0)


@pytest.fixture
def ctx(controller):
    return controller.context


@pytest.fixture
def recorded_events(event_manager):
    """List that receives every event delivered by the bus."""
    events = []
    for event_type in EventType:
        event_manager.subscribe(event_type, events.append, subscriber_name="test_recorder")
    return events


@pytest.fixture
def advance():
    """run_ticks as a fixture, for tests outside this module."""
    return run_ticks


@pytest.fixture
def events_of(recorded_events):
    """Filter recorded events by type."""

    def _filter(event_type: EventType):
        return [e for e in recorded_events if e.event_type == event_type]

    return _filter
