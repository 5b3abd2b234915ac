"""Shared test fixtures for TypeTester tests."""

import random
import tempfile
from pathlib import Path

import pytest

from core.clock import Clock
from core.session import SessionStateMachine


class FakeTime:
    """Manually advanced time source for Clock tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_time():
    """Time source that only moves when advanced."""
    return FakeTime()


@pytest.fixture
def clock(fake_time):
    """Clock driven by the fake time source."""
    return Clock(time_source=fake_time)


@pytest.fixture
def rng():
    """Deterministically seeded random source."""
    return random.Random(1234)


@pytest.fixture
def single_word_session(clock, rng):
    """Session whose phrase is always 'cat'."""
    return SessionStateMachine(["cat"], word_count=1, rng=rng, clock=clock)


@pytest.fixture
def temp_db_path():
    """Create a temporary database path and clean up afterwards."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "settings.db"
