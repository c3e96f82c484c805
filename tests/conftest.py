"""
Pytest configuration and shared fixtures for Reel tests.
"""
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from reel.models import Item, Library, Session
from reel.api.surface import NullSurface


class ScriptedRandom:
    """Stand-in for random.Random that returns queued draws."""

    def __init__(self, *draws):
        self.draws = list(draws)
        self.calls = 0

    def randrange(self, stop):
        self.calls += 1
        value = self.draws.pop(0)
        assert 0 <= value < stop
        return value


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after each test."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def make_library(count: int, duration: float = 10.0) -> Library:
    return Library([
        Item(id=i, source=Path(f'/clips/clip{i}.mp4'), duration_seconds=duration)
        for i in range(count)
    ])


@pytest.fixture
def library():
    """Three clips: A, B, C."""
    return make_library(3)


@pytest.fixture
def session(library):
    return Session(library)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def surface(clock):
    return NullSurface(clock=clock)
