"""Pytest fixtures for memory-match tests."""

import pytest
from random import Random

from core.analytics import InMemoryAnalytics
from core.cards import Deck
from core.game import Difficulty, MemoryGame, RoundConfig
from core.game.scheduler import ManualScheduler
from core.strategy import ComputerPlayer


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled five-pair deck."""
    d = Deck(5, rng=rng)
    d.shuffle()
    return d


@pytest.fixture
def scheduler():
    """A scheduler driven by the test."""
    return ManualScheduler()


@pytest.fixture
def clock():
    """A controllable clock for round durations."""
    return FakeClock()


@pytest.fixture
def analytics():
    """An analytics sink that keeps what it receives."""
    return InMemoryAnalytics()


@pytest.fixture
def game(rng, scheduler, analytics, clock):
    """A new game instance with no round started."""
    return MemoryGame(
        scheduler=scheduler,
        analytics=analytics,
        rng=rng,
        clock=clock,
    )


@pytest.fixture
def two_player_config():
    """Two-player, five-pair round."""
    return RoundConfig.multiplayer(["Ann", "Bob"], num_pairs=5)


@pytest.fixture
def solo_config():
    """Solo practice round."""
    return RoundConfig.solo("Ann", num_pairs=4)


@pytest.fixture
def computer(game):
    """A computer opponent attached to the game."""
    return ComputerPlayer(game, difficulty=Difficulty.HARD, rng=Random(7), think_delay=0.5)


def positions(game: MemoryGame) -> dict[int, list[int]]:
    """Map each symbol to the ids of its two cards."""
    by_symbol: dict[int, list[int]] = {}
    for card in game.cards:
        by_symbol.setdefault(card.symbol_index, []).append(card.id)
    return by_symbol


@pytest.fixture
def pairs_of():
    """Helper that maps each symbol to the ids of its two cards."""
    return positions
