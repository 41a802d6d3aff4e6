"""Game state, mode and difficulty enumerations."""

from enum import Enum, auto


class GameState(Enum):
    """
    Game state machine states.

    Flow: SETUP → AWAITING_FIRST ⇄ AWAITING_SECOND → RESOLVING → AWAITING_FIRST … → ROUND_OVER
    """

    # No round in progress
    SETUP = auto()

    # Waiting for the first card of a pair attempt
    AWAITING_FIRST = auto()

    # One card face-up
    AWAITING_SECOND = auto()

    # Two cards face-up, resolution scheduled
    RESOLVING = auto()

    # Every pair matched
    ROUND_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class GameMode(Enum):
    """Table setups."""

    MULTIPLAYER = "multiplayer"
    SOLO = "solo"
    VS_COMPUTER = "vs_computer"


class Difficulty(Enum):
    """Computer opponent recall levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def retention(self) -> float:
        """Probability that a single sighting is remembered."""
        return RETENTION[self]


RETENTION: dict[Difficulty, float] = {
    Difficulty.EASY: 0.0,
    Difficulty.MEDIUM: 0.5,
    Difficulty.HARD: 1.0,
}

