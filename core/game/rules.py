"""Round configuration and its validation."""

from dataclasses import dataclass, field
from typing import Any, Iterable

from core.game.state import Difficulty, GameMode
from core.player import COMPUTER_NAME
from core.themes import CardTheme

MIN_PAIRS = 2
MAX_PAIRS = 10
MIN_PLAYERS = 2
MAX_PLAYERS = 5

DEFAULT_NAMES = ("Willa", "Lark")

# A player keeps the turn after a match, up to this many in a row
MAX_CONSECUTIVE_MATCHES = 3


class InvalidConfiguration(ValueError):
    """Raised when a round cannot be started with the given setup."""


@dataclass(frozen=True)
class RoundConfig:
    """
    Setup for one round.

    Validated on construction; an invalid combination raises
    InvalidConfiguration. In vs-computer mode the second seat is always
    the reserved computer player, whatever name was supplied for it.
    """

    num_pairs: int = 5
    players: tuple[str, ...] = field(default=DEFAULT_NAMES)
    mode: GameMode = GameMode.MULTIPLAYER
    theme: CardTheme = CardTheme.OLYMPICS
    difficulty: Difficulty = Difficulty.MEDIUM

    def __post_init__(self) -> None:
        """Normalize names and validate the combination."""
        if isinstance(self.num_pairs, bool) or not isinstance(self.num_pairs, int):
            raise InvalidConfiguration("num_pairs must be an integer")
        if not MIN_PAIRS <= self.num_pairs <= MAX_PAIRS:
            raise InvalidConfiguration(
                f"num_pairs must be between {MIN_PAIRS} and {MAX_PAIRS}"
            )
        if self.num_pairs > len(self.theme.glyphs):
            raise InvalidConfiguration(
                f"Theme {self.theme.value} only has {len(self.theme.glyphs)} symbols"
            )

        # A bare string would otherwise become one player per letter
        if not isinstance(self.players, (list, tuple)):
            raise InvalidConfiguration("players must be a list of names")
        names = tuple(str(name).strip() for name in self.players)

        if self.mode == GameMode.SOLO:
            if len(names) != 1:
                raise InvalidConfiguration("Solo mode needs exactly 1 player")
        elif self.mode == GameMode.VS_COMPUTER:
            if len(names) not in (1, 2):
                raise InvalidConfiguration("Computer mode needs exactly 1 human player")
            names = (names[0], COMPUTER_NAME)
        elif not MIN_PLAYERS <= len(names) <= MAX_PLAYERS:
            raise InvalidConfiguration(
                f"Multiplayer needs between {MIN_PLAYERS} and {MAX_PLAYERS} players"
            )

        human_names = names[:1] if self.mode == GameMode.VS_COMPUTER else names
        if any(not name for name in human_names):
            raise InvalidConfiguration("Player names cannot be empty")

        object.__setattr__(self, "players", names)

    @property
    def player_count(self) -> int:
        """Return the number of seats."""
        return len(self.players)

    @property
    def has_computer(self) -> bool:
        """Check if the second seat is the computer."""
        return self.mode == GameMode.VS_COMPUTER

    @classmethod
    def solo(cls, name: str, num_pairs: int = 5, theme: CardTheme = CardTheme.OLYMPICS) -> "RoundConfig":
        """Single player practice round."""
        return cls(num_pairs=num_pairs, players=(name,), mode=GameMode.SOLO, theme=theme)

    @classmethod
    def versus_computer(
        cls,
        name: str,
        difficulty: Difficulty = Difficulty.MEDIUM,
        num_pairs: int = 5,
        theme: CardTheme = CardTheme.OLYMPICS,
    ) -> "RoundConfig":
        """Human against the computer opponent."""
        return cls(
            num_pairs=num_pairs,
            players=(name, COMPUTER_NAME),
            mode=GameMode.VS_COMPUTER,
            theme=theme,
            difficulty=difficulty,
        )

    @classmethod
    def multiplayer(
        cls,
        names: Iterable[str],
        num_pairs: int = 5,
        theme: CardTheme = CardTheme.OLYMPICS,
    ) -> "RoundConfig":
        """Pass-and-play round for 2-5 people."""
        return cls(num_pairs=num_pairs, players=tuple(names), theme=theme)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RoundConfig":
        """Create from a plain mapping with string enum values."""
        try:
            mode = GameMode(data.get("mode", GameMode.MULTIPLAYER.value))
            difficulty = Difficulty(data.get("difficulty", Difficulty.MEDIUM.value))
            theme = CardTheme.from_string(data.get("theme", CardTheme.OLYMPICS.value))
        except (ValueError, AttributeError) as e:
            raise InvalidConfiguration(str(e)) from e

        return cls(
            num_pairs=data.get("num_pairs", 5),
            players=data.get("players", DEFAULT_NAMES),
            mode=mode,
            theme=theme,
            difficulty=difficulty,
        )
