"""Card and Deck classes for a memory-matching board."""

from dataclasses import dataclass
from random import Random
from typing import Iterator


@dataclass(slots=True)
class Card:
    """A single board card.

    Two cards share each ``symbol_index`` per round. The engine is the only
    code that flips or matches cards; everything else sees ``CardView`` copies.
    """

    id: int
    symbol_index: int
    is_flipped: bool = False
    is_matched: bool = False

    def __str__(self) -> str:
        if self.is_matched:
            return f"[{self.symbol_index}*]"
        if self.is_flipped:
            return f"[{self.symbol_index}]"
        return "[?]"

    @property
    def is_available(self) -> bool:
        """Check if the card can still be turned over."""
        return not self.is_flipped and not self.is_matched

    def view(self) -> "CardView":
        """Return an immutable snapshot of this card."""
        return CardView(
            id=self.id,
            symbol_index=self.symbol_index,
            is_flipped=self.is_flipped,
            is_matched=self.is_matched,
        )


@dataclass(frozen=True, slots=True)
class CardView:
    """Read-only card state handed to observers."""

    id: int
    symbol_index: int
    is_flipped: bool
    is_matched: bool

    @property
    def is_face_up(self) -> bool:
        """Check if observers may see the symbol."""
        return self.is_flipped or self.is_matched

    @property
    def is_available(self) -> bool:
        """Check if the card can still be turned over."""
        return not self.is_flipped and not self.is_matched


class Deck:
    """The set of paired cards for one round."""

    def __init__(self, num_pairs: int, rng: Random | None = None) -> None:
        """
        Initialize a deck of paired cards.

        Args:
            num_pairs: Number of symbol pairs on the board
            rng: Random number generator for shuffling
        """
        if num_pairs < 1:
            raise ValueError("Deck must have at least 1 pair")

        self._num_pairs = num_pairs
        self._rng = rng or Random()
        self._cards: list[Card] = []
        self.reset()

    def reset(self) -> None:
        """Reset deck to unflipped pairs in symbol order."""
        self._cards = [
            Card(id=i, symbol_index=i // 2) for i in range(self._num_pairs * 2)
        ]

    def shuffle(self) -> None:
        """Shuffle the deck uniformly (Fisher-Yates via Random.shuffle)."""
        self._rng.shuffle(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    @property
    def cards(self) -> list[Card]:
        """Return the cards in board order."""
        return self._cards

    @property
    def num_pairs(self) -> int:
        """Return the number of pairs in the deck."""
        return self._num_pairs
