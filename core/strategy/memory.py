"""Imperfect card memory for the computer opponent."""

from collections import defaultdict
from random import Random

from core.game.state import Difficulty


class CardMemory:
    """
    Remembers where symbols were seen face-up.

    Each sighting is kept with the difficulty's retention probability,
    drawn independently per sighting. Matched symbols are forgotten since
    those cards can no longer be played.
    """

    def __init__(self, difficulty: Difficulty = Difficulty.MEDIUM, rng: Random | None = None) -> None:
        self.difficulty = difficulty
        self._rng = rng or Random()
        self._seen: dict[int, set[int]] = defaultdict(set)

    def observe(self, symbol_index: int, card_id: int) -> bool:
        """
        Record a face-up sighting, subject to retention.

        Returns:
            True if the sighting was remembered
        """
        retention = self.difficulty.retention
        if retention <= 0.0:
            return False
        if retention < 1.0 and self._rng.random() >= retention:
            return False
        self._seen[symbol_index].add(card_id)
        return True

    def forget_symbol(self, symbol_index: int) -> None:
        """Purge a symbol once its pair has been matched."""
        self._seen.pop(symbol_index, None)

    def clear(self) -> None:
        """Forget everything."""
        self._seen.clear()

    def locations(self, symbol_index: int) -> set[int]:
        """Card ids remembered for a symbol."""
        return set(self._seen.get(symbol_index, ()))

    def known_pair(self, available: set[int]) -> tuple[int, int] | None:
        """
        Find a symbol with two remembered cards that are still playable.

        Args:
            available: Ids of cards that are neither flipped nor matched

        Returns:
            Two card ids, or None if no pair is known
        """
        for symbol_index in sorted(self._seen):
            ids = sorted(self._seen[symbol_index] & available)
            if len(ids) >= 2:
                return ids[0], ids[1]
        return None

    def partner(self, symbol_index: int, card_id: int, available: set[int]) -> int | None:
        """A remembered, still-playable card with the same symbol."""
        candidates = sorted((self._seen.get(symbol_index, set()) & available) - {card_id})
        return candidates[0] if candidates else None

    def __len__(self) -> int:
        return sum(len(ids) for ids in self._seen.values())

    def __bool__(self) -> bool:
        return any(self._seen.values())
