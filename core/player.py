"""Player state for a memory-match round."""

from dataclasses import dataclass, field

COMPUTER_NAME = "Computer"


@dataclass
class Player:
    """A seat at the table and the pairs it has claimed this round."""

    name: str
    score: int = 0
    found_symbols: list[int] = field(default_factory=list)
    is_computer: bool = False

    def claim(self, symbol_index: int) -> None:
        """Record a found pair."""
        self.score += 1
        self.found_symbols.append(symbol_index)

    def reset(self) -> None:
        """Clear score and found pairs for a new round."""
        self.score = 0
        self.found_symbols = []

    @classmethod
    def computer(cls) -> "Player":
        """Create the reserved computer opponent."""
        return cls(name=COMPUTER_NAME, is_computer=True)
