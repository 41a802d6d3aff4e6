"""Computer opponent: card memory and turn policy."""

from core.strategy.memory import CardMemory
from core.strategy.computer import ComputerPlayer

__all__ = [
    "CardMemory",
    "ComputerPlayer",
]
