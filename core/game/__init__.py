"""Game engine and state management."""

from core.game.events import GameEvent, EventType
from core.game.state import GameState, GameMode, Difficulty
from core.game.rules import RoundConfig, InvalidConfiguration
from core.game.engine import MemoryGame, GameSnapshot

__all__ = [
    "GameEvent",
    "EventType",
    "GameState",
    "GameMode",
    "Difficulty",
    "RoundConfig",
    "InvalidConfiguration",
    "MemoryGame",
    "GameSnapshot",
]
