"""Core memory-match engine - 100% UI-agnostic."""

from core.cards import Card, CardView, Deck
from core.player import Player
from core.themes import CardTheme

__all__ = [
    "Card",
    "CardView",
    "Deck",
    "Player",
    "CardTheme",
]
