"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Literal


# Game schemas
class StartRequest(BaseModel):
    """Request to start a round."""

    mode: Literal["multiplayer", "solo", "vs_computer"] = "multiplayer"
    num_pairs: int = Field(default=5, description="Pairs on the board")
    players: list[str] | None = Field(
        default=None, description="Seat names; defaults to the saved names"
    )
    theme: str = "olympics"
    difficulty: Literal["easy", "medium", "hard"] = "medium"


class TapRequest(BaseModel):
    """Request to turn a card face-up."""

    card_id: int


class CardResponse(BaseModel):
    """Card representation. Symbol and glyph are hidden while face-down."""

    id: int
    is_face_up: bool
    is_matched: bool
    symbol_index: int | None = None
    glyph: str | None = None


class PlayerResponse(BaseModel):
    """Player representation."""

    name: str
    score: int
    found_glyphs: list[str]
    is_computer: bool


class GameStateResponse(BaseModel):
    """Current game state."""

    state: str
    generation: int
    mode: str | None
    theme: str | None
    num_pairs: int
    cards: list[CardResponse]
    players: list[PlayerResponse]
    current_player_index: int
    matches_this_turn: int
    attempts: int
    is_resolving: bool
    is_over: bool
    is_computer_turn: bool
    accepted: bool = True


class RankedPlayerResponse(BaseModel):
    """A player in the final standings."""

    name: str
    score: int
    medal_index: int
    medal: str
    found_glyphs: list[str]


class ResultsResponse(BaseModel):
    """End-of-round results."""

    is_over: bool
    standings: list[RankedPlayerResponse]
    winners: list[str]
    attempts: int
    commentary: str | None = None


# Player preference schemas
class NamesRequest(BaseModel):
    """Request to save player names."""

    names: list[str] = Field(..., min_length=1)


class NamesResponse(BaseModel):
    """Saved player names."""

    names: list[str]


# Stats schemas
class CountEntry(BaseModel):
    """A value and how many rounds used it."""

    value: str
    count: int


class CommunityStatsResponse(BaseModel):
    """Aggregate round counts from the shared game log."""

    available: bool
    total_rounds: int = 0
    by_theme: list[CountEntry] = []
    by_pair_count: list[CountEntry] = []


class ThemeResponse(BaseModel):
    """A selectable card theme."""

    key: str
    name: str
    icon: str
    max_pairs: int
