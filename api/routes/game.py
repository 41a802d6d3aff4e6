"""Game API endpoints."""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import APIRouter, HTTPException, Header

from api.analytics import get_analytics
from api.schemas import (
    CardResponse,
    GameStateResponse,
    PlayerResponse,
    RankedPlayerResponse,
    ResultsResponse,
    StartRequest,
    TapRequest,
)
from api.session import (
    create_session,
    extract_session_id,
    get_session,
    load_player_names,
    save_player_names,
)
from config import config
from core.game import GameMode, InvalidConfiguration, MemoryGame, RoundConfig
from core.game.results import MEDALS
from core.game.scheduler import AsyncioScheduler
from core.strategy import ComputerPlayer

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass
class GameHandle:
    """A session's engine and the computer opponent bound to it."""

    game: MemoryGame
    computer: ComputerPlayer


# Live games by session token. Rounds are short-lived and not persisted.
_games: dict[str, GameHandle] = {}


def create_game() -> GameHandle:
    """Build an engine wired to the event loop and the analytics sink."""
    scheduler = AsyncioScheduler()
    game = MemoryGame(
        scheduler=scheduler,
        analytics=get_analytics(),
        resolve_delay=config.game.resolve_delay,
    )
    computer = ComputerPlayer(game, think_delay=config.game.think_delay)
    return GameHandle(game=game, computer=computer)


def get_game_handle(session_id: str) -> GameHandle | None:
    """Look up the live game for a session token."""
    if extract_session_id(session_id) is None:
        return None
    return _games.get(session_id)


def register_game(session_id: str) -> GameHandle:
    """Replace the session's game with a fresh one."""
    old = _games.get(session_id)
    if old is not None:
        old.computer.detach()
        old.game.end_round()

    handle = create_game()
    _games[session_id] = handle
    return handle


def _require_game(session_id: str) -> MemoryGame:
    """Get the session's game or fail with 404."""
    handle = get_game_handle(session_id)
    if handle is None:
        raise HTTPException(status_code=404, detail="Game session not found")
    return handle.game


def game_state_response(game: MemoryGame, accepted: bool = True) -> GameStateResponse:
    """Convert game state to response."""
    snap = game.snapshot()
    theme = game.config.theme if game.config else None

    cards = []
    for card in snap.cards:
        face_up = card.is_face_up
        cards.append(
            CardResponse(
                id=card.id,
                is_face_up=face_up,
                is_matched=card.is_matched,
                symbol_index=card.symbol_index if face_up else None,
                glyph=theme.glyph(card.symbol_index) if face_up and theme else None,
            )
        )

    return GameStateResponse(
        state=snap.state.name,
        generation=snap.generation,
        mode=snap.mode.value if snap.mode else None,
        theme=snap.theme,
        num_pairs=snap.num_pairs,
        cards=cards,
        players=[
            PlayerResponse(
                name=p.name,
                score=p.score,
                found_glyphs=list(p.found_glyphs),
                is_computer=p.is_computer,
            )
            for p in snap.players
        ],
        current_player_index=snap.current_player_index,
        matches_this_turn=snap.matches_this_turn,
        attempts=snap.attempts,
        is_resolving=snap.is_resolving,
        is_over=snap.is_over,
        is_computer_turn=snap.is_computer_turn,
        accepted=accepted,
    )


def results_response(game: MemoryGame) -> ResultsResponse:
    """Convert final standings to response."""
    standings = [
        RankedPlayerResponse(
            name=player.name,
            score=player.score,
            medal_index=medal,
            medal=MEDALS[medal],
            found_glyphs=game.glyphs_for(player),
        )
        for player, medal in game.medals
    ]
    return ResultsResponse(
        is_over=game.is_over,
        standings=standings,
        winners=[p.name for p in game.winners],
        attempts=game.attempts,
        commentary=game.commentary,
    )


async def build_round_config(session_id: str, request: StartRequest) -> RoundConfig:
    """
    Turn a start request into a validated round setup.

    Missing names come from the session's saved names. Raises
    InvalidConfiguration for an unplayable setup.
    """
    names = request.players
    if not names:
        names = await load_player_names(session_id)
        if request.mode != GameMode.MULTIPLAYER.value:
            names = names[:1]

    return RoundConfig.from_dict(
        {
            "mode": request.mode,
            "num_pairs": request.num_pairs,
            "players": names,
            "theme": request.theme,
            "difficulty": request.difficulty,
        }
    )


async def start_round(session_id: str, game: MemoryGame, request: StartRequest) -> None:
    """Validate, start the round and remember the human names."""
    round_config = await build_round_config(session_id, request)
    game.start(round_config)

    humans = [p.name for p in game.players if not p.is_computer]
    await save_player_names(session_id, humans)


@router.post("/new")
async def new_game(
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> dict[str, str]:
    """Create a new game session."""
    if session_id is None or extract_session_id(session_id) is None:
        session_id = await create_session()
    elif await get_session(session_id) is None:
        session_id = await create_session()

    register_game(session_id)
    logger.debug("New game for session %s", session_id[:8])
    return {"session_id": session_id}


@router.post("/start")
async def start_game(
    request: StartRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Start a round with the requested setup."""
    game = _require_game(session_id)

    try:
        await start_round(session_id, game, request)
    except InvalidConfiguration as e:
        raise HTTPException(status_code=400, detail=str(e))

    return game_state_response(game)


@router.post("/tap")
async def tap_card(
    request: TapRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Turn a card face-up. Ignored taps leave the state unchanged."""
    game = _require_game(session_id)
    accepted = game.tap(request.card_id)
    return game_state_response(game, accepted=accepted)


@router.post("/end")
async def end_game(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Abandon the round and return to setup."""
    game = _require_game(session_id)
    accepted = game.end_round()
    return game_state_response(game, accepted=accepted)


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current game state."""
    game = _require_game(session_id)
    return game_state_response(game)


@router.get("/results")
async def get_results(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> ResultsResponse:
    """Get standings for the current round."""
    game = _require_game(session_id)
    if game.config is None:
        raise HTTPException(status_code=400, detail="No round has been started")
    return results_response(game)
