"""Player name preference endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Header

from api.schemas import NamesRequest, NamesResponse
from api.session import extract_session_id, load_player_names, save_player_names

router = APIRouter()


def _check_session(session_id: str) -> None:
    if extract_session_id(session_id) is None:
        raise HTTPException(status_code=404, detail="Session not found")


@router.get("/names")
async def get_names(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> NamesResponse:
    """Get the saved player names, or the defaults."""
    _check_session(session_id)
    return NamesResponse(names=await load_player_names(session_id))


@router.put("/names")
async def put_names(
    request: NamesRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> NamesResponse:
    """Save player names for the session."""
    _check_session(session_id)

    names = [name.strip() for name in request.names]
    if any(not name for name in names):
        raise HTTPException(status_code=400, detail="Player names cannot be empty")

    await save_player_names(session_id, names)
    return NamesResponse(names=names)
