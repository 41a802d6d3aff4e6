"""WebSocket connection management with game engine integration."""

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from api.routes.game import (
    GameHandle,
    game_state_response,
    get_game_handle,
    register_game,
    results_response,
    start_round,
)
from api.schemas import StartRequest
from api.session import extract_session_id
from core.game import InvalidConfiguration, MemoryGame
from core.game.events import GameEvent, EventType

logger = logging.getLogger(__name__)

router = APIRouter()

# Close code for an unknown or tampered session token
POLICY_VIOLATION = 1008


class ConnectionManager:
    """Manage WebSocket connections and their event queues."""

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}
        self._event_queues: dict[str, asyncio.Queue] = {}
        self._handlers: dict[str, Any] = {}

    async def connect(self, websocket: WebSocket, session_id: str, game: MemoryGame) -> None:
        """Accept a connection and start forwarding the game's events."""
        await websocket.accept()
        self._connections[session_id] = websocket
        self._event_queues[session_id] = asyncio.Queue()

        def handler(event: GameEvent) -> None:
            self._queue_event(session_id, event)

        self._handlers[session_id] = (game, handler)
        game.subscribe(handler)

    def disconnect(self, session_id: str) -> None:
        """Remove a connection. The game stays for reconnection."""
        self._connections.pop(session_id, None)
        self._event_queues.pop(session_id, None)
        entry = self._handlers.pop(session_id, None)
        if entry is not None:
            game, handler = entry
            game.events.unsubscribe(handler)

    def _queue_event(self, session_id: str, event: GameEvent) -> None:
        """Queue an event for async delivery."""
        queue = self._event_queues.get(session_id)
        if queue is not None:
            queue.put_nowait(event)

    async def get_event(self, session_id: str) -> GameEvent | None:
        """Get the next event from the queue."""
        queue = self._event_queues.get(session_id)
        if queue is None:
            return None
        try:
            return await asyncio.wait_for(queue.get(), timeout=0.1)
        except asyncio.TimeoutError:
            return None

    async def send_message(self, session_id: str, message: dict[str, Any]) -> None:
        """Send a message to a specific session."""
        websocket = self._connections.get(session_id)
        if websocket is None:
            return
        try:
            await websocket.send_json(message)
        except (RuntimeError, WebSocketDisconnect) as e:
            logger.debug("Dropped message for closed socket: %s", e)

    @property
    def active_connections(self) -> int:
        """Return number of active connections."""
        return len(self._connections)


# Global connection manager
manager = ConnectionManager()


def _state_message(game: MemoryGame, accepted: bool = True) -> dict[str, Any]:
    return {
        "type": "state_update",
        "state": game_state_response(game, accepted=accepted).model_dump(),
    }


def _event_to_message(event: GameEvent, game: MemoryGame) -> dict[str, Any]:
    """Convert a game event to a WebSocket message."""
    message = {
        "type": "event",
        "event_type": event.event_type.name,
        "data": event.data,
        "state": game_state_response(game).model_dump(),
    }

    if event.event_type == EventType.ROUND_COMPLETE:
        message["results"] = results_response(game).model_dump()

    return message


async def _handle_message(session_id: str, handle: GameHandle, message: dict[str, Any]) -> None:
    game = handle.game
    msg_type = message.get("type")

    if msg_type == "get_state":
        await manager.send_message(session_id, _state_message(game))

    elif msg_type == "tap":
        card_id = message.get("card_id")
        if not isinstance(card_id, int):
            await manager.send_message(session_id, {
                "type": "error",
                "message": "card_id must be an integer",
            })
            return
        if not game.tap(card_id):
            await manager.send_message(session_id, _state_message(game, accepted=False))

    elif msg_type == "start":
        try:
            request = StartRequest.model_validate(message.get("config") or {})
            await start_round(session_id, game, request)
        except (ValidationError, InvalidConfiguration) as e:
            await manager.send_message(session_id, {"type": "error", "message": str(e)})

    elif msg_type == "end":
        game.end_round()

    else:
        await manager.send_message(session_id, {
            "type": "error",
            "message": f"Unknown message type: {msg_type}",
        })


@router.websocket("/game/{session_id}")
async def game_websocket(websocket: WebSocket, session_id: str) -> None:
    """
    WebSocket endpoint for real-time game updates.

    Messages from client:
    - {"type": "start", "config": {"mode": ..., "num_pairs": ..., ...}}
    - {"type": "tap", "card_id": 3}
    - {"type": "end"}
    - {"type": "get_state"}

    Messages to client:
    - {"type": "state_update", "state": {...}}
    - {"type": "event", "event_type": "...", "data": {...}, "state": {...}}
    - {"type": "error", "message": "..."}
    """
    if extract_session_id(session_id) is None:
        await websocket.close(code=POLICY_VIOLATION)
        return

    handle = get_game_handle(session_id) or register_game(session_id)
    game = handle.game
    await manager.connect(websocket, session_id, game)

    # Send initial state
    await manager.send_message(session_id, _state_message(game))

    async def process_events():
        """Process game events and send to client."""
        while True:
            event = await manager.get_event(session_id)
            if event:
                await manager.send_message(session_id, _event_to_message(event, game))

    event_task = asyncio.create_task(process_events())

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await manager.send_message(session_id, {
                    "type": "error",
                    "message": "Invalid JSON",
                })
                continue
            if not isinstance(message, dict):
                await manager.send_message(session_id, {
                    "type": "error",
                    "message": "Expected a JSON object",
                })
                continue
            await _handle_message(session_id, handle, message)

    except WebSocketDisconnect:
        pass
    finally:
        event_task.cancel()
        try:
            await event_task
        except asyncio.CancelledError:
            pass
        manager.disconnect(session_id)
