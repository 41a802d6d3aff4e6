"""Game events for the event system."""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of game events."""

    # Round lifecycle
    ROUND_STARTED = auto()
    ROUND_COMPLETE = auto()
    ROUND_ENDED = auto()

    # Board events
    CARD_FLIPPED = auto()
    PAIR_PENDING = auto()

    # Resolution outcomes
    MATCH_FOUND = auto()
    MISMATCH = auto()

    # Turn flow
    TURN_CHANGED = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable game event.

    Events are the primary communication mechanism between the engine,
    the computer opponent and the presentation layer.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON transports."""
        return {
            "type": self.event_type.name,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
        }


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Event emitter for game events.

    Allows subscribing to specific event types or all events. Keeps a
    bounded history so long sessions do not grow without limit.
    """

    def __init__(self, max_history: int = 500) -> None:
        """Initialize the event emitter."""
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: deque[GameEvent] = deque(maxlen=max_history)

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        """
        Emit an event to all subscribers.

        Handlers are snapshotted first so a handler may subscribe or
        unsubscribe while the event is being delivered. A failing handler
        is logged and skipped; it never interrupts the emitter.
        """
        self._event_history.append(event)

        handlers = list(self._handlers.get(event.event_type, []))
        handlers.extend(self._handlers.get(None, []))
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Handler failed for %s", event.event_type.name)

    def emit_new(
        self,
        event_type: EventType,
        **data: Any,
    ) -> GameEvent:
        """
        Create and emit a new event.

        Args:
            event_type: Type of event
            **data: Event data

        Returns:
            The created event
        """
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Return the event history, oldest first."""
        return list(self._event_history)

    def clear_history(self) -> None:
        """Clear the event history."""
        self._event_history.clear()
