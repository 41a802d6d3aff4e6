"""Session management with Redis backend and in-memory fallback."""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Iterable
from uuid import uuid4

import redis.asyncio as redis
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from config import config
from core.preferences import InMemoryPreferenceStore, JsonFilePreferenceStore, PreferenceStore

logger = logging.getLogger(__name__)

SESSION_KEY_PLAYER_NAMES = "player_names"


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._serializer = URLSafeTimedSerializer(
            secret_key or config.security.secret_key,
            salt="memory-match-session",
        )

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        try:
            return self._serializer.loads(token, max_age=max_age or config.session_ttl)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


class SessionStore(ABC):
    """Abstract session store. Keys are signed session tokens."""

    @abstractmethod
    async def get(self, session_id: str) -> dict[str, Any] | None:
        """Get session data."""
        ...

    @abstractmethod
    async def set(self, session_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        """Set session data."""
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Delete session."""
        ...

    async def exists(self, session_id: str) -> bool:
        """Check if session exists."""
        return await self.get(session_id) is not None


class InMemorySessionStore(SessionStore):
    """In-memory session store for local play and tests."""

    def __init__(self) -> None:
        self._sessions: dict[str, tuple[dict[str, Any], datetime]] = {}

    async def get(self, session_id: str) -> dict[str, Any] | None:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None

        data, expiry = entry
        if expiry < datetime.now():
            await self.delete(session_id)
            return None
        return data

    async def set(
        self,
        session_id: str,
        data: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        expiry = datetime.now() + timedelta(seconds=ttl or config.session_ttl)
        self._sessions[session_id] = (data, expiry)

    async def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    async def cleanup_expired(self) -> int:
        """Remove expired sessions."""
        now = datetime.now()
        expired = [sid for sid, (_, expiry) in self._sessions.items() if expiry < now]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)


class RedisSessionStore(SessionStore):
    """Redis-backed session store."""

    PREFIX = "memory_match:session:"

    def __init__(self, redis_client: "redis.Redis") -> None:
        self._redis = redis_client

    def _key(self, session_id: str) -> str:
        return f"{self.PREFIX}{session_id}"

    async def get(self, session_id: str) -> dict[str, Any] | None:
        data = await self._redis.get(self._key(session_id))
        return json.loads(data) if data is not None else None

    async def set(
        self,
        session_id: str,
        data: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        await self._redis.setex(
            self._key(session_id),
            ttl or config.session_ttl,
            json.dumps(data),
        )

    async def delete(self, session_id: str) -> None:
        await self._redis.delete(self._key(session_id))

    async def exists(self, session_id: str) -> bool:
        return await self._redis.exists(self._key(session_id)) > 0


# Global session store instance
_session_store: SessionStore | None = None


async def get_session_store() -> SessionStore:
    """Get or create the session store, preferring Redis when reachable."""
    global _session_store

    if _session_store is not None:
        return _session_store

    try:
        redis_client = redis.from_url(config.redis.url)
        await redis_client.ping()
        _session_store = RedisSessionStore(redis_client)
    except (redis.RedisError, OSError) as e:
        logger.info("Redis unavailable (%s); using in-memory sessions", e)
        _session_store = InMemorySessionStore()
    return _session_store


def set_session_store(store: SessionStore | None) -> None:
    """Replace the session store (None re-detects on next use)."""
    global _session_store
    _session_store = store


async def create_session(data: dict[str, Any] | None = None) -> str:
    """Create a new session and return its signed token."""
    store = await get_session_store()
    token = get_session_signer().sign(str(uuid4()))
    await store.set(token, data or {})
    return token


async def get_session(session_id: str) -> dict[str, Any] | None:
    """Get session data."""
    store = await get_session_store()
    return await store.get(session_id)


async def update_session(session_id: str, data: dict[str, Any]) -> None:
    """Update session data."""
    store = await get_session_store()
    await store.set(session_id, data)


async def delete_session(session_id: str) -> None:
    """Delete a session."""
    store = await get_session_store()
    await store.delete(session_id)


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    return get_session_signer().unsign(token)


# Player name preferences live in the session, like browser local storage.
# Sessions with nothing saved fall back to the host store, which holds the
# last names used on this server.

_preference_store: PreferenceStore | None = None


def get_preference_store() -> PreferenceStore:
    """Get or create the host-wide name store."""
    global _preference_store

    if _preference_store is None:
        path = config.game.preferences_path
        _preference_store = (
            JsonFilePreferenceStore(path) if path else InMemoryPreferenceStore()
        )
    return _preference_store


def set_preference_store(store: PreferenceStore | None) -> None:
    """Replace the host-wide name store (None rebuilds it from config)."""
    global _preference_store
    _preference_store = store


async def load_player_names(session_id: str) -> list[str]:
    """Saved names for a session, or the defaults."""
    try:
        data = await get_session(session_id)
    except (redis.RedisError, OSError, ValueError) as e:
        logger.warning("Could not load player names: %s", e)
        data = None

    names = (data or {}).get(SESSION_KEY_PLAYER_NAMES)
    if isinstance(names, list) and names:
        return [str(n) for n in names]
    return get_preference_store().load_names()


async def save_player_names(session_id: str, names: Iterable[str]) -> None:
    """Remember names for a session. Failures are logged and ignored."""
    names = list(names)
    get_preference_store().save_names(names)
    try:
        data = await get_session(session_id) or {}
        data[SESSION_KEY_PLAYER_NAMES] = names
        await update_session(session_id, data)
    except (redis.RedisError, OSError, TypeError) as e:
        logger.warning("Could not save player names: %s", e)
