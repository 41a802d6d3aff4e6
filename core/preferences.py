"""Player name persistence."""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from core.game.rules import DEFAULT_NAMES

logger = logging.getLogger(__name__)


class PreferenceStore(ABC):
    """Best-effort storage for the last-used player names."""

    @abstractmethod
    def load_names(self) -> list[str]:
        """Return saved names, or the defaults."""
        ...

    @abstractmethod
    def save_names(self, names: Iterable[str]) -> None:
        """Remember names. Failures are ignored."""
        ...


class InMemoryPreferenceStore(PreferenceStore):
    """Keeps names for the life of the process."""

    def __init__(self, names: Optional[Iterable[str]] = None):
        self._names = list(names) if names else list(DEFAULT_NAMES)

    def load_names(self) -> list[str]:
        return list(self._names)

    def save_names(self, names: Iterable[str]) -> None:
        self._names = list(names)


class JsonFilePreferenceStore(PreferenceStore):
    """Names saved to a small JSON settings file."""

    DEFAULT_PATH = os.path.expanduser("~/.memory_match_settings.json")
    KEY = "player_names"

    def __init__(self, path: Optional[str] = None):
        self.path = path or self.DEFAULT_PATH

    def load_names(self) -> list[str]:
        """Load names from disk, falling back to the defaults."""
        try:
            if os.path.exists(self.path):
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                names = data.get(self.KEY) if isinstance(data, dict) else None
                if isinstance(names, list) and names:
                    return [str(n) for n in names]
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not read %s: %s", self.path, e)
        return list(DEFAULT_NAMES)

    def save_names(self, names: Iterable[str]) -> None:
        """Save names to disk, keeping any other settings in the file."""
        data: dict = {}
        try:
            if os.path.exists(self.path):
                with open(self.path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    data = loaded
        except (json.JSONDecodeError, OSError):
            pass

        data[self.KEY] = list(names)
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning("Could not save %s: %s", self.path, e)
