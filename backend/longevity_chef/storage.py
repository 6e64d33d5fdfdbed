"""
Local key/value persistence for a single user's kitchen state.

Values are strings (JSON blobs, except the raw pantry text). There is no transaction
across keys: each key is written on its own and the last write wins.
"""

import json
import logging
import os
from typing import Protocol

from longevity_chef.config import get_settings

logger = logging.getLogger(__name__)

PROFILE_KEY = "userProfile"
FAVORITES_KEY = "favorites"
PLAN_KEY = "weeklyPlan"
SHOPPING_KEY = "shoppingList"
PANTRY_KEY = "pantryItems"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, data: dict[str, str] | None = None):
        self.data = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """All keys in one local JSON file, rewritten on every set."""

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self.path)


def get_store() -> JsonFileStore:
    return JsonFileStore(get_settings().STATE_FILE)
