"""Infrastructure layer for remembering the last-used request."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Protocol

from timesplit.core.schema import StoredPreferences


class PreferencesRepository(Protocol):
    """Persistence contract for caller preferences."""

    def load(self) -> StoredPreferences | None: ...

    def save(self, preferences: StoredPreferences) -> None: ...

    def reset(self) -> None: ...


class InMemoryPreferencesRepository:
    """Process-local store for embedding callers and tests."""

    def __init__(self) -> None:
        self._preferences: StoredPreferences | None = None

    def load(self) -> StoredPreferences | None:
        if self._preferences is None:
            return None
        return self._preferences.model_copy(deep=True)

    def save(self, preferences: StoredPreferences) -> None:
        self._preferences = preferences.model_copy(deep=True)

    def reset(self) -> None:
        self._preferences = None


def default_state_path() -> Path:
    env_path = os.getenv("TIMESPLIT_STATE_PATH")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path.home() / ".timesplit" / "last_request.json"


class JsonFilePreferencesRepository:
    """Keeps preferences in a JSON file, camelCase like the HTTP payload."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_state_path()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StoredPreferences | None:
        if not self._path.exists():
            return None
        with self._path.open("r", encoding="utf-8") as fp:
            return StoredPreferences.model_validate(json.load(fp))

    def save(self, preferences: StoredPreferences) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = preferences.model_dump(by_alias=True, exclude_none=True)
        self._path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    def reset(self) -> None:
        self._path.unlink(missing_ok=True)
