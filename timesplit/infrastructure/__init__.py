"""Infrastructure layer exports."""

from .preferences import (
    InMemoryPreferencesRepository,
    JsonFilePreferencesRepository,
    PreferencesRepository,
    default_state_path,
)

__all__ = [
    "InMemoryPreferencesRepository",
    "JsonFilePreferencesRepository",
    "PreferencesRepository",
    "default_state_path",
]
