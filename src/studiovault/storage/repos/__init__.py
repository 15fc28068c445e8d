"""Repository classes for data access."""

from studiovault.storage.repos.preferences_repo import PreferencesRepo

__all__ = [
    "PreferencesRepo",
]
