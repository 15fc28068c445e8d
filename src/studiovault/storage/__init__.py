"""Storage layer for StudioVault - SQLite database and repositories."""

from studiovault.storage.db import get_connection, init_db
from studiovault.storage.repos import PreferencesRepo

__all__ = [
    "get_connection",
    "init_db",
    "PreferencesRepo",
]
