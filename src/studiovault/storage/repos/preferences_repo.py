"""Preferences repository - pure data access for user preferences."""

import sqlite3

LAST_VAULT_PATH = "last_vault_path"


class PreferencesRepo:
    """Repository for key/value user preferences."""

    def __init__(self, conn: sqlite3.Connection):
        """
        Initialize preferences repository.

        Args:
            conn: SQLite connection with row_factory set
        """
        self.conn = conn

    def get(self, key: str) -> str | None:
        """Get a preference value, or None if not set."""
        row = self.conn.execute(
            "SELECT value FROM preferences WHERE key = ?",
            (key,),
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        """Insert or update a preference."""
        self.conn.execute(
            """
            INSERT INTO preferences (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (key, value),
        )

    def get_last_vault_path(self) -> str | None:
        return self.get(LAST_VAULT_PATH)

    def set_last_vault_path(self, path: str) -> None:
        self.set(LAST_VAULT_PATH, path)
