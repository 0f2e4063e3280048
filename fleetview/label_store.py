"""
Persistent per-device label storage.

Labels are kept in a SQLite key/value ``settings`` table, one row per device
under the ``nickname_`` key prefix.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Generator, Optional

from .constants import DEFAULT_DB_PATH, LABEL_KEY_PREFIX
from .logging import get_logger

logger = get_logger('fleetview.labels')


class LabelStore:
    """
    Label store interface.

    The base class is the store used when none is configured: it remembers
    nothing, and writes succeed because there is nothing to fail.
    """

    def get(self, identity: str) -> Optional[str]:
        return None

    def set(self, identity: str, label: str) -> bool:
        """Persist a label. Returns False when the write failed."""
        return True

    def close(self) -> None:
        pass


class SQLiteLabelStore(LabelStore):
    """Label store backed by a SQLite settings table."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH, prefix: str = LABEL_KEY_PREFIX):
        self.db_path = db_path
        self.prefix = prefix
        self._conn: Optional[sqlite3.Connection] = None
        self._init_tables()

    def _key(self, identity: str) -> str:
        return f"{self.prefix}{identity}"

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    @contextmanager
    def get_db(self) -> Generator[sqlite3.Connection, None, None]:
        """Yield the connection, committing on success and rolling back on error."""
        conn = self._connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def _init_tables(self) -> None:
        with self.get_db() as conn:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')

    def get(self, identity: str) -> Optional[str]:
        """Get the stored label for a device, or None."""
        try:
            with self.get_db() as conn:
                cursor = conn.execute(
                    'SELECT value FROM settings WHERE key = ?',
                    (self._key(identity),)
                )
                row = cursor.fetchone()
                return row['value'] if row else None
        except sqlite3.Error as e:
            logger.warning(f"Error reading label for {identity}: {e}")
            return None

    def set(self, identity: str, label: str) -> bool:
        """Store a label. Returns False when the write failed."""
        try:
            with self.get_db() as conn:
                conn.execute('''
                    INSERT INTO settings (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = CURRENT_TIMESTAMP
                ''', (self._key(identity), label))
            return True
        except sqlite3.Error as e:
            logger.error(f"Error saving label for {identity}: {e}")
            return False

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
