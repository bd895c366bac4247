"""Key-value storage backends for the progress record."""

import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog

from ..errors import PersistenceError


class KeyValueBackend(ABC):
    """Blocking get/set/remove store for string values."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove the key. Removing an absent key is not an error."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the backend is usable."""
        pass


class InMemoryBackend(KeyValueBackend):
    """Dictionary-backed store, lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def health_check(self) -> bool:
        return True


class UnavailableBackend(KeyValueBackend):
    """Backend that refuses every call, as when storage is disabled."""

    def __init__(self, reason: str = "Storage backend is disabled"):
        self.reason = reason

    def _refuse(self, operation: str, key: str) -> PersistenceError:
        return PersistenceError(self.reason, operation=operation, target=key)

    def get(self, key: str) -> Optional[str]:
        raise self._refuse("get", key)

    def set(self, key: str, value: str) -> None:
        raise self._refuse("set", key)

    def remove(self, key: str) -> None:
        raise self._refuse("remove", key)

    def health_check(self) -> bool:
        return False


class SQLiteBackend(KeyValueBackend):
    """SQLite-based key-value store."""

    def __init__(self, db_path: str = "progress.db"):
        self.db_path = Path(db_path)
        self.logger = structlog.get_logger("persistence.sqlite")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS progress (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get database connection, re-raising sqlite errors as PersistenceError."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", db_path=str(self.db_path), error=str(e))
            raise PersistenceError(
                f"Database error: {e}",
                operation="sqlite",
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT value FROM progress WHERE key = ?", (key,)
                ).fetchone()
                return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO progress (key, value, updated_at)
                    VALUES (?, ?, ?)
                """, (key, value, datetime.now(timezone.utc).isoformat()))
                conn.commit()

    def remove(self, key: str) -> None:
        with self._lock:
            with self._get_connection() as conn:
                conn.execute("DELETE FROM progress WHERE key = ?", (key,))
                conn.commit()

    def health_check(self) -> bool:
        try:
            with self._get_connection() as conn:
                conn.execute("SELECT 1").fetchone()
            return True
        except PersistenceError:
            return False
