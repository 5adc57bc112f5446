"""
src/storage/backends.py — durable key-value storage for the credential record

Provides:
- KeyValueBackend: the tiny interface the credential store needs (get / set)
- MemoryBackend: dict-backed, for tests and throwaway sessions
- SqliteBackend: one SQLite row per key, string values only

Notes:
* No caching. Every get() goes back to the medium, so a value written by another
  process is visible on the next read (last writer wins, per key).
* Each set() is a single-row upsert in its own transaction. Writers of different
  keys never overwrite each other.
* A file that is not a readable SQLite database raises StoreCorruptError.
"""


from __future__ import annotations
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Optional, Protocol

from access.errors import StoreCorruptError


logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryBackend:

    def __init__(self, data: Optional[Dict[str, str]] = None):

        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:

        return self.data.get(key)

    def set(self, key: str, value: str) -> None:

        self.data[key] = value


class SqliteBackend:
    """
    Usage:
        backend = SqliteBackend(Path("data/credentials.db"))
        backend.set("currentRole", "owner")
    """

    def __init__(self, path: Path, timeout: float = 5.0):

        self.path = Path(path)
        self.timeout = timeout

    @contextmanager
    def _get_connection(self):
        """Internal: open, create the table if needed, commit on success, always close."""

        conn = sqlite3.connect(str(self.path), timeout=self.timeout)
        try:
            conn.execute("CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)")
            yield conn
            conn.commit()
        except sqlite3.DatabaseError as e:
            raise StoreCorruptError(f"Store file is not a readable database: {self.path} ({e})") from e
        finally:
            conn.close()

    def get(self, key: str) -> Optional[str]:
        """A missing file reads as empty storage and is NOT created."""

        if not self.path.exists():
            return None

        with self._get_connection() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()

        return None if row is None else row[0]

    def set(self, key: str, value: str) -> None:

        self.path.parent.mkdir(parents=True, exist_ok=True)

        with self._get_connection() as conn:
            conn.execute("INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", (key, value))

        logger.debug("Wrote key %s to %s", key, self.path)
