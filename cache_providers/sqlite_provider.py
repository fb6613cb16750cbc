"""
SQLite-backed cache store.

One row per key with an absolute expiry timestamp. Reads ignore expired
rows; writes replace the row, and every purge_every-th write first deletes
all expired rows so the table does not grow without bound. Shared by
every worker process on the host that points at the same file.

Config keys:
    path         database file (default: ssr_cache.db)
    pool_size    pooled connections (default: 5)
    timeout      connection checkout / busy timeout in seconds (default: 1.0)
    purge_every  writes between expired-row purges (default: 100)
"""

import logging
import sqlite3
import threading
import time
from typing import Any, Dict

from cache_providers.base import CacheError, CacheMissError, CacheProvider
from cache_providers.registry import registry
from db.pool import PoolTimeoutError, SQLitePool

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache_entries (
    key        TEXT PRIMARY KEY,
    value      BLOB NOT NULL,
    expires_at REAL NOT NULL
)
"""


class SQLiteCacheProvider(CacheProvider):
    """Cache entries in a local SQLite database (WAL mode)."""

    name = "sqlite"

    def __init__(self, config: Dict[str, Any] = None):
        super().__init__(config)
        self.path = str(self.get_config("path", "ssr_cache.db"))
        self.purge_every = max(int(self.get_config("purge_every", 100)), 1)
        self._db = SQLitePool(
            self.path,
            pool_size=int(self.get_config("pool_size", 5)),
            timeout=float(self.get_config("timeout", 1.0)),
        )
        self._db.execute(_SCHEMA)
        self._writes = 0
        self._writes_lock = threading.Lock()
        logger.info("SQLite cache ready at %s", self.path)

    def get(self, key: str) -> bytes:
        try:
            rows = self._db.query(
                "SELECT value FROM cache_entries WHERE key = ? AND expires_at > ?",
                (self._key(key), time.time()),
            )
        except (sqlite3.Error, PoolTimeoutError) as exc:
            raise CacheError(self.name, f"read failed: {exc}") from exc
        if not rows:
            raise CacheMissError(self.name, key)
        return bytes(rows[0][0])

    def put(self, key: str, expiration: float, data: bytes) -> None:
        with self._writes_lock:
            self._writes += 1
            purge = self._writes % self.purge_every == 0
        try:
            if purge:
                self.purge_expired()
            self._db.execute(
                "INSERT OR REPLACE INTO cache_entries (key, value, expires_at) VALUES (?, ?, ?)",
                (self._key(key), sqlite3.Binary(data), time.time() + expiration),
            )
        except (sqlite3.Error, PoolTimeoutError) as exc:
            raise CacheError(self.name, f"write failed: {exc}") from exc

    def purge_expired(self) -> int:
        """Delete expired rows. Returns the number removed."""
        removed = self._db.execute(
            "DELETE FROM cache_entries WHERE expires_at <= ?", (time.time(),)
        ).rowcount
        if removed:
            logger.debug("SQLite cache purged %d expired rows", removed)
        return removed

    def is_available(self) -> bool:
        try:
            self._db.query("SELECT 1")
            return True
        except (sqlite3.Error, PoolTimeoutError) as exc:
            logger.warning("SQLite cache unavailable: %s", exc)
            return False

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info["path"] = self.path
        return info

    def close(self) -> None:
        self._db.close()


registry.register("sqlite", SQLiteCacheProvider)
