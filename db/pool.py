# db/pool.py
"""SQLite connection pool with WAL mode enabled.

Backs the sqlite cache provider: many request threads read rendered pages
concurrently while a few write new ones, which is what WAL is good at.
Checkout and busy waits are short and configurable so a contended
database never stalls a request for long.

Usage:
    from db.pool import SQLitePool
    db = SQLitePool("ssr_cache.db", pool_size=5, timeout=1.0)

    db.execute("INSERT OR REPLACE INTO cache_entries VALUES (?, ?, ?)", row)
    rows = db.query("SELECT value FROM cache_entries WHERE key = ?", (key,))
"""
import sqlite3
import time
from contextlib import contextmanager
from queue import Empty, Queue


class PoolTimeoutError(RuntimeError):
    """No connection became free within the checkout timeout."""
    pass


class SQLitePool:
    """Thread-safe SQLite connection pool with WAL mode."""

    def __init__(self, db_path: str, pool_size: int = 5, timeout: float = 5.0):
        self.db_path = str(db_path)
        self.pool_size = pool_size
        self.timeout = timeout
        self._pool = Queue(maxsize=pool_size)

        for _ in range(pool_size):
            self._pool.put(self._create_connection())

    def _create_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self.db_path,
            timeout=self.timeout,
            check_same_thread=False,
        )
        conn.execute("PRAGMA journal_mode=WAL")
        # NORMAL is safe with WAL; a lost cache write is only a future miss
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.execute(f"PRAGMA busy_timeout={int(self.timeout * 1000)}")
        return conn

    @contextmanager
    def get_connection(self):
        """Get a connection from the pool (blocks up to `timeout` seconds)."""
        try:
            conn = self._pool.get(timeout=self.timeout)
        except Empty:
            raise PoolTimeoutError(
                f"SQLitePool: no free connection within {self.timeout}s "
                f"(pool size {self.pool_size})"
            )
        try:
            yield conn
        finally:
            self._pool.put(conn)

    def execute(self, query: str, params: tuple = (), retries: int = 2):
        """Execute a write query, retrying briefly while the database is locked."""
        for attempt in range(retries + 1):
            try:
                with self.get_connection() as conn:
                    cursor = conn.execute(query, params)
                    conn.commit()
                    return cursor
            except sqlite3.OperationalError as e:
                if "locked" in str(e) and attempt < retries:
                    time.sleep(0.05 * (attempt + 1))
                    continue
                raise

    def query(self, query: str, params: tuple = ()) -> list:
        """Execute a read query and return all rows."""
        with self.get_connection() as conn:
            return conn.execute(query, params).fetchall()

    def close(self) -> int:
        """Drain the pool and close all connections. Returns how many were closed."""
        closed = 0
        while True:
            try:
                conn = self._pool.get_nowait()
            except Empty:
                break
            conn.close()
            closed += 1
        return closed
