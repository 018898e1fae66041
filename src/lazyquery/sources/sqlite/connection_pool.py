"""SQLite connection pool shared by queries against the same database file.

Queries built by one factory (one per sort order) all read the same database,
so connections are pooled per path instead of being opened per query.
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from queue import Empty, Queue
from typing import Any, Dict, Iterator, List, Sequence, Tuple
import logging

from ...config import DEFAULT_ACQUIRE_TIMEOUT, DEFAULT_POOL_SIZE
from ...errors import SourceError

logger = logging.getLogger(__name__)


class ConnectionPool:
    """Thread-safe pool of SQLite connections for one database file.

    Connections are created on first acquisition, use ``sqlite3.Row`` rows,
    and are rolled back before going back into the pool.
    """

    _pools: Dict[str, "ConnectionPool"] = {}
    _pools_lock = threading.Lock()

    @classmethod
    def get_pool(cls, db_path: str | Path, pool_size: int = DEFAULT_POOL_SIZE) -> "ConnectionPool":
        """Get or create the pool for *db_path*."""
        db_path_str = str(db_path)

        with cls._pools_lock:
            pool = cls._pools.get(db_path_str)
            if pool is None or pool.closed:
                pool = ConnectionPool(db_path_str, pool_size)
                cls._pools[db_path_str] = pool
            return pool

    @classmethod
    def shutdown_all(cls) -> None:
        with cls._pools_lock:
            pools = list(cls._pools.values())
            cls._pools.clear()
        for pool in pools:
            pool.shutdown()

    def __init__(self, db_path: str, pool_size: int = DEFAULT_POOL_SIZE) -> None:
        self._db_path = db_path
        self._pool_size = pool_size
        self._pool: Queue[sqlite3.Connection] = Queue(maxsize=pool_size)
        self._lock = threading.Lock()
        self._created = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _create_connection(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(
                self._db_path,
                check_same_thread=False,
                timeout=10.0,
            )
        except sqlite3.Error as exc:
            raise SourceError(f"Failed to open {self._db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        return conn

    def acquire(self, timeout: float = DEFAULT_ACQUIRE_TIMEOUT) -> sqlite3.Connection:
        """Take a connection from the pool, creating one while under capacity."""
        if self._closed:
            raise SourceError(f"Connection pool for {self._db_path} is closed")

        with self._lock:
            if self._pool.empty() and self._created < self._pool_size:
                self._created += 1
                logger.debug("Opening connection %d for %s", self._created, self._db_path)
                return self._create_connection()

        try:
            return self._pool.get(timeout=timeout)
        except Empty as exc:
            raise SourceError(
                f"Connection pool for {self._db_path} exhausted after {timeout:.1f}s"
            ) from exc

    def release(self, conn: sqlite3.Connection) -> None:
        if self._closed:
            conn.close()
            return
        conn.rollback()
        self._pool.put(conn, block=False)

    @contextmanager
    def connection(self, timeout: float = DEFAULT_ACQUIRE_TIMEOUT) -> Iterator[sqlite3.Connection]:
        conn = self.acquire(timeout)
        try:
            yield conn
        finally:
            self.release(conn)

    def execute_query(self, query: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        """Run a SELECT and return all rows."""
        with self.connection() as conn:
            try:
                return conn.execute(query, tuple(params)).fetchall()
            except sqlite3.Error as exc:
                raise SourceError(f"Query failed: {exc}") from exc

    def execute_transaction(self, statements: Sequence[Tuple[str, Sequence[Any]]]) -> None:
        """Run *statements* in one transaction, rolling back on any failure."""
        with self.connection() as conn:
            try:
                for statement, params in statements:
                    conn.execute(statement, tuple(params))
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

    def shutdown(self) -> None:
        """Close every pooled connection."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            closed_count = 0
            while not self._pool.empty():
                try:
                    conn = self._pool.get(block=False)
                except Empty:
                    break
                conn.close()
                closed_count += 1
            logger.debug("Closed %d connections for %s", closed_count, self._db_path)
