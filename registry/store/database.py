"""Ledger database: connection lifecycle and atomic write batches.

ARCHITECTURE:
- One SQLite file holds both collections (land, land_transaction)
- The database owns its connection; record stores borrow it
- Every write runs inside batch(): a process-wide re-entrant lock plus a
  SQLite ``BEGIN IMMEDIATE`` transaction, committed on success and rolled
  back on any exception
- Nested batch() calls join the outermost batch, so a transfer that writes
  both collections commits them together or not at all

MemoryDatabase offers the same batch() contract for in-process stores,
using an undo journal instead of SQLite rollback.

USAGE:
    with LedgerDatabase("ledger.db") as db:
        lands = db.record_store("land", Land.to_dict, Land.from_dict)
        with db.batch():
            lands.insert(land.land_id, land)
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, TypeVar

from ..exceptions import StorageFailure
from ..host.filesystem import ensure_dir
from ..schemas import get_sql_schema
from .record_store import MemoryRecordStore, SqliteRecordStore

logger = logging.getLogger(__name__)

V = TypeVar("V")


class LedgerDatabase:
    """SQLite-backed ledger database.

    CONNECTION LIFECYCLE:
    - The connection opens lazily on first use and applies the bundled schema
    - close() releases it; the context manager closes on exit
    - The connection may be used from any thread; the database lock
      serializes all access

    Attributes:
        db_path: Path to the SQLite file (":memory:" for a private in-memory db)
        lock: Re-entrant lock guarding every read and write
    """

    def __init__(self, db_path: str | Path = "ledger.db"):
        """Initialize ledger database.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path if db_path == ":memory:" else Path(db_path)
        self.lock = threading.RLock()
        self._conn: sqlite3.Connection | None = None
        self._depth = 0

    def _get_connection(self) -> sqlite3.Connection:
        """Get connection, opening and initializing it on first use.

        Returns:
            SQLite connection

        Raises:
            StorageFailure: If the database cannot be opened
        """
        if self._conn is None:
            try:
                if isinstance(self.db_path, Path):
                    ensure_dir(self.db_path.parent)
                # isolation_level=None: transactions are managed by batch()
                conn = sqlite3.connect(
                    str(self.db_path), isolation_level=None, check_same_thread=False
                )
                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA journal_mode = WAL")
                conn.executescript(get_sql_schema("ledger"))
            except sqlite3.Error as e:
                logger.error("Cannot open ledger database %s: %s", self.db_path, e)
                raise StorageFailure(
                    f"Cannot open ledger database {self.db_path}",
                    collection="ledger",
                    operation="open",
                    cause=str(e),
                ) from e
            self._conn = conn
        return self._conn

    def close(self):
        """Close database connection."""
        with self.lock:
            if self._conn:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> LedgerDatabase:
        self._get_connection()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def record_store(
        self,
        table: str,
        encode: Callable[[V], dict],
        decode: Callable[[dict], V],
    ) -> SqliteRecordStore[V]:
        """Create a record store over one ledger table."""
        return SqliteRecordStore(self, table, encode, decode)

    def get_schema_version(self) -> str | None:
        """Get current schema version."""
        with self.lock:
            row = self._get_connection().execute(
                "SELECT value FROM _schema_metadata WHERE key = 'version'"
            ).fetchone()
        return row[0] if row else None

    @contextmanager
    def batch(self) -> Iterator[LedgerDatabase]:
        """Run the enclosed writes as one atomic unit.

        Raises:
            StorageFailure: If the transaction cannot begin or commit
        """
        with self.lock:
            if self._depth > 0:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            conn = self._get_connection()
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                raise StorageFailure(
                    "Cannot begin ledger transaction",
                    collection="ledger",
                    operation="begin",
                    cause=str(e),
                ) from e

            self._depth = 1
            try:
                yield self
            except BaseException:
                self._rollback(conn)
                raise
            else:
                self._commit(conn)
            finally:
                self._depth = 0

    def _commit(self, conn: sqlite3.Connection):
        try:
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            logger.error("Ledger commit failed: %s", e)
            self._rollback(conn)
            raise StorageFailure(
                "Ledger commit failed",
                collection="ledger",
                operation="commit",
                cause=str(e),
            ) from e

    def _rollback(self, conn: sqlite3.Connection):
        if not conn.in_transaction:
            return
        try:
            conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            logger.warning("Ledger rollback failed: %s", e)


class MemoryDatabase:
    """In-process ledger database with the same batch() contract.

    Record stores register an undo step for each write; an exception inside
    the outermost batch replays them in reverse.

    Attributes:
        lock: Re-entrant lock guarding every read and write
    """

    def __init__(self):
        self.lock = threading.RLock()
        self._undo: list[Callable[[], None]] = []
        self._depth = 0

    def record_store(self, name: str, *_codec) -> MemoryRecordStore:
        """Create a record store; codecs are accepted and ignored."""
        return MemoryRecordStore(self, name)

    def record_undo(self, step: Callable[[], None]):
        """Register how to revert the write just made."""
        if self._depth > 0:
            self._undo.append(step)

    def close(self):
        """Nothing to release; present for parity with LedgerDatabase."""

    @contextmanager
    def batch(self) -> Iterator[MemoryDatabase]:
        with self.lock:
            outermost = self._depth == 0
            self._depth += 1
            try:
                yield self
            except BaseException:
                if outermost:
                    for step in reversed(self._undo):
                        step()
                raise
            finally:
                self._depth -= 1
                if outermost:
                    self._undo.clear()


def get_database(db_path: str | Path | None = None) -> LedgerDatabase:
    """Get a ledger database.

    Args:
        db_path: Path to the SQLite file. If None, resolved from the
            environment via get_db_path()

    Returns:
        LedgerDatabase instance (connection opens on first use)
    """
    if db_path is None:
        from ..host.environment import get_db_path
        db_path = get_db_path()
    return LedgerDatabase(db_path)
