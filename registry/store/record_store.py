"""Ordered key-value record stores.

A RecordStore maps string keys to records and lists them in ascending key
order. Absence is always reported as None; only a backend that cannot
complete an operation raises, and then always as StorageFailure.

Two backends:
- SqliteRecordStore: one table of a LedgerDatabase, one JSON row per record
- MemoryRecordStore: sorted in-process dict journalled by a MemoryDatabase
"""

from __future__ import annotations

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Generic, TypeVar

from ..exceptions import StorageFailure

if TYPE_CHECKING:
    from .database import LedgerDatabase, MemoryDatabase

logger = logging.getLogger(__name__)

V = TypeVar("V")

# Tables a SqliteRecordStore may address; names are interpolated into SQL.
KNOWN_TABLES = frozenset({"land", "land_transaction"})


class RecordStore(ABC, Generic[V]):
    """Ordered key-value container.

    Attributes:
        name: Collection name, used in errors and logs
    """

    name: str

    @abstractmethod
    def get(self, key: str) -> V | None:
        """Return the record stored under key, or None."""

    @abstractmethod
    def insert(self, key: str, value: V) -> V | None:
        """Store value under key, returning the record it replaced, if any."""

    @abstractmethod
    def remove(self, key: str) -> V | None:
        """Delete the record under key, returning it, or None if absent."""

    @abstractmethod
    def values(self) -> list[V]:
        """Return every record ordered by ascending key."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return every key in ascending order."""

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        return len(self.keys())


class SqliteRecordStore(RecordStore[V]):
    """RecordStore persisted as one table of a LedgerDatabase.

    Rows are ``(key TEXT PRIMARY KEY, data TEXT)``; data is the JSON form of
    the record produced by ``encode``.
    """

    def __init__(
        self,
        db: "LedgerDatabase",
        table: str,
        encode: Callable[[V], dict],
        decode: Callable[[dict], V],
    ):
        """Initialize a table-backed store.

        Args:
            db: Owning database; supplies the connection and the write batch
            table: Table name, one of KNOWN_TABLES
            encode: Record to flat dict
            decode: Flat dict to record

        Raises:
            ValueError: If table is not a known ledger table
        """
        if table not in KNOWN_TABLES:
            raise ValueError(f"Unknown table: {table!r}. Must be one of: {sorted(KNOWN_TABLES)}")
        self.name = table
        self._db = db
        self._encode = encode
        self._decode = decode

    def _failure(self, operation: str, key: str | None, error: Exception) -> StorageFailure:
        logger.error(
            "Record store %s failed during %s: %s", self.name, operation, error,
            extra={"collection": self.name, "operation": operation},
        )
        return StorageFailure(
            f"Could not {operation} record in {self.name}",
            collection=self.name,
            operation=operation,
            key=key,
            cause=str(error),
        )

    def _load(self, key: str | None, raw: str, operation: str) -> V:
        try:
            return self._decode(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            raise self._failure(operation, key, e) from e

    def get(self, key: str) -> V | None:
        try:
            with self._db.lock:
                row = self._db._get_connection().execute(
                    f"SELECT data FROM {self.name} WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise self._failure("get", key, e) from e

        if row is None:
            return None
        return self._load(key, row["data"], "get")

    def insert(self, key: str, value: V) -> V | None:
        with self._db.batch():
            previous = self.get(key)
            try:
                data = json.dumps(self._encode(value), sort_keys=True)
                self._db._get_connection().execute(
                    f"INSERT OR REPLACE INTO {self.name} (key, data) VALUES (?, ?)",
                    (key, data),
                )
            except (sqlite3.Error, TypeError, ValueError) as e:
                raise self._failure("insert", key, e) from e
        return previous

    def remove(self, key: str) -> V | None:
        """Delete the row under key.

        An unreadable row is still deleted; it is logged and reported as None.
        """
        with self._db.batch():
            try:
                conn = self._db._get_connection()
                row = conn.execute(
                    f"SELECT data FROM {self.name} WHERE key = ?", (key,)
                ).fetchone()
                if row is None:
                    return None
                conn.execute(f"DELETE FROM {self.name} WHERE key = ?", (key,))
            except sqlite3.Error as e:
                raise self._failure("remove", key, e) from e

            try:
                return self._decode(json.loads(row["data"]))
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(
                    "Removed unreadable record %s/%s: %s", self.name, key, e,
                    extra={"collection": self.name, "operation": "remove"},
                )
                return None

    def values(self) -> list[V]:
        try:
            with self._db.lock:
                rows = self._db._get_connection().execute(
                    f"SELECT key, data FROM {self.name} ORDER BY key"
                ).fetchall()
        except sqlite3.Error as e:
            raise self._failure("values", None, e) from e
        return [self._load(row["key"], row["data"], "values") for row in rows]

    def keys(self) -> list[str]:
        try:
            with self._db.lock:
                rows = self._db._get_connection().execute(
                    f"SELECT key FROM {self.name} ORDER BY key"
                ).fetchall()
        except sqlite3.Error as e:
            raise self._failure("keys", None, e) from e
        return [row["key"] for row in rows]


class MemoryRecordStore(RecordStore[V]):
    """RecordStore held in process memory.

    Every write registers an undo step with the owning MemoryDatabase so a
    failed batch can restore the previous state.
    """

    def __init__(self, db: "MemoryDatabase", name: str):
        self.name = name
        self._db = db
        self._data: dict[str, V] = {}

    def _restore(self, key: str, previous: V | None):
        if previous is None:
            self._data.pop(key, None)
        else:
            self._data[key] = previous

    def get(self, key: str) -> V | None:
        with self._db.lock:
            return self._data.get(key)

    def insert(self, key: str, value: V) -> V | None:
        with self._db.batch():
            previous = self._data.get(key)
            self._data[key] = value
            self._db.record_undo(lambda: self._restore(key, previous))
        return previous

    def remove(self, key: str) -> V | None:
        with self._db.batch():
            previous = self._data.pop(key, None)
            if previous is not None:
                self._db.record_undo(lambda: self._restore(key, previous))
        return previous

    def values(self) -> list[V]:
        with self._db.lock:
            return [self._data[key] for key in sorted(self._data)]

    def keys(self) -> list[str]:
        with self._db.lock:
            return sorted(self._data)
