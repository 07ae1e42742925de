"""Registry context for the land registry ledger.

The Registry owns everything the operations need: the database with its two
record stores, the clock and the identifier generator. It is built once by
the host and passed explicitly to whatever serves requests; there are no
module-level singletons.

ARCHITECTURE:
- registry.lands -> LandRegistry (CRUD and transfer)
- registry.transactions -> TransactionLog (append-only)
- Both stores live in one database so a transfer commits atomically

USAGE:
    with open_registry("ledger.db") as registry:
        land = registry.lands.add(LandPayload("Plot 7", "Alice", "CAD-001"))
        registry.lands.transfer(land.land_id, "Bob")
        history = registry.transactions.for_land(land.land_id)
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from ..exceptions import StorageFailure
from ..host.time import SystemClock
from ..models import Land, Transaction
from ..store.database import LedgerDatabase, MemoryDatabase, get_database
from ..utils.uid import IdentifierGenerator

if TYPE_CHECKING:
    from ..config import Settings
    from ..host.time import Clock
    from ..store.record_store import RecordStore
    from .land import LandRegistry
    from .transaction_log import TransactionLog

logger = logging.getLogger(__name__)

LAND_TABLE = "land"
TRANSACTION_TABLE = "land_transaction"


class SystemStatus(Enum):
    """Outcome of a consistency check."""

    NORMAL = "normal"
    SAFE_MODE = "safe_mode"


class Registry:
    """
    Land registry with its owned stores.

    Attributes:
        db: Database holding both collections
        clock: Timestamp source shared by all operations
        ids: Identifier generator shared by all operations
    """

    def __init__(
        self,
        db: LedgerDatabase | MemoryDatabase,
        clock: "Clock | None" = None,
        ids: IdentifierGenerator | None = None,
    ):
        """Initialize registry.

        Args:
            db: Database providing both record stores and the write batch
            clock: Timestamp source (default: SystemClock)
            ids: Identifier generator (default: plain UUIDv4 strings)
        """
        self.db = db
        self.clock = clock or SystemClock()
        self.ids = ids or IdentifierGenerator()
        self._land_store: RecordStore[Land] = db.record_store(
            LAND_TABLE, Land.to_dict, Land.from_dict
        )
        self._transaction_store: RecordStore[Transaction] = db.record_store(
            TRANSACTION_TABLE, Transaction.to_dict, Transaction.from_dict
        )
        self._land_ops = None
        self._transaction_ops = None

    @property
    def transactions(self) -> "TransactionLog":
        """Transaction log operations.

        Lazy-loaded to avoid circular import issues.
        """
        if self._transaction_ops is None:
            from .transaction_log import TransactionLog
            self._transaction_ops = TransactionLog(self._transaction_store, self.db)
        return self._transaction_ops

    @property
    def lands(self) -> "LandRegistry":
        """Land operations.

        Lazy-loaded to avoid circular import issues. Shares this registry's
        TransactionLog so transfers land in the same log.
        """
        if self._land_ops is None:
            from .land import LandRegistry
            self._land_ops = LandRegistry(
                self._land_store, self.transactions, self.db, self.clock, self.ids
            )
        return self._land_ops

    def check_consistency(self) -> SystemStatus:
        """
        Check both collections for unreadable or misfiled records.

        A record is misfiled when the key it is stored under differs from its
        own id. The registry keeps serving regardless of the result.

        Returns:
            SystemStatus.NORMAL, or SystemStatus.SAFE_MODE if any issue was found
        """
        issues = []
        with self.db.lock:
            for store, id_field in (
                (self._land_store, "land_id"),
                (self._transaction_store, "transaction_id"),
            ):
                for key in store.keys():
                    try:
                        record = store.get(key)
                    except StorageFailure as e:
                        issues.append(f"{store.name}/{key}: unreadable ({e.cause})")
                        continue
                    if record is not None and getattr(record, id_field) != key:
                        issues.append(f"{store.name}/{key}: stored under the wrong key")

        for issue in issues:
            logger.warning("Consistency check: %s", issue)

        if issues:
            return SystemStatus.SAFE_MODE
        return SystemStatus.NORMAL

    def close(self):
        """Release the database."""
        self.db.close()

    def __enter__(self) -> Registry:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def open_registry(
    db_path: str | Path | None = None,
    settings: "Settings | None" = None,
    clock: "Clock | None" = None,
    ids: IdentifierGenerator | None = None,
) -> Registry:
    """
    Open a registry over a SQLite ledger.

    Args:
        db_path: Explicit database path; wins over settings
        settings: Settings supplying database_path when db_path is None
        clock: Optional timestamp source
        ids: Optional identifier generator

    Returns:
        Registry bound to the database (schema applied on first use)
    """
    if db_path is None and settings is not None:
        db_path = settings.database_path
    return Registry(get_database(db_path), clock=clock, ids=ids)


def memory_registry(
    clock: "Clock | None" = None,
    ids: IdentifierGenerator | None = None,
) -> Registry:
    """Create a registry whose state lives only in this process."""
    return Registry(MemoryDatabase(), clock=clock, ids=ids)


def init_db(db_path: str | Path | None = None) -> str | None:
    """Create the ledger schema if needed.

    Returns:
        The schema version recorded in the database
    """
    with get_database(db_path) as db:
        return db.get_schema_version()
