"""Transaction log operations.

The log is append-only: entries are written once by LandRegistry.transfer()
and never updated or deleted. Entries outlive the land they reference.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import StorageFailure
from ..models import Transaction

if TYPE_CHECKING:
    from ..store.database import LedgerDatabase, MemoryDatabase
    from ..store.record_store import RecordStore

logger = logging.getLogger(__name__)


class TransactionLog:
    """Append-only collection of ownership transfers."""

    def __init__(self, store: "RecordStore[Transaction]", db: "LedgerDatabase | MemoryDatabase"):
        """Initialize transaction log.

        Args:
            store: Record store keyed by transaction_id
            db: Database providing the write batch the store belongs to
        """
        self._store = store
        self._db = db

    def list(self) -> list[Transaction]:
        """Return every transaction ordered by transaction id."""
        return self._store.values()

    def for_land(self, land_id: str) -> list[Transaction]:
        """Return the transfer history of one land, oldest first.

        Args:
            land_id: Land identifier; the land need not exist any more

        Returns:
            Transactions referencing land_id ordered by created_at
        """
        history = [tx for tx in self._store.values() if tx.land_id == land_id]
        return sorted(history, key=lambda tx: (tx.created_at, tx.transaction_id))

    def append(self, transaction: Transaction) -> None:
        """Write a new entry.

        Joins the caller's batch when there is one, so a transfer commits the
        land update and this entry together.

        Raises:
            StorageFailure: If an entry with the same id already exists, or the
                store cannot complete the write
        """
        with self._db.batch():
            if self._store.get(transaction.transaction_id) is not None:
                raise StorageFailure(
                    f"Transaction {transaction.transaction_id} already recorded",
                    collection=self._store.name,
                    operation="insert",
                    key=transaction.transaction_id,
                    cause="duplicate key",
                )
            self._store.insert(transaction.transaction_id, transaction)

        logger.info(
            "Recorded transfer of land %s", transaction.land_id,
            extra={"land_id": transaction.land_id, "transaction_id": transaction.transaction_id},
        )

    def __len__(self) -> int:
        return len(self._store)
