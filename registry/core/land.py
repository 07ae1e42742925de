"""Land registry operations.

IMPORT CONVENTION:
- Registry exposes these through the registry.lands property
- Receives the TransactionLog so transfer() can record its audit entry

ID GENERATION POLICY:
Land and transaction ids are generated here, never supplied by callers.

VALIDATION:
Every operation validates its arguments before touching storage, so a
rejected call never leaves partial state. An empty or non-string land id is
reported as NotFound by lookups and as InvalidPayload by update(), whose
payload check runs first.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import InvalidPayload, NotFound
from ..models import Land, LandPayload, Transaction

if TYPE_CHECKING:
    from ..host.time import Clock
    from ..store.database import LedgerDatabase, MemoryDatabase
    from ..store.record_store import RecordStore
    from ..utils.uid import IdentifierGenerator
    from .transaction_log import TransactionLog

logger = logging.getLogger(__name__)


_NOT_FOUND_MESSAGES = {
    "get": "Land with id={land_id} not found",
    "update": "Couldn't update land with id={land_id}. Land not found",
    "delete": "Couldn't delete land with id={land_id}. Land not found",
    "transfer": "Couldn't transfer land with id={land_id}. Land not found",
}


def _is_valid_id(land_id: object) -> bool:
    return isinstance(land_id, str) and bool(land_id)


class LandRegistry:
    """CRUD and ownership transfer over the land collection."""

    def __init__(
        self,
        store: "RecordStore[Land]",
        transactions: "TransactionLog",
        db: "LedgerDatabase | MemoryDatabase",
        clock: "Clock",
        ids: "IdentifierGenerator",
    ):
        """Initialize land registry.

        Args:
            store: Record store keyed by land_id
            transactions: Log receiving one entry per transfer
            db: Database providing the write batch spanning both stores
            clock: Source of created_at/updated_at timestamps
            ids: Generator for land and transaction ids
        """
        self._store = store
        self._transactions = transactions
        self._db = db
        self._clock = clock
        self._ids = ids

    def _not_found(self, land_id: object, action: str) -> NotFound:
        message = _NOT_FOUND_MESSAGES[action].format(land_id=land_id)
        return NotFound(message, land_id=land_id)

    def list(self) -> list[Land]:
        """Return every land ordered by land id."""
        return self._store.values()

    def get(self, land_id: str) -> Land:
        """Get land by ID.

        Args:
            land_id: The land identifier

        Returns:
            The stored Land

        Raises:
            NotFound: If land_id is absent, empty or not a string
        """
        if not _is_valid_id(land_id):
            raise self._not_found(land_id, "get")

        land = self._store.get(land_id)
        if land is None:
            raise self._not_found(land_id, "get")
        return land

    def add(self, payload: LandPayload) -> Land:
        """Register a new land.

        Args:
            payload: Location, owner and cadastral reference, all non-empty

        Returns:
            The stored Land including its generated id and created_at

        Raises:
            InvalidPayload: If any payload field is empty
        """
        missing = payload.missing_fields()
        if missing:
            raise InvalidPayload("Invalid payload properties for adding a land.", fields=missing)

        land = Land(
            land_id=self._ids.next(),
            location=payload.location,
            owner=payload.owner,
            unique_identifier=payload.unique_identifier,
            created_at=self._clock.now(),
            updated_at=None,
        )
        with self._db.batch():
            self._store.insert(land.land_id, land)

        logger.info("Added land %s", land.land_id, extra={"land_id": land.land_id})
        return land

    def update(self, land_id: str, payload: LandPayload) -> Land:
        """Overwrite every payload field of an existing land.

        Args:
            land_id: The land identifier
            payload: Replacement location, owner and cadastral reference

        Returns:
            The updated Land; land_id and created_at are preserved

        Raises:
            InvalidPayload: If land_id or any payload field is empty
            NotFound: If land_id doesn't exist
        """
        missing = payload.missing_fields()
        if not _is_valid_id(land_id):
            missing.insert(0, "land_id")
        if missing:
            raise InvalidPayload(
                "Invalid ID or payload properties for updating a land.", fields=missing
            )

        with self._db.batch():
            land = self._store.get(land_id)
            if land is None:
                raise self._not_found(land_id, "update")

            updated = land.with_payload(payload, updated_at=self._clock.now())
            self._store.insert(land_id, updated)

        logger.info("Updated land %s", land_id, extra={"land_id": land_id})
        return updated

    def delete(self, land_id: str) -> Land:
        """Delete a land. Its transactions are kept.

        Args:
            land_id: The land identifier

        Returns:
            The Land as it was before deletion

        Raises:
            NotFound: If land_id doesn't exist
        """
        if not _is_valid_id(land_id):
            raise self._not_found(land_id, "delete")

        with self._db.batch():
            deleted = self._store.remove(land_id)
        if deleted is None:
            raise self._not_found(land_id, "delete")

        logger.info("Deleted land %s", land_id, extra={"land_id": land_id})
        return deleted

    def transfer(self, land_id: str, to_owner: str) -> Land:
        """Transfer a land to a new owner and record the transaction.

        The land update and the transaction entry are written in one batch:
        no reader observes one without the other.

        Args:
            land_id: The land identifier
            to_owner: The new owner, non-empty

        Returns:
            The updated Land

        Raises:
            NotFound: If land_id doesn't exist; checked before to_owner
            InvalidPayload: If to_owner is empty
            StorageFailure: If either write fails; neither is kept
        """
        if not _is_valid_id(land_id):
            raise self._not_found(land_id, "transfer")

        with self._db.batch():
            land = self._store.get(land_id)
            if land is None:
                raise self._not_found(land_id, "transfer")
            if not isinstance(to_owner, str) or not to_owner:
                raise InvalidPayload(
                    "Invalid new owner for transferring a land.", fields=["to_owner"]
                )

            now = self._clock.now()
            transaction = Transaction(
                transaction_id=self._ids.next(),
                land_id=land.land_id,
                from_owner=land.owner,
                to_owner=to_owner,
                created_at=now,
            )
            updated = land.with_owner(to_owner, updated_at=now)

            self._store.insert(land_id, updated)
            self._transactions.append(transaction)

        logger.info(
            "Transferred land %s", land_id,
            extra={"land_id": land_id, "transaction_id": transaction.transaction_id},
        )
        return updated

    def __len__(self) -> int:
        return len(self._store)
