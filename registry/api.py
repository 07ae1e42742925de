"""Entry-point adapter for the land registry.

Maps the seven ledger operations onto a ``{"Ok": value}`` / ``{"Err": message}``
envelope with camelCase records, the shape clients of the ledger consume.
Core exceptions stop here; nothing below this layer builds envelopes.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .core import Registry
from .exceptions import InvalidPayload, LandRegistryError, NotFound, StorageFailure
from .models import LandPayload

logger = logging.getLogger(__name__)

Envelope = dict[str, Any]

ERROR_CODES = {
    InvalidPayload: "invalid_payload",
    NotFound: "not_found",
    StorageFailure: "storage_failure",
}


def ok(value: Any) -> Envelope:
    return {"Ok": value}


def err(message: str) -> Envelope:
    return {"Err": message}


class RegistryService:
    """Envelope-returning facade over a Registry."""

    def __init__(self, registry: Registry):
        self._registry = registry

    def _call(self, operation: str, fn: Callable[[], Any]) -> Envelope:
        try:
            return ok(fn())
        except LandRegistryError as e:
            code = ERROR_CODES.get(type(e), "error")
            logger.info("%s rejected: %s", operation, e.message, extra={"error_code": code})
            return err(e.message)

    def get_lands(self) -> Envelope:
        return self._call(
            "get_lands",
            lambda: [land.to_dict() for land in self._registry.lands.list()],
        )

    def get_land(self, land_id: str) -> Envelope:
        return self._call("get_land", lambda: self._registry.lands.get(land_id).to_dict())

    def get_transactions(self) -> Envelope:
        return self._call(
            "get_transactions",
            lambda: [tx.to_dict() for tx in self._registry.transactions.list()],
        )

    def add_land(self, payload: dict) -> Envelope:
        return self._call(
            "add_land",
            lambda: self._registry.lands.add(LandPayload.from_dict(payload)).to_dict(),
        )

    def update_land(self, land_id: str, payload: dict) -> Envelope:
        return self._call(
            "update_land",
            lambda: self._registry.lands.update(land_id, LandPayload.from_dict(payload)).to_dict(),
        )

    def delete_land(self, land_id: str) -> Envelope:
        return self._call("delete_land", lambda: self._registry.lands.delete(land_id).to_dict())

    def transfer_land(self, land_id: str, to_owner: str) -> Envelope:
        return self._call(
            "transfer_land",
            lambda: self._registry.lands.transfer(land_id, to_owner).to_dict(),
        )
