"""Record dataclasses for the land registry.

Records are frozen; a mutation produces a new instance. The serialized form
is a flat dict using the camelCase field names of the ledger's wire format.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class LandPayload:
    """Caller-supplied fields for adding or updating a land."""
    location: str
    owner: str
    unique_identifier: str  # external cadastral reference

    def missing_fields(self) -> list[str]:
        """Return the names of required fields that are empty."""
        return [
            name for name in ("location", "owner", "unique_identifier")
            if not isinstance(getattr(self, name), str) or not getattr(self, name)
        ]

    @classmethod
    def from_dict(cls, data: dict) -> LandPayload:
        """Build a payload from wire data.

        Anything that is not a dict yields an all-empty payload, which every
        operation rejects as InvalidPayload.
        """
        if not isinstance(data, dict):
            data = {}
        return cls(
            location=data.get("location", ""),
            owner=data.get("owner", ""),
            unique_identifier=data.get("uniqueIdentifier", ""),
        )


@dataclass(frozen=True)
class Land:
    """A registry entry for one parcel and its current owner."""
    land_id: str
    location: str
    owner: str
    unique_identifier: str
    created_at: int  # ns since epoch
    updated_at: int | None = None

    def with_payload(self, payload: LandPayload, updated_at: int) -> Land:
        """Return a copy with every payload field overwritten."""
        return replace(
            self,
            location=payload.location,
            owner=payload.owner,
            unique_identifier=payload.unique_identifier,
            updated_at=updated_at,
        )

    def with_owner(self, owner: str, updated_at: int) -> Land:
        """Return a copy held by a new owner."""
        return replace(self, owner=owner, updated_at=updated_at)

    def to_dict(self) -> dict:
        return {
            "landId": self.land_id,
            "location": self.location,
            "owner": self.owner,
            "uniqueIdentifier": self.unique_identifier,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Land:
        return cls(
            land_id=data["landId"],
            location=data["location"],
            owner=data["owner"],
            unique_identifier=data["uniqueIdentifier"],
            created_at=data["createdAt"],
            updated_at=data.get("updatedAt"),
        )


@dataclass(frozen=True)
class Transaction:
    """Immutable audit record of one ownership transfer.

    land_id is a plain value; the land it names may since have been deleted.
    """
    transaction_id: str
    land_id: str
    from_owner: str
    to_owner: str
    created_at: int

    def to_dict(self) -> dict:
        return {
            "transactionId": self.transaction_id,
            "landId": self.land_id,
            "fromOwner": self.from_owner,
            "toOwner": self.to_owner,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Transaction:
        return cls(
            transaction_id=data["transactionId"],
            land_id=data["landId"],
            from_owner=data["fromOwner"],
            to_owner=data["toOwner"],
            created_at=data["createdAt"],
        )
