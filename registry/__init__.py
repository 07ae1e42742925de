"""
Land Registry Ledger

Record store mapping land parcels to owners, with every ownership change
kept as an immutable transaction entry.
"""

__version__ = "0.1.0"

# Registry exports
from registry.core import Registry, SystemStatus, init_db, memory_registry, open_registry

# Record exports
from registry.models import Land, LandPayload, Transaction

# Exception exports
from registry import exceptions
from registry.exceptions import InvalidPayload, LandRegistryError, NotFound, StorageFailure

__all__ = [
    # Registry
    "Registry",
    "SystemStatus",
    "init_db",
    "memory_registry",
    "open_registry",
    # Records
    "Land",
    "LandPayload",
    "Transaction",
    # Exceptions
    "exceptions",
    "InvalidPayload",
    "LandRegistryError",
    "NotFound",
    "StorageFailure",
]
