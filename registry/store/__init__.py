"""Ledger storage layer.

Record stores and the database that owns them. Record keys are the record
ids; each row is a flat JSON record.
"""

from .database import LedgerDatabase, MemoryDatabase, get_database
from .record_store import MemoryRecordStore, RecordStore, SqliteRecordStore

__all__ = [
    "LedgerDatabase",
    "MemoryDatabase",
    "MemoryRecordStore",
    "RecordStore",
    "SqliteRecordStore",
    "get_database",
]
