"""
Persistence layer for persisted queries.

Provides:
- SQLite-backed record store with unique, case-insensitive slugs
- QueryStore protocol and its record-backed and in-memory implementations
"""

from .sqlite_store import QueryRecord, RecordStore
from .query_store import (
    LoadOverride,
    MemoryQueryStore,
    QueryStore,
    RecordQueryStore,
    SaveOverride,
)

__all__ = [
    "QueryRecord",
    "RecordStore",
    "QueryStore",
    "RecordQueryStore",
    "MemoryQueryStore",
    "LoadOverride",
    "SaveOverride",
]
