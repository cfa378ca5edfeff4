"""
Query stores - load and save persisted query text by query ID.

The loader only depends on the QueryStore protocol, so the backing store
can be the default record table, an in-memory dict, or any external
key-value service an integrator wires in.
"""

import sqlite3
import threading
from typing import Callable, Dict, Optional, Protocol

from .sqlite_store import RecordStore
from ..telemetry import get_logger


logger = get_logger(__name__)

# (query, query_id) -> query. Returning a falsy value falls back to the store.
LoadOverride = Callable[[Optional[str], str], Optional[str]]

# (record_fields, query_id) -> record_fields. Returning a falsy value skips the save.
SaveOverride = Callable[[dict, str], Optional[dict]]


class QueryStore(Protocol):
    """Storage capability used by the persisted query loader."""

    def get(self, query_id: str) -> Optional[str]:
        """Return stored query text for a normalized ID, or None."""
        ...

    def put(self, query_id: str, query: str, name: str) -> bool:
        """Store query text once; later writes for the same ID are no-ops."""
        ...


class RecordQueryStore:
    """
    QueryStore backed by a RecordStore record type.

    The query ID is the record slug, the query text its content and the
    operation name its title.
    """

    def __init__(
        self,
        records: RecordStore,
        record_type: str,
        load_override: Optional[LoadOverride] = None,
        save_override: Optional[SaveOverride] = None,
    ):
        """
        Args:
            records: Record store holding persisted queries
            record_type: Record type the queries are stored under
            load_override: Optional loader consulted before the record store
            save_override: Optional filter applied to record fields before insert
        """
        self.records = records
        self.record_type = record_type
        self.load_override = load_override
        self.save_override = save_override

    def get(self, query_id: str) -> Optional[str]:
        if self.load_override is not None:
            query = self.load_override(None, query_id)
            if query:
                return query

        record = self.records.find_by_slug(self.record_type, query_id)
        if record is None:
            return None

        return record.content or None

    def put(self, query_id: str, query: str, name: str) -> bool:
        # Already persisted; first writer wins.
        if self.get(query_id):
            return True

        fields = {
            "content": query,
            "slug": query_id,
            "title": name,
            "status": "publish",
            "record_type": self.record_type,
        }

        if self.save_override is not None:
            fields = self.save_override(fields, query_id)

        if not fields:
            logger.info("persisted_query_save_skipped", query_id=query_id)
            return False

        # A failed write only means the next ID-only request misses.
        try:
            record = self.records.insert(
                record_type=fields.get("record_type", self.record_type),
                slug=fields.get("slug", query_id),
                title=fields.get("title", name),
                content=fields.get("content", query),
                status=fields.get("status", "publish"),
            )
        except sqlite3.Error:
            logger.exception("persisted_query_save_failed", query_id=query_id)
            return False

        return record is not None


class MemoryQueryStore:
    """In-process QueryStore keyed by lowercase query ID."""

    def __init__(self):
        self._queries: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()

    def get(self, query_id: str) -> Optional[str]:
        entry = self._queries.get(query_id.lower())
        if entry is None:
            return None
        return entry["query"]

    def put(self, query_id: str, query: str, name: str) -> bool:
        with self._lock:
            self._queries.setdefault(query_id.lower(), {"query": query, "name": name})
        return True

    def name(self, query_id: str) -> Optional[str]:
        """Operation name stored with a query ID."""
        entry = self._queries.get(query_id.lower())
        return entry["name"] if entry else None

    def __len__(self) -> int:
        return len(self._queries)
