"""
SQLite-backed record store for persisted queries.

Records live in a single `records` table, typed by `record_type`:
- slug: unique lookup key within a record type (case-insensitive)
- title: human-readable label
- content: free-form text body
- status: publication status

Record types are registered per process; table contents are durable.
"""

import sqlite3
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class QueryRecord:
    """A stored record row."""

    id: int
    record_type: str
    slug: str
    title: str
    content: str
    status: str
    created_ts: int


_COLUMNS = "id, record_type, slug, title, content, status, created_ts"


class RecordStore:
    """
    File-backed SQLite record store.

    Thread-safe with WAL mode and a connection-level lock. Uniqueness of
    (record_type, slug) is enforced by the schema, so concurrent inserts of
    the same slug keep the first row and ignore the rest.
    """

    def __init__(self, db_path: Path):
        """
        Initialize record store at given path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._types: Dict[str, Dict[str, Any]] = {}

        self._conn = sqlite3.connect(
            str(self.db_path),
            check_same_thread=False,
            timeout=10.0,
        )

        # Enable WAL mode for better concurrency
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=NORMAL")

        self._init_tables()

    def _init_tables(self) -> None:
        """Create the records table if it doesn't exist."""
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS records (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                record_type TEXT NOT NULL,
                slug TEXT NOT NULL COLLATE NOCASE,
                title TEXT NOT NULL DEFAULT '',
                content TEXT NOT NULL DEFAULT '',
                status TEXT NOT NULL DEFAULT 'publish',
                created_ts INTEGER NOT NULL,
                UNIQUE (record_type, slug)
            )
        """)
        self._conn.commit()

    # ----- record types -----

    def register_type(self, name: str, args: Optional[Dict[str, Any]] = None) -> None:
        """
        Register a record type for this process.

        Args:
            name: Record type name
            args: Registration args (labels, visibility flags, ...)

        Raises:
            ValueError: If the name is empty or already registered
        """
        if not name:
            raise ValueError("Record type name must not be empty")

        with self._lock:
            if name in self._types:
                raise ValueError(f"Record type already registered: {name}")
            self._types[name] = dict(args or {})

    def type_exists(self, name: str) -> bool:
        """Whether a record type has been registered in this process."""
        return name in self._types

    def type_args(self, name: str) -> Optional[Dict[str, Any]]:
        """Registration args for a record type, or None if unregistered."""
        args = self._types.get(name)
        return dict(args) if args is not None else None

    def registered_types(self) -> List[str]:
        """Names of all registered record types."""
        return sorted(self._types)

    # ----- records -----

    def find_by_slug(self, record_type: str, slug: str) -> Optional[QueryRecord]:
        """
        Look up a record by slug within a record type.

        Args:
            record_type: Record type name
            slug: Lookup key, matched case-insensitively

        Returns:
            QueryRecord if found, None otherwise
        """
        with self._lock:
            cursor = self._conn.execute(
                f"SELECT {_COLUMNS} FROM records WHERE record_type = ? AND slug = ?",
                (record_type, slug),
            )
            row = cursor.fetchone()

        if row:
            return QueryRecord(*row)

        return None

    def insert(
        self,
        record_type: str,
        slug: str,
        title: str = "",
        content: str = "",
        status: str = "publish",
    ) -> QueryRecord:
        """
        Insert a record unless one already exists for (record_type, slug).

        Args:
            record_type: Record type name
            slug: Unique lookup key
            title: Record title
            content: Record body
            status: Publication status

        Returns:
            The stored record (the pre-existing one if the slug was taken)
        """
        ts = int(time.time())

        with self._lock:
            self._conn.execute(
                "INSERT OR IGNORE INTO records "
                "(record_type, slug, title, content, status, created_ts) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (record_type, slug, title, content, status, ts),
            )
            self._conn.commit()

        return self.find_by_slug(record_type, slug)

    def count(self, record_type: str) -> int:
        """Number of records of a type."""
        with self._lock:
            cursor = self._conn.execute(
                "SELECT COUNT(*) FROM records WHERE record_type = ?",
                (record_type,),
            )
            return cursor.fetchone()[0]

    def stats(self, record_type: str) -> dict:
        """
        Get statistics for a record type.

        Args:
            record_type: Record type name

        Returns:
            Dict with count, total_bytes, oldest_ts, newest_ts
        """
        with self._lock:
            cursor = self._conn.execute("""
                SELECT
                    COUNT(*) as count,
                    SUM(LENGTH(content)) as total_bytes,
                    MIN(created_ts) as oldest_ts,
                    MAX(created_ts) as newest_ts
                FROM records
                WHERE record_type = ?
            """, (record_type,))
            row = cursor.fetchone()

        return {
            "count": row[0] or 0,
            "total_bytes": row[1] or 0,
            "oldest_ts": row[2] or 0,
            "newest_ts": row[3] or 0,
        }

    def purge_type(self, record_type: str) -> int:
        """
        Delete all records of a type.

        Args:
            record_type: Record type name

        Returns:
            Number of rows deleted
        """
        with self._lock:
            cursor = self._conn.execute(
                "DELETE FROM records WHERE record_type = ?",
                (record_type,),
            )
            self._conn.commit()
            return cursor.rowcount

    def close(self) -> None:
        """Close database connection."""
        self._conn.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
