"""
Unit tests for persisted_queries/persist/sqlite_store.py

Tests SQLite record operations, unique case-insensitive slugs and
process-local record type registration.
"""
import threading

import pytest

from persisted_queries.persist.sqlite_store import QueryRecord, RecordStore


def test_insert_find_roundtrip(records):
    """Inserted records can be found by slug."""
    record = records.insert(
        record_type="graphql_query",
        slug="abc123",
        title="GetPosts",
        content="query GetPosts { posts { id } }",
    )

    assert isinstance(record, QueryRecord)
    assert record.slug == "abc123"
    assert record.status == "publish"

    found = records.find_by_slug("graphql_query", "abc123")
    assert found == record
    assert found.content == "query GetPosts { posts { id } }"
    assert found.title == "GetPosts"


def test_find_missing_returns_none(records):
    """Looking up an unknown slug is not an error."""
    assert records.find_by_slug("graphql_query", "never-stored") is None


def test_slug_lookup_is_case_insensitive(records):
    """Slugs differing only in case denote the same record."""
    records.insert("graphql_query", "abc123", "Q", "query { a }")

    found = records.find_by_slug("graphql_query", "AbC123")
    assert found is not None
    assert found.content == "query { a }"


def test_insert_existing_slug_keeps_first_record(records):
    """A second insert for the same slug does not overwrite the first."""
    first = records.insert("graphql_query", "abc123", "First", "query { first }")
    second = records.insert("graphql_query", "ABC123", "Second", "query { second }")

    assert second.id == first.id
    assert second.content == "query { first }"
    assert records.count("graphql_query") == 1


def test_slugs_are_scoped_by_record_type(records):
    """The same slug can exist under different record types."""
    records.insert("graphql_query", "same", "A", "query { a }")
    records.insert("other_type", "same", "B", "query { b }")

    assert records.find_by_slug("graphql_query", "same").content == "query { a }"
    assert records.find_by_slug("other_type", "same").content == "query { b }"


def test_persistence_after_reopen(tmp_path):
    """Records should persist after closing and reopening the store."""
    db_path = tmp_path / "persist_test.db"

    store1 = RecordStore(db_path)
    store1.insert("graphql_query", "key1", "Q1", "query { one }")
    store1.close()

    store2 = RecordStore(db_path)
    assert store2.find_by_slug("graphql_query", "key1").content == "query { one }"
    store2.close()


def test_register_type(records):
    """Registered types are visible with their args."""
    assert not records.type_exists("graphql_query")

    records.register_type("graphql_query", {"label": "Queries"})

    assert records.type_exists("graphql_query")
    assert records.type_args("graphql_query") == {"label": "Queries"}
    assert records.registered_types() == ["graphql_query"]


def test_register_type_twice_raises(records):
    """Record type names collide."""
    records.register_type("graphql_query")

    with pytest.raises(ValueError, match="already registered"):
        records.register_type("graphql_query")


def test_register_empty_type_raises(records):
    with pytest.raises(ValueError):
        records.register_type("")


def test_type_registration_is_process_local(tmp_path):
    """Reopening the database starts with no registered types."""
    db_path = tmp_path / "types.db"

    with RecordStore(db_path) as store1:
        store1.register_type("graphql_query")

    with RecordStore(db_path) as store2:
        assert not store2.type_exists("graphql_query")


def test_stats_and_purge(records):
    records.insert("graphql_query", "a", "A", "query { a }")
    records.insert("graphql_query", "b", "B", "query { bb }")

    stats = records.stats("graphql_query")
    assert stats["count"] == 2
    assert stats["total_bytes"] == len("query { a }") + len("query { bb }")
    assert stats["oldest_ts"] > 0

    assert records.purge_type("graphql_query") == 2
    assert records.count("graphql_query") == 0
    assert records.stats("graphql_query")["count"] == 0


def test_parallel_inserts_same_slug_store_one_record(records):
    """Racing inserts for one slug leave exactly one record."""
    num_threads = 10
    errors = []

    def insert_task(thread_id):
        try:
            records.insert("graphql_query", "racy", f"T{thread_id}", f"query {{ t{thread_id} }}")
        except Exception as e:
            errors.append(e)

    threads = [
        threading.Thread(target=insert_task, args=(i,))
        for i in range(num_threads)
    ]

    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(errors) == 0
    assert records.count("graphql_query") == 1
