"""
Shared fixtures for persisted query unit tests.
"""
import pytest
from graphql import build_schema

from persisted_queries.core import PersistedQueryLoader
from persisted_queries.persist import MemoryQueryStore, RecordQueryStore, RecordStore


@pytest.fixture
def records(tmp_path):
    """Create a temporary RecordStore instance."""
    db_path = tmp_path / "queries.db"
    store = RecordStore(db_path)
    yield store
    store.close()


@pytest.fixture
def record_query_store(records):
    """RecordQueryStore over a registered graphql_query record type."""
    records.register_type("graphql_query", {"label": "Queries"})
    return RecordQueryStore(records, "graphql_query")


@pytest.fixture
def memory_store():
    """In-memory QueryStore."""
    return MemoryQueryStore()


@pytest.fixture
def loader(record_query_store):
    """Loader backed by the record query store."""
    return PersistedQueryLoader(record_query_store)


@pytest.fixture
def schema():
    """Small graphql-core schema for endpoint tests."""
    return build_schema("""
        type Query {
            hello(name: String): String
            posts: [Post]
        }

        type Post {
            id: ID
            title: String
        }
    """)


@pytest.fixture
def root_value():
    """Resolvers for the test schema."""
    return {
        "hello": lambda info, name=None: f"Hello, {name or 'world'}!",
        "posts": lambda info: [
            {"id": "1", "title": "First"},
            {"id": "2", "title": "Second"},
        ],
    }
