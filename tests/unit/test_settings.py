"""Unit test for settings configuration."""

from persisted_queries.config.settings import Settings


def test_default_settings():
    """Test that default settings are correctly configured."""
    settings = Settings()
    assert settings.store.record_type == "graphql_query"
    assert settings.store.db_path == "data/persisted_queries.db"
    assert settings.server.graphql_path == "/graphql"


def test_default_record_type_args():
    """Record type stays hidden from UIs unless overridden."""
    args = Settings().store.record_type_args
    assert args["public"] is False
    assert args["show_ui"] is False
    assert args["graphql_single_name"] == "persistedQuery"
    assert args["graphql_plural_name"] == "persistedQueries"
    assert args["supports"] == ["title", "editor"]


def test_record_type_args_not_shared():
    first = Settings()
    first.store.record_type_args["show_ui"] = True
    assert Settings().store.record_type_args["show_ui"] is False


def test_from_env(monkeypatch):
    monkeypatch.setenv("PERSISTED_QUERIES_DB_PATH", "/tmp/pq.db")
    monkeypatch.setenv("PERSISTED_QUERIES_RECORD_TYPE", "apq")
    monkeypatch.setenv("PERSISTED_QUERIES_PORT", "9000")

    settings = Settings.from_env()

    assert settings.store.db_path == "/tmp/pq.db"
    assert settings.store.record_type == "apq"
    assert settings.server.port == 9000
