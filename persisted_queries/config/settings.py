"""Application settings and configuration schema."""

import os
from typing import Any, Dict

from pydantic import BaseModel, Field


def default_record_type_args() -> Dict[str, Any]:
    """Registration args for the persisted query record type."""
    return {
        "label": "Queries",
        "public": False,
        "query_var": False,
        "rewrite": False,
        "show_in_rest": False,
        "show_in_graphql": False,
        "graphql_single_name": "persistedQuery",
        "graphql_plural_name": "persistedQueries",
        "show_ui": False,
        "supports": ["title", "editor"],
    }


class StoreCfg(BaseModel):
    """Configuration for the default record-backed query store."""
    db_path: str = "data/persisted_queries.db"
    record_type: str = "graphql_query"
    record_type_args: Dict[str, Any] = Field(default_factory=default_record_type_args)


class ServerCfg(BaseModel):
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 8000
    graphql_path: str = "/graphql"
    log_level: str = "INFO"


class Settings(BaseModel):
    """Main application settings."""
    store: StoreCfg = StoreCfg()
    server: ServerCfg = ServerCfg()

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings, letting PERSISTED_QUERIES_* variables override defaults."""
        store = StoreCfg()
        server = ServerCfg()

        if "PERSISTED_QUERIES_DB_PATH" in os.environ:
            store.db_path = os.environ["PERSISTED_QUERIES_DB_PATH"]
        if "PERSISTED_QUERIES_RECORD_TYPE" in os.environ:
            store.record_type = os.environ["PERSISTED_QUERIES_RECORD_TYPE"]
        if "PERSISTED_QUERIES_HOST" in os.environ:
            server.host = os.environ["PERSISTED_QUERIES_HOST"]
        if "PERSISTED_QUERIES_PORT" in os.environ:
            server.port = int(os.environ["PERSISTED_QUERIES_PORT"])
        if "PERSISTED_QUERIES_LOG_LEVEL" in os.environ:
            server.log_level = os.environ["PERSISTED_QUERIES_LOG_LEVEL"]

        return cls(store=store, server=server)
