"""
Automatic persisted query protocol.

Provides the request data loader, the HTTP status mapping for missed
queries, and the pipeline the loader installs itself into.
"""

from .errors import PERSISTED_QUERY_NOT_FOUND, PersistedQueryNotFound, UserError
from .loader import (
    UNNAMED_QUERY,
    PersistedQueryLoader,
    get_http_status_code,
    get_operation_name,
)
from .pipeline import (
    GraphQLPipeline,
    PersistedQueryOverrides,
    install_persisted_queries,
)

__all__ = [
    "PERSISTED_QUERY_NOT_FOUND",
    "UNNAMED_QUERY",
    "UserError",
    "PersistedQueryNotFound",
    "PersistedQueryLoader",
    "get_http_status_code",
    "get_operation_name",
    "GraphQLPipeline",
    "PersistedQueryOverrides",
    "install_persisted_queries",
]
