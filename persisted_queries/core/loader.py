"""
Load or save persisted queries for incoming GraphQL request data.

Clients can send a query ID instead of the full query text, saving
bandwidth and allowing GET requests that are cacheable at the edge. The
flow follows the Apollo draft spec for automatic persisted queries:

https://github.com/apollographql/apollo-link-persisted-queries#automatic-persisted-queries

- queryId + query: persist the query under the ID
- queryId only: load the query, or fail with PersistedQueryNotFound
- no queryId: leave the request alone
"""

from typing import Any, Mapping, Optional

from .errors import PERSISTED_QUERY_NOT_FOUND, PersistedQueryNotFound
from ..persist.query_store import QueryStore
from ..telemetry import get_logger


logger = get_logger(__name__)

UNNAMED_QUERY = "UnnamedQuery"

OPERATION_NAME_KEYS = ("operationName", "operation_name")


def get_operation_name(request_data: Mapping[str, Any]) -> str:
    """Be a little flexible in how the operation name is sent."""
    for key in OPERATION_NAME_KEYS:
        if request_data.get(key):
            return request_data[key]

    return UNNAMED_QUERY


def get_http_status_code(status_code: int, response: Any) -> int:
    """
    Return 202 instead of the default status if loading the persisted query
    failed. This keeps Apollo clients from giving up on the request and
    keeps most edge caches from caching the miss.

    Args:
        status_code: Default HTTP status code
        response: GraphQL response envelope

    Returns:
        HTTP status code
    """
    if not isinstance(response, Mapping):
        return status_code

    errors = response.get("errors")
    if not isinstance(errors, list) or not errors:
        return status_code

    first = errors[0]
    if isinstance(first, Mapping) and first.get("message") == PERSISTED_QUERY_NOT_FOUND:
        return 202

    return status_code


class PersistedQueryLoader:
    """Request data filter that resolves and registers persisted queries."""

    def __init__(self, store: QueryStore):
        self.store = store

    def process_request_data(self, request_data: Mapping[str, Any]) -> dict:
        """
        Load the query if the request provides only a query ID, or persist
        it if the request provides both.

        Args:
            request_data: GraphQL request parameters

        Returns:
            Request data with `query` filled in and `queryId` removed

        Raises:
            PersistedQueryNotFound: ID-only request for an unknown query
        """
        request_data = dict(request_data)

        has_query = bool(request_data.get("query"))
        has_query_id = bool(request_data.get("queryId"))

        # Query IDs are case-insensitive.
        query_id = str(request_data["queryId"]).lower() if has_query_id else None

        if has_query_id and has_query:
            self.save(query_id, request_data["query"], get_operation_name(request_data))

        if has_query_id and not has_query:
            request_data["query"] = self.load(query_id)

            if not request_data["query"]:
                logger.info("persisted_query_not_found", query_id=query_id)
                raise PersistedQueryNotFound()

        # Handled here; nothing further down should try to persist it again.
        request_data.pop("queryId", None)

        return request_data

    def load(self, query_id: str) -> Optional[str]:
        """Load query text for a normalized query ID."""
        query = self.store.get(query_id)
        if query:
            logger.debug("persisted_query_loaded", query_id=query_id)
        return query

    def save(self, query_id: str, query: str, name: str = UNNAMED_QUERY) -> bool:
        """
        Persist a query. The store logs why a save was skipped or failed;
        either way the request still runs with the text it carries.
        """
        if not self.store.put(query_id, query, name):
            logger.debug("persisted_query_not_saved", query_id=query_id)
            return False

        logger.debug("persisted_query_saved", query_id=query_id, name=name)
        return True

    def get_http_status_code(self, status_code: int, response: Any) -> int:
        return get_http_status_code(status_code, response)
