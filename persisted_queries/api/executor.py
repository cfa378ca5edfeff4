"""
GraphQL executors behind the HTTP endpoint.

Execution is delegated to graphql-core; the persisted query pipeline only
rewrites request data before it gets here.
"""

from typing import Any, Mapping, Optional, Protocol

from graphql import GraphQLSchema, graphql_sync


MISSING_QUERY_MESSAGE = "GraphQL request must include a query or a queryId"


class GraphQLExecutor(Protocol):
    """Anything that can turn request data into a GraphQL response envelope."""

    def execute(self, request_data: Mapping[str, Any]) -> dict:
        ...


class GraphQLCoreExecutor:
    """Executes request data against a graphql-core schema."""

    def __init__(
        self,
        schema: GraphQLSchema,
        root_value: Any = None,
        context_value: Any = None,
    ):
        self.schema = schema
        self.root_value = root_value
        self.context_value = context_value

    def execute(self, request_data: Mapping[str, Any]) -> dict:
        query = request_data.get("query")
        if not query:
            return {"errors": [{"message": MISSING_QUERY_MESSAGE}]}

        operation_name: Optional[str] = (
            request_data.get("operationName") or request_data.get("operation_name") or None
        )

        result = graphql_sync(
            self.schema,
            query,
            root_value=self.root_value,
            context_value=self.context_value,
            variable_values=request_data.get("variables"),
            operation_name=operation_name,
        )
        return result.formatted


class UnconfiguredExecutor:
    """Placeholder used when the app is started without a schema."""

    def execute(self, request_data: Mapping[str, Any]) -> dict:
        return {"errors": [{"message": "No GraphQL schema configured"}]}
