"""
Client-facing errors raised while preparing GraphQL request data.
"""

# Apollo clients look for this exact message before retrying with the full query.
PERSISTED_QUERY_NOT_FOUND = "PersistedQueryNotFound"


class UserError(Exception):
    """Error whose message is safe to return to the client as a GraphQL error."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_graphql_error(self) -> dict:
        return {"message": self.message}


class PersistedQueryNotFound(UserError):
    """No query text is stored for the requested query ID."""

    def __init__(self):
        super().__init__(PERSISTED_QUERY_NOT_FOUND)
