"""
Automatic persisted queries for GraphQL endpoints.

Clients send a query ID in place of the query text; the server resolves
it to stored text or asks the client to resend ID and text together.
"""

__version__ = "1.1.0"
