"""
Pydantic schemas for FastAPI endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any


class GraphQLRequest(BaseModel):
    """Request model for POST /graphql."""

    query: Optional[str] = Field(default=None, description="GraphQL document")
    queryId: Optional[str] = Field(default=None, description="Persisted query ID (usually a hash of the query)")
    operationName: Optional[str] = Field(default=None, description="Operation name")
    operation_name: Optional[str] = Field(default=None, description="Operation name (snake_case alias)")
    variables: Optional[Dict[str, Any]] = Field(default=None, description="Variable values")
    extensions: Optional[Dict[str, Any]] = Field(default=None, description="Protocol extensions")

    class Config:
        extra = "allow"
        json_schema_extra = {
            "example": {
                "queryId": "5b6a1e8b3c0d...",
                "query": "query Posts { posts { id title } }",
                "operationName": "Posts",
            }
        }

    def to_request_data(self) -> Dict[str, Any]:
        """Request parameters as a plain dict, omitting unset fields."""
        return self.model_dump(exclude_none=True)


class HealthResponse(BaseModel):
    """Response model for /health endpoint."""

    status: str = Field(..., description="Service status")
    persisted_queries: bool = Field(..., description="Whether query persistence is installed")
    record_type: Optional[str] = Field(default=None, description="Record type queries are stored under")
    stored_queries: Optional[int] = Field(default=None, description="Number of persisted queries")
