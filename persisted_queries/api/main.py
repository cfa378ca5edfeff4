"""Main FastAPI application and server startup."""

import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .executor import GraphQLExecutor, UnconfiguredExecutor
from .schemas import GraphQLRequest, HealthResponse
from ..config.settings import Settings
from ..core import (
    GraphQLPipeline,
    PersistedQueryOverrides,
    UserError,
    install_persisted_queries,
)
from ..persist import RecordStore
from ..telemetry import configure_logging, get_logger


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    executor: Optional[GraphQLExecutor] = None,
    records: Optional[RecordStore] = None,
    overrides: Optional[PersistedQueryOverrides] = None,
) -> FastAPI:
    """
    Build the GraphQL HTTP app.

    Persisted query support is installed once on startup. A RecordStore is
    opened at `settings.store.db_path` unless one is passed in or the
    overrides supply their own query store.

    Args:
        settings: Application settings (defaults to environment)
        executor: GraphQL executor (defaults to UnconfiguredExecutor)
        records: Pre-opened record store, left open on shutdown
        overrides: Persisted query integrator hooks
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.server.log_level)

        owned: Optional[RecordStore] = None
        store_records = records
        if store_records is None and (overrides is None or overrides.store is None):
            owned = store_records = RecordStore(Path(settings.store.db_path))

        pipeline = GraphQLPipeline()
        loader = install_persisted_queries(pipeline, store_records, settings.store, overrides)

        app.state.settings = settings
        app.state.records = store_records
        app.state.pipeline = pipeline
        app.state.loader = loader
        app.state.executor = executor or UnconfiguredExecutor()

        logger.info("graphql_app_started", path=settings.server.graphql_path)

        try:
            yield
        finally:
            logger.info("graphql_app_stopped")
            if owned is not None:
                owned.close()

    app = FastAPI(
        title="GraphQL Persisted Queries",
        description="GraphQL endpoint with automatic persisted query support",
        version="1.1.0",
        lifespan=lifespan,
    )

    app.add_api_route(settings.server.graphql_path, graphql_post, methods=["POST"])
    app.add_api_route(settings.server.graphql_path, graphql_get, methods=["GET"])
    app.add_api_route("/health", health, methods=["GET"], response_model=HealthResponse)

    return app


def run_graphql_request(app: FastAPI, request_data: Dict[str, Any]) -> JSONResponse:
    """
    Filter request data, execute it and map the HTTP status.

    A UserError raised while filtering becomes a GraphQL error response
    with a default status of 500, which status filters may adjust.
    """
    pipeline: GraphQLPipeline = app.state.pipeline
    executor: GraphQLExecutor = app.state.executor

    try:
        data = pipeline.filter_request_data(request_data)
    except UserError as e:
        response = {"errors": [e.to_graphql_error()]}
        status_code = 500
    else:
        response = executor.execute(data)
        status_code = 200

    status_code = pipeline.filter_status_code(status_code, response)

    return JSONResponse(content=response, status_code=status_code)


def _decode_json_param(name: str, value: Optional[str]) -> Optional[Dict[str, Any]]:
    if not value:
        return None

    try:
        decoded = json.loads(value)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail=f"Invalid JSON in '{name}' parameter")

    if decoded is not None and not isinstance(decoded, dict):
        raise HTTPException(status_code=400, detail=f"'{name}' must be a JSON object")

    return decoded


def graphql_post(body: GraphQLRequest, request: Request) -> JSONResponse:
    """
    Execute a GraphQL request sent as a JSON body.

    Sending both `queryId` and `query` persists the query; sending only
    `queryId` runs the persisted query.
    """
    return run_graphql_request(request.app, body.to_request_data())


def graphql_get(
    request: Request,
    query: Optional[str] = None,
    queryId: Optional[str] = None,
    operationName: Optional[str] = None,
    operation_name: Optional[str] = None,
    variables: Optional[str] = None,
    extensions: Optional[str] = None,
) -> JSONResponse:
    """
    Execute a GraphQL request sent as query string parameters.

    `variables` and `extensions` are JSON-encoded objects. ID-only GET
    requests are deterministic, so responses can be cached at the edge.
    """
    request_data: Dict[str, Any] = {
        "query": query,
        "queryId": queryId,
        "operationName": operationName,
        "operation_name": operation_name,
        "variables": _decode_json_param("variables", variables),
        "extensions": _decode_json_param("extensions", extensions),
    }
    request_data = {k: v for k, v in request_data.items() if v is not None}

    return run_graphql_request(request.app, request_data)


def health(request: Request) -> HealthResponse:
    """Health check endpoint."""
    state = request.app.state
    loader = state.loader
    record_type = getattr(loader.store, "record_type", None) if loader is not None else None

    stored = None
    if record_type and state.records is not None and state.records.type_exists(record_type):
        stored = state.records.count(record_type)

    return HealthResponse(
        status="ok",
        persisted_queries=loader is not None,
        record_type=record_type,
        stored_queries=stored,
    )


app = create_app()


def run():
    """Run the development server."""
    settings = Settings.from_env()
    uvicorn.run(
        "persisted_queries.api.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=True,
    )


if __name__ == "__main__":
    run()
