"""
FastAPI plugin — binds the GraphQL adapter to GET and POST routes.

Usage:
    app = FastAPI()
    register_graphql(
        app,
        route={"path": "/graphql", "config": {"tags": ["GraphQL"]}},
        query=lambda request: EngineConfig(schema=schema, context={"request": request}),
    )
"""

import json
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from src.graphql_http.coordinator import ExecutionCoordinator
from src.graphql_http.normalizer import normalize_request
from src.shared.exceptions import MalformedBodyError
from src.shared.logging import generate_correlation_id, request_logger, setup_logging

logger = setup_logging("graphql_http.plugin", level="INFO")

JSON_CONTENT_TYPES = {"", "application/json"}
GRAPHQL_CONTENT_TYPE = "application/graphql"
FORM_CONTENT_TYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}


# ─── Options ────────────────────────────────────────────────


class RouteOptions(BaseModel):
    """Where the GraphQL endpoint is mounted."""

    path: str = Field(..., description="URL path bound for both GET and POST")
    config: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra keyword arguments forwarded to add_api_route",
    )


class GraphQLPluginOptions(BaseModel):
    """Options accepted by register_graphql."""

    route: RouteOptions
    query: Any = Field(
        None,
        description="EngineConfig, mapping, or callable (request) -> EngineConfig",
    )
    read_only_get: bool = Field(
        True, description="Reject mutations and subscriptions sent over GET"
    )


# ─── Transport decoding ─────────────────────────────────────


async def read_body(request: Request) -> Any:
    """Decode a POST body into a structured value.

    JSON bodies are decoded as-is, form bodies become a mapping of their
    fields, application/graphql bodies become ``{"query": <text>}``, and
    anything else is treated as empty.
    """
    raw = await request.body()
    if not raw:
        return {}

    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type == GRAPHQL_CONTENT_TYPE:
        return {"query": raw.decode("utf-8", errors="replace")}

    if content_type in JSON_CONTENT_TYPES or content_type.endswith("+json"):
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedBodyError("POST body sent invalid JSON.") from e

    if content_type in FORM_CONTENT_TYPES:
        try:
            form = await request.form()
        except (MultiPartException, HTTPException) as e:
            raise MalformedBodyError("POST body sent invalid form data.") from e
        return dict(form)

    logger.debug(f"Ignoring POST body with unsupported content type '{content_type}'")
    return {}


# ─── Registration ───────────────────────────────────────────


def register_graphql(
    app: FastAPI | APIRouter,
    options: GraphQLPluginOptions | dict[str, Any] | None = None,
    **kwargs: Any,
) -> ExecutionCoordinator:
    """
    Register GET and POST GraphQL routes on a FastAPI app or router.

    Args:
        app: FastAPI application or APIRouter to register the routes on.
        options: Plugin options as a model or mapping.
        **kwargs: Plugin options given as keyword arguments instead.

    Returns:
        The ExecutionCoordinator serving the routes.
    """
    if options is None:
        options = GraphQLPluginOptions.model_validate(kwargs)
    elif not isinstance(options, GraphQLPluginOptions):
        options = GraphQLPluginOptions.model_validate({**options, **kwargs})

    coordinator = ExecutionCoordinator(options.query)
    read_only_get = options.read_only_get

    async def graphql_endpoint(request: Request) -> JSONResponse:
        correlation_id = generate_correlation_id()
        method = request.method.upper()
        log = request_logger(logger, correlation_id)
        log.info(f"{method} {request.url.path}")

        async def extract():
            body = await read_body(request) if method != "GET" else None
            return normalize_request(method, request.query_params, body)

        response = await coordinator.handle(
            request,
            extract,
            read_only=read_only_get and method == "GET",
            correlation_id=correlation_id,
        )

        return JSONResponse(
            content=response.body,
            status_code=response.status_code,
            headers=response.headers or None,
        )

    route_config = dict(options.route.config)
    route_config.pop("methods", None)
    name = route_config.pop("name", "graphql")

    for method in ("GET", "POST"):
        app.add_api_route(
            options.route.path,
            graphql_endpoint,
            methods=[method],
            name=f"{name}_{method.lower()}",
            **route_config,
        )

    logger.info(f"GraphQL endpoint registered at {options.route.path} (GET, POST)")
    return coordinator
