"""
FastAPI Gateway — HTTP API layer.

Serves the GraphQL endpoint (GET and POST) on top of the demo schema,
plus health endpoints. Each request gets its own engine configuration
with the raw request bound into the resolver context.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.gateway.config import GatewaySettings
from src.gateway.routes import health
from src.gateway.schema import root, schema
from src.graphql_http import (
    EngineConfig,
    default_format_error,
    format_error_with_stack,
    register_graphql,
)
from src.shared.logging import setup_logging
from src.shared.observability import (
    LangfuseMiddleware,
    init_langfuse,
    is_langfuse_enabled,
    shutdown_langfuse,
)

load_dotenv()

logger = setup_logging("gateway.app", level="INFO")

# Global settings
settings = GatewaySettings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise observability on startup and flush it on shutdown."""
    logger.info("Starting GraphQL Gateway")

    init_langfuse()
    if is_langfuse_enabled():
        logger.info("Langfuse observability enabled")
    else:
        logger.info("Langfuse observability disabled")

    logger.info("Gateway initialized successfully")

    yield

    logger.info("Shutting down GraphQL Gateway")
    shutdown_langfuse()


def engine_config(request: Request) -> EngineConfig:
    """Per-request engine configuration for the demo schema."""
    return EngineConfig(
        schema=schema,
        root_value=root,
        context={"request": request},
        format_error=format_error_with_stack if settings.debug_errors else default_format_error,
    )


# Create FastAPI app
app = FastAPI(
    title="GraphQL Gateway",
    description="GraphQL over HTTP with status codes that reflect the failure class",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add Langfuse observability middleware
app.add_middleware(LangfuseMiddleware)

# Register routes
register_graphql(
    app,
    route={"path": settings.graphql_path, "config": {"tags": ["GraphQL"]}},
    query=engine_config,
)
app.include_router(health.router, prefix="/api", tags=["Health"])


# Root endpoint
@app.get("/", tags=["Root"])
async def root_info():
    """Root endpoint with basic info."""
    return {
        "name": "GraphQL Gateway",
        "version": "0.1.0",
        "status": "operational",
        "endpoints": {
            "graphql": settings.graphql_path,
            "health": "/api/health",
            "schema_health": "/api/schema/health",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.gateway.app:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
    )
