"""
Health routes — GET /api/health and GET /api/schema/health.
"""

from fastapi import APIRouter
from graphql import validate_schema
from pydantic import BaseModel, Field

from src.gateway.schema import schema
from src.shared.logging import setup_logging

logger = setup_logging("gateway.routes.health", level="INFO")

router = APIRouter()


# ─── Response Models ─────────────────────────────────────────


class SchemaHealth(BaseModel):
    """Response model for GET /api/schema/health."""

    status: str = Field(..., description="healthy or unhealthy")
    type_count: int = Field(..., description="Number of named types in the schema")
    query_fields: list[str] = Field(
        default_factory=list, description="Top-level query field names"
    )
    errors: list[str] = Field(
        default_factory=list, description="Schema validation error messages"
    )


# ─── GET /api/schema/health ─────────────────────────────────


@router.get("/schema/health", response_model=SchemaHealth)
async def get_schema_health() -> SchemaHealth:
    """Validate the served schema.

    A schema that fails validation makes every GraphQL request answer
    with status 500, so this surfaces the problem without sending a query.
    """
    errors = [err.message for err in validate_schema(schema)]
    if errors:
        logger.warning(f"Schema health check failed: {errors}")

    query_type = schema.query_type
    query_fields = sorted(query_type.fields) if query_type and not errors else []

    return SchemaHealth(
        status="unhealthy" if errors else "healthy",
        type_count=len(schema.type_map),
        query_fields=query_fields,
        errors=errors,
    )


# ─── GET /api/health (simple health check) ──────────────────


@router.get("/health")
async def simple_health() -> dict:
    """Simple health check endpoint.

    Returns a basic health status without touching the schema.
    Useful for load balancers and uptime monitors.
    """
    return {
        "status": "healthy",
        "service": "GraphQL Gateway",
        "version": "0.1.0",
    }
