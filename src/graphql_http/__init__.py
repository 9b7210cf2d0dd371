"""
GraphQL HTTP adapter — request normalization, execution and status-code policy.
"""

from .coordinator import ExecutionCoordinator
from .formatting import default_format_error, format_error_with_stack
from .models import EngineConfig, ExecutionRequest, GraphQLResponse, Stage
from .normalizer import normalize_request
from .plugin import GraphQLPluginOptions, RouteOptions, register_graphql

__all__ = [
    "ExecutionCoordinator",
    "default_format_error",
    "format_error_with_stack",
    "EngineConfig",
    "ExecutionRequest",
    "GraphQLResponse",
    "Stage",
    "normalize_request",
    "GraphQLPluginOptions",
    "RouteOptions",
    "register_graphql",
]
