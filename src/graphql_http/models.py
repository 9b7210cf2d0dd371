"""
GraphQL HTTP Models

Data classes passed between the request normalizer, the execution
coordinator and the FastAPI plugin.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable

from graphql import GraphQLError, GraphQLSchema

from src.graphql_http.formatting import default_format_error
from src.shared.exceptions import ConfigResolutionError


ErrorFormatter = Callable[[GraphQLError], dict[str, Any]]


@dataclass(frozen=True)
class ExecutionRequest:
    """Canonical GraphQL request, independent of the transport encoding."""

    query: str
    variables: dict[str, Any] | None = None
    operation_name: str | None = None


@dataclass(frozen=True)
class EngineConfig:
    """Everything the query engine needs to run one request."""

    schema: GraphQLSchema
    root_value: Any = None
    context: Any = None
    format_error: ErrorFormatter = default_format_error

    @classmethod
    def from_value(cls, value: Any) -> "EngineConfig":
        """Coerce an EngineConfig or a mapping with the same keys.

        Raises:
            ConfigResolutionError: The value is unusable. The error carries
                the value's format_error hook when it has a callable one.
        """
        hook = cls.format_error_of(value)

        if isinstance(value, EngineConfig):
            config = value
        elif isinstance(value, Mapping):
            unknown = set(value) - {"schema", "root_value", "context", "format_error"}
            if unknown:
                raise ConfigResolutionError(
                    f"Unknown engine configuration keys: {', '.join(sorted(unknown))}",
                    format_error=hook,
                )
            config = cls(
                schema=value.get("schema"),
                root_value=value.get("root_value"),
                context=value.get("context"),
                format_error=value.get("format_error") or default_format_error,
            )
        else:
            raise ConfigResolutionError(
                "GraphQL engine configuration must be an EngineConfig or a mapping, "
                f"got {type(value).__name__}."
            )

        if not isinstance(config.schema, GraphQLSchema):
            raise ConfigResolutionError(
                "GraphQL engine configuration must provide a GraphQLSchema as schema.",
                format_error=hook,
            )
        if config.format_error is None:
            config = replace(config, format_error=default_format_error)
        if not callable(config.format_error):
            raise ConfigResolutionError("format_error must be callable.")
        return config

    @staticmethod
    def format_error_of(value: Any) -> ErrorFormatter | None:
        """Return the callable format_error hook of a config value, if any."""
        if isinstance(value, Mapping):
            hook = value.get("format_error")
        else:
            hook = getattr(value, "format_error", None)
        return hook if callable(hook) else None


class Stage(str, Enum):
    """Pipeline stage that produced an outcome."""

    OK = "ok"
    REQUEST = "request"          # missing query, malformed variables/body
    CONFIG = "config"            # config function raised or returned junk
    PARSE = "parse"
    SCHEMA = "schema"
    VALIDATION = "validation"
    METHOD = "method"            # mutation over GET
    EXECUTION = "execution"


STATUS_BY_STAGE: dict[Stage, int] = {
    Stage.OK: 200,
    Stage.REQUEST: 400,
    Stage.PARSE: 400,
    Stage.VALIDATION: 400,
    Stage.METHOD: 405,
    Stage.CONFIG: 500,
    Stage.SCHEMA: 500,
    Stage.EXECUTION: 500,
}


def status_for_stage(stage: Stage) -> int:
    """Map a pipeline stage to the HTTP status code it answers with."""
    return STATUS_BY_STAGE[stage]


@dataclass
class StageOutcome:
    """Tagged result of running the pipeline up to its first failing stage."""

    stage: Stage
    errors: list[GraphQLError] = field(default_factory=list)
    data: dict[str, Any] | None = None
    has_data: bool = False
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class GraphQLResponse:
    """Status code and JSON envelope for one HTTP request."""

    status_code: int
    body: dict[str, Any]
    stage: Stage
    headers: dict[str, str] = field(default_factory=dict)
