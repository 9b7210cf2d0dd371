"""
Execution Coordinator — runs one GraphQL request and classifies the outcome.

Pipeline (short-circuits at the first failing stage):
  1. resolve the EngineConfig (static, or computed from the raw request)
  2. extract the ExecutionRequest from the transport input
  3. parse the query text
  4. check the schema itself
  5. validate the document against the schema
  6. reject non-query operations on read-only requests
  7. execute, awaiting asynchronous resolvers

Each step records the Stage it failed in, and the HTTP status code is
derived from that Stage alone. A syntax error and a broken schema can
both surface as GraphQLErrors; what separates a 400 from a 500 is which
stage produced them.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable

from graphql import (
    GraphQLError,
    GraphQLSyntaxError,
    OperationType,
    execute,
    get_operation_ast,
    parse,
    validate,
    validate_schema,
)

from src.graphql_http.formatting import default_format_error, to_graphql_error
from src.graphql_http.models import (
    EngineConfig,
    ExecutionRequest,
    GraphQLResponse,
    Stage,
    StageOutcome,
    status_for_stage,
)
from src.shared.exceptions import (
    ConfigResolutionError,
    GraphQLHTTPError,
    MethodNotAllowedError,
)
from src.shared.logging import request_logger, setup_logging
from src.shared.observability import trace_function

logger = setup_logging("graphql_http.coordinator", level="INFO")


class ExecutionCoordinator:
    """Turns an ExecutionRequest into a status code and response envelope.

    Args:
        query_option: A static EngineConfig (or mapping), or a callable that
            receives the raw transport request and returns one. The callable
            may be async. None means no engine is configured.
    """

    def __init__(self, query_option: Any = None):
        self.query_option = query_option

    # ─── Public API ──────────────────────────────────────────

    @trace_function(name="execute_graphql")
    async def handle(
        self,
        raw_request: Any,
        extract: Callable[[], ExecutionRequest | Awaitable[ExecutionRequest]],
        *,
        read_only: bool = False,
        correlation_id: str | None = None,
    ) -> GraphQLResponse:
        """Resolve the config, extract the request and run the pipeline.

        Args:
            raw_request: Transport request handed to a callable query option.
            extract: Produces the ExecutionRequest (sync or async). Adapter
                errors it raises are answered with the config's formatter.
            read_only: Reject non-query operations (GET requests).
            correlation_id: Request ID used as the log prefix.
        """
        log = request_logger(logger, correlation_id)
        try:
            config = await self.resolve_config(raw_request)
        except Exception as e:
            log.exception(f"Engine configuration failed: {e}")
            outcome = StageOutcome(Stage.CONFIG, errors=[to_graphql_error(e)])
            format_error = getattr(e, "format_error", None) or default_format_error
            return self.render(outcome, format_error, log)

        try:
            request = extract()
            if inspect.isawaitable(request):
                request = await request
        except GraphQLHTTPError as e:
            log.info(f"Rejected request: {e.message}")
            outcome = StageOutcome(Stage.REQUEST, errors=[to_graphql_error(e)])
            return self.render(outcome, config.format_error, log)

        outcome = await self.execute_pipeline(config, request, read_only=read_only, log=log)
        return self.render(outcome, config.format_error, log)

    async def run(
        self,
        request: ExecutionRequest,
        raw_request: Any = None,
        *,
        read_only: bool = False,
        correlation_id: str | None = None,
    ) -> GraphQLResponse:
        """Run the full pipeline for an already normalized request. Never raises."""
        return await self.handle(
            raw_request,
            lambda: request,
            read_only=read_only,
            correlation_id=correlation_id,
        )

    async def resolve_config(self, raw_request: Any = None) -> EngineConfig:
        """Produce the EngineConfig for one request."""
        option = self.query_option
        if option is None:
            raise ConfigResolutionError("No GraphQL engine configuration was registered.")

        if callable(option):
            option = option(raw_request)
            if inspect.isawaitable(option):
                option = await option

        return EngineConfig.from_value(option)

    # ─── Pipeline ────────────────────────────────────────────

    async def execute_pipeline(
        self,
        config: EngineConfig,
        request: ExecutionRequest,
        *,
        read_only: bool = False,
        log: logging.LoggerAdapter | logging.Logger = logger,
    ) -> StageOutcome:
        """Run parse → schema check → validate → execute and tag the outcome."""
        try:
            document = parse(request.query)
        except GraphQLSyntaxError as e:
            return StageOutcome(Stage.PARSE, errors=[e])

        schema_errors = validate_schema(config.schema)
        if schema_errors:
            log.error(
                "Schema is invalid: " + "; ".join(err.message for err in schema_errors)
            )
            return StageOutcome(Stage.SCHEMA, errors=list(schema_errors))

        validation_errors = validate(config.schema, document)
        if validation_errors:
            return StageOutcome(Stage.VALIDATION, errors=list(validation_errors))

        if read_only:
            operation = get_operation_ast(document, request.operation_name)
            if operation is not None and operation.operation != OperationType.QUERY:
                error = MethodNotAllowedError(operation.operation.value)
                return StageOutcome(
                    Stage.METHOD,
                    errors=[to_graphql_error(error)],
                    headers={"Allow": "POST"},
                )

        try:
            result = execute(
                config.schema,
                document,
                root_value=config.root_value,
                context_value=config.context,
                variable_values=request.variables,
                operation_name=request.operation_name,
            )
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            log.exception(f"Execution failed: {e}")
            return StageOutcome(Stage.EXECUTION, errors=[to_graphql_error(e)])

        errors = list(result.errors or [])
        if result.data is None and errors and all(err.path is None for err in errors):
            # The engine refused the request before resolving any field:
            # unknown operation name, ambiguous operation, bad variables.
            return StageOutcome(Stage.VALIDATION, errors=errors)

        return StageOutcome(Stage.OK, errors=errors, data=result.data, has_data=True)

    # ─── Rendering ───────────────────────────────────────────

    def render(
        self,
        outcome: StageOutcome,
        format_error: Callable[[GraphQLError], dict],
        log: logging.LoggerAdapter | logging.Logger = logger,
    ) -> GraphQLResponse:
        """Build the response envelope for a tagged outcome."""
        status_code = status_for_stage(outcome.stage)
        body: dict[str, Any] = {}

        if outcome.has_data:
            body["data"] = outcome.data

        if outcome.errors:
            try:
                body["errors"] = [format_error(err) for err in outcome.errors]
            except Exception as e:
                log.exception(f"Error formatter failed: {e}")
                failure = GraphQLError(f"Error formatter failed: {e}", original_error=e)
                return GraphQLResponse(
                    status_code=status_for_stage(Stage.EXECUTION),
                    body={"errors": [default_format_error(failure)]},
                    stage=Stage.EXECUTION,
                )

        if status_code >= 500:
            log.warning(
                f"GraphQL request failed at stage "
                f"'{outcome.stage.value}' with status {status_code}"
            )
        else:
            log.info(
                f"GraphQL request finished at stage "
                f"'{outcome.stage.value}' with status {status_code}"
            )

        return GraphQLResponse(
            status_code=status_code,
            body=body,
            stage=outcome.stage,
            headers=dict(outcome.headers),
        )
