"""
Request Normalizer — transport input to ExecutionRequest.

GET requests carry query, variables and operationName in the query
string; POST requests carry the same keys in an already decoded body.
Both are reduced to the same immutable ExecutionRequest.
"""

import json
from collections.abc import Mapping
from typing import Any

from src.graphql_http.models import ExecutionRequest
from src.shared.exceptions import (
    MalformedBodyError,
    MalformedVariablesError,
    MissingQueryError,
)
from src.shared.logging import setup_logging

logger = setup_logging("graphql_http.normalizer", level="INFO")


def parse_variables(raw: Any) -> dict[str, Any] | None:
    """Decode a variables value into a mapping.

    Accepts an already decoded mapping, None, or a JSON string. A JSON
    ``null`` is treated the same as an absent value.
    """
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.info(f"Rejecting variables that are not valid JSON: {e}")
            raise MalformedVariablesError() from e
        if decoded is None:
            return None
        if isinstance(decoded, dict):
            return decoded
    raise MalformedVariablesError("Variables must be a JSON object.")


def normalize_request(
    method: str,
    query_params: Mapping[str, str],
    body: Any = None,
) -> ExecutionRequest:
    """
    Build an ExecutionRequest from a GET query string or a POST body.

    Args:
        method: HTTP method of the incoming request.
        query_params: Query-string parameters.
        body: Decoded request body (ignored for GET).

    Returns:
        The canonical execution request.

    Raises:
        MissingQueryError: No query text, or an empty one.
        MalformedVariablesError: Variables present but not a JSON object.
        MalformedBodyError: POST body is not an object, or a field has the wrong type.
    """
    if method.upper() == "GET":
        source: Mapping[str, Any] = query_params
    else:
        if body is None:
            body = {}
        if not isinstance(body, Mapping):
            raise MalformedBodyError("POST body must be a JSON object.")
        source = body

    query = source.get("query")
    if query is not None and not isinstance(query, str):
        raise MalformedBodyError("query must be a string.")
    if not query:
        raise MissingQueryError()

    operation_name = source.get("operationName")
    if operation_name is not None and not isinstance(operation_name, str):
        raise MalformedBodyError("operationName must be a string.")

    return ExecutionRequest(
        query=query,
        variables=parse_variables(source.get("variables")),
        operation_name=operation_name or None,
    )
