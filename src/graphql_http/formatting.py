"""
Error views for GraphQL responses.

Every error that leaves the adapter is a GraphQLError passed through an
error formatter. The default view is graphql-core's own formatted error
(message, locations, path, extensions); format_error_with_stack adds the
Python traceback for debugging deployments.
"""

import traceback
from typing import Any

from graphql import GraphQLError


def to_graphql_error(error: BaseException) -> GraphQLError:
    """Wrap an arbitrary exception so that formatters see a GraphQLError."""
    if isinstance(error, GraphQLError):
        return error
    message = getattr(error, "message", None) or str(error) or type(error).__name__
    return GraphQLError(message, original_error=error)


def default_format_error(error: GraphQLError) -> dict[str, Any]:
    """Default error view: message plus locations, path and extensions when set."""
    return error.formatted


def format_error_with_stack(error: GraphQLError) -> dict[str, Any]:
    """Error view that also exposes the stack of the underlying exception."""
    view = dict(error.formatted)
    source = error.original_error or error
    view["stack"] = traceback.format_exception(
        type(source), source, source.__traceback__
    )
    return view
