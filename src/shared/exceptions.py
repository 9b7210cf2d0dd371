"""
Custom exception hierarchy for the GraphQL HTTP adapter.

All adapter errors inherit from GraphQLHTTPError so they can be caught
uniformly at the execution coordinator boundary and turned into a
response envelope.
"""


class GraphQLHTTPError(Exception):
    """Base exception for all adapter errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        if status_code is not None:
            self.status_code = status_code
        self.message = message
        super().__init__(message)


class MissingQueryError(GraphQLHTTPError):
    """No query text was supplied."""

    status_code = 400

    def __init__(self, message: str = "Must provide query string."):
        super().__init__(message)


class MalformedVariablesError(GraphQLHTTPError):
    """The variables field is present but is not a JSON object."""

    status_code = 400

    def __init__(self, message: str = "Variables are invalid JSON."):
        super().__init__(message)


class MalformedBodyError(GraphQLHTTPError):
    """The request body could not be read as a GraphQL request."""

    status_code = 400


class ConfigResolutionError(GraphQLHTTPError):
    """The engine configuration could not be produced for a request.

    Carries the caller's error formatter when one could still be found in
    the rejected configuration.
    """

    status_code = 500

    def __init__(self, message: str, format_error=None):
        self.format_error = format_error
        super().__init__(message)


class MethodNotAllowedError(GraphQLHTTPError):
    """A non-query operation was sent over a read-only method."""

    status_code = 405

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"Can only perform a {operation} operation from a POST request."
        )
