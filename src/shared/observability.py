"""
Langfuse observability integration.

Provides tracing for GraphQL HTTP requests and coordinator runs.
Only activates when LANGFUSE_PUBLIC_KEY and LANGFUSE_SECRET_KEY are provided in .env
"""

import functools
import os
from typing import Callable, Optional

from fastapi import Request, Response
from langfuse import Langfuse, get_client, observe
from starlette.middleware.base import BaseHTTPMiddleware

from src.shared.logging import setup_logging

logger = setup_logging("shared.observability", level="INFO")

# Global Langfuse client
_langfuse_client: Optional[Langfuse] = None
_langfuse_enabled: bool = False


def init_langfuse() -> Optional[Langfuse]:
    """
    Initialize Langfuse client if environment variables are set.

    Required environment variables:
    - LANGFUSE_PUBLIC_KEY
    - LANGFUSE_SECRET_KEY
    - LANGFUSE_HOST (optional, defaults to https://cloud.langfuse.com)

    Returns:
        Langfuse client if initialized, None otherwise
    """
    global _langfuse_client, _langfuse_enabled

    public_key = os.getenv("LANGFUSE_PUBLIC_KEY")
    secret_key = os.getenv("LANGFUSE_SECRET_KEY")
    host = os.getenv("LANGFUSE_HOST", "https://cloud.langfuse.com")

    if not public_key or not secret_key:
        logger.info("Langfuse not configured - observability disabled")
        _langfuse_enabled = False
        return None

    try:
        _langfuse_client = Langfuse(
            public_key=public_key,
            secret_key=secret_key,
            host=host,
        )
        _langfuse_enabled = True
        logger.info(f"Langfuse initialized successfully - host: {host}")
        return _langfuse_client

    except Exception as e:
        logger.error(f"Failed to initialize Langfuse: {e}")
        _langfuse_enabled = False
        return None


def is_langfuse_enabled() -> bool:
    """Check if Langfuse is enabled."""
    return _langfuse_enabled


def shutdown_langfuse():
    """Flush and shutdown Langfuse client."""
    global _langfuse_client, _langfuse_enabled

    if _langfuse_client:
        logger.info("Shutting down Langfuse - flushing pending traces")
        try:
            _langfuse_client.flush()
        except Exception as e:
            logger.error(f"Error flushing Langfuse: {e}")
        finally:
            _langfuse_client = None
            _langfuse_enabled = False


class LangfuseMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for automatic request tracing with Langfuse.

    Traces all HTTP requests and responses, capturing:
    - Request method, path, query params
    - Response status code
    - Whether the request hit a GraphQL endpoint
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Trace the HTTP request/response cycle."""

        if not is_langfuse_enabled():
            return await call_next(request)

        method = request.method
        path = request.url.path
        query_params = dict(request.query_params)
        user_id = request.headers.get("X-User-ID")

        try:
            langfuse = get_client()
            langfuse.update_current_trace(
                name=f"{method} {path}",
                metadata={
                    "method": method,
                    "path": path,
                    "query_params": query_params,
                },
                user_id=user_id,
                tags=["http", "graphql", method.lower()],
            )

            response = await call_next(request)

            langfuse.update_current_trace(
                output={"status_code": response.status_code},
                tags=["http", "graphql", method.lower(), f"status_{response.status_code}"],
            )

            return response

        except Exception as e:
            logger.exception(f"Error in Langfuse middleware: {e}")

            if is_langfuse_enabled():
                try:
                    langfuse = get_client()
                    langfuse.update_current_trace(
                        output={"error": str(e)},
                        tags=["error", "middleware_error"],
                    )
                except Exception as langfuse_error:
                    logger.error(f"Failed to update Langfuse trace: {langfuse_error}")

            raise


def trace_function(
    name: Optional[str] = None,
    capture_input: bool = False,
    capture_output: bool = False,
    as_type: str = "span",
):
    """
    Decorator for tracing async functions with Langfuse.

    The check for an active Langfuse client happens on every call, so
    functions decorated at import time start tracing once init_langfuse()
    has run in the application lifespan.

    Args:
        name: Custom name for the trace (defaults to function name)
        capture_input: Whether to capture function arguments
        capture_output: Whether to capture function return value
        as_type: Type of trace ("span", "generation", "event")

    Usage:
        @trace_function(name="execute_graphql")
        async def run(self, request) -> GraphQLResponse:
            ...
    """
    def decorator(func: Callable) -> Callable:
        traced_func = observe(
            name=name or func.__name__,
            capture_input=capture_input,
            capture_output=capture_output,
            as_type=as_type,
        )(func)

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            if is_langfuse_enabled():
                return await traced_func(*args, **kwargs)
            return await func(*args, **kwargs)

        return wrapper

    return decorator
