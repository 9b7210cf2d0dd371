"""
Structured logging with per-request correlation IDs.

Provides a consistent logging setup for the gateway and the GraphQL
adapter so that a single HTTP request can be traced through the
normalizer and the execution coordinator.
"""

import logging
import uuid


def setup_logging(name: str, level: str = "INFO") -> logging.Logger:
    """
    Configure structured logging for a component.

    Args:
        name: Name of the component (used as logger prefix).
        level: Log level string (e.g. 'INFO', 'DEBUG').

    Returns:
        Configured logger instance.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
    )
    return logging.getLogger(name)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for tracing a single HTTP request."""
    return uuid.uuid4().hex[:12]


class CorrelationAdapter(logging.LoggerAdapter):
    """Prefixes every message with the request's correlation ID."""

    def process(self, msg, kwargs):
        return f"[{self.extra['correlation_id']}] {msg}", kwargs


def request_logger(logger: logging.Logger, correlation_id: str | None = None) -> CorrelationAdapter:
    """Wrap a module logger for one request, generating an ID when none is given."""
    return CorrelationAdapter(
        logger, {"correlation_id": correlation_id or generate_correlation_id()}
    )
