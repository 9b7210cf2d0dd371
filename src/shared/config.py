"""
Base configuration shared by the gateway and the GraphQL adapter.

Uses Pydantic Settings for environment-based configuration.
Each service extends BaseServiceSettings with its own prefix.
"""

from pydantic_settings import BaseSettings


class BaseServiceSettings(BaseSettings):
    """Base settings shared by all HTTP services."""

    service_name: str = "base"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
