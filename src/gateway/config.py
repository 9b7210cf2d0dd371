"""Gateway configuration."""

from src.shared.config import BaseServiceSettings


class GatewaySettings(BaseServiceSettings):
    """Settings specific to the FastAPI Gateway."""

    service_name: str = "gateway"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]
    graphql_path: str = "/graphql"
    # Include Python tracebacks in GraphQL error views
    debug_errors: bool = False

    class Config:
        env_prefix = "GATEWAY_"
