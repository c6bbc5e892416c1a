"""Configuration management for the CLI tool."""

from pydantic import BaseModel, Field

from persona_relay.infra.id_utils import generate_id

SESSION_ID_PREFIX = "session"


class CLIConfig(BaseModel):
    """CLI configuration settings."""

    host: str = Field(
        default="localhost",
        description="Server host",
    )
    port: int = Field(
        default=3456,
        description="Server port",
    )
    api_path: str = Field(
        default="/api/chat",
        description="API path for the chat endpoint",
    )
    session_id: str = Field(
        default_factory=lambda: generate_id(SESSION_ID_PREFIX),
        description="Session key sent with every message",
    )
    timeout: float = Field(
        default=60.0,
        description="Request timeout in seconds",
    )

    @property
    def base_url(self) -> str:
        """Get the base URL for the API."""
        return f"http://{self.host}:{self.port}"

    @property
    def chat_url(self) -> str:
        """Get the full URL for the chat endpoint."""
        return f"{self.base_url}{self.api_path}"
