from datetime import timedelta
from pathlib import Path

from pydantic import BaseModel, Field


class ProviderConfig(BaseModel):
    """Configuration for the chat-completion provider."""

    endpoint: str = Field(
        default="https://api.openai.com/v1/chat/completions",
        description="OpenAI-compatible chat completions URL",
    )
    model_name: str = Field(
        default="gpt-4o-mini", description="Model identifier sent to the provider"
    )
    max_tokens: int = Field(
        default=150, description="Maximum tokens in a single reply"
    )
    temperature: float = Field(
        default=0.9, description="Sampling temperature for in-character replies"
    )
    timeout: timedelta = Field(
        default_factory=lambda: timedelta(seconds=30),
        description="Provider request timeout. YAML may use seconds as int.",
    )


class ChatConfig(BaseModel):
    """Configuration for chat settings."""

    max_history_turns: int = Field(
        default=20,
        ge=1,
        description="Maximum number of turns kept per session",
    )
    default_session_id: str = Field(
        default="default",
        description="Session key used when the caller sends no sessionId",
    )
    max_message_length: int | None = Field(
        default=None,
        ge=1,
        description="Reject longer messages with 400. None accepts any length.",
    )


class SessionConfig(BaseModel):
    """Bounds of the in-process session map."""

    max_sessions: int = Field(
        default=1024, ge=1, description="Maximum number of live sessions"
    )
    idle_ttl: timedelta = Field(
        default_factory=lambda: timedelta(hours=1),
        description="Sessions idle for longer than this are evicted. "
        "Set to 0 to disable.",
    )


class PersonaSelection(BaseModel):
    """Which persona the relay speaks as."""

    name: str = Field(default="hood_toly", description="Built-in persona key")
    file: Path | None = Field(
        default=None,
        description="Optional YAML file defining a custom persona "
        "(takes precedence over name)",
    )


class APIConfig(BaseModel):
    """API configuration settings."""

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=3456, description="API server port")
    cors_allow_origin: str = Field(
        default="*", description="Value of Access-Control-Allow-Origin"
    )
    static_dir: Path | None = Field(
        default=None,
        description="Directory with the front-end files, served at / when set",
    )


class LoggingConfig(BaseModel):
    """Root logger settings."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=False, description="Emit JSON lines instead of coloured text"
    )


class TracingConfig(BaseModel):
    """OpenTelemetry tracing settings."""

    enabled: bool = Field(default=False, description="Enable OTLP tracing")
    endpoint: str = Field(default="", description="OTLP HTTP traces endpoint")
    username: str = Field(default="", description="Basic auth user")
    password: str = Field(default="", description="Basic auth password")
    service_name: str = Field(default="persona-relay")
    sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    excluded_urls: list[str] = Field(
        default_factory=lambda: ["/health", "/metrics"],
        description="Paths excluded from tracing and HTTP metrics",
    )


class MetricsConfig(BaseModel):
    """Prometheus metrics settings."""

    enabled: bool = Field(default=True, description="Expose /metrics")
