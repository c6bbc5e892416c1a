"""Pydantic models for the chat API."""

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Request model for the chat endpoint.

    ``message`` is optional and unbounded at the schema level so that a
    missing and a blank message both reach the relay and fail the same
    way, and any length limit comes from ``chat.max_message_length``.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = Field(
        default=None,
        description="User message to relay",
    )
    session_id: str | None = Field(
        default=None,
        alias="sessionId",
        description="Opaque caller-chosen session key",
    )


class ChatResponse(BaseModel):
    """Reply returned by the chat endpoint."""

    response: str = Field(description="In-character reply text")
    note: str | None = Field(
        default=None, description="Set when serving without a provider credential"
    )


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    error: str = Field(description="Error message")


class HealthResponse(BaseModel):
    status: str = "ok"
    provider: str = Field(description='"connected" or "degraded"')
    persona: str
    sessions: int
