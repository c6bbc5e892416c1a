"""Domain models and errors for the conversation relay."""

from typing import Literal

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Role constants -- import these instead of duplicating strings.
# ---------------------------------------------------------------------------

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_SYSTEM = "system"

# Reply modes, used as span attribute and metric label.
MODE_PROVIDER = "provider"
MODE_DEGRADED = "degraded"
MODE_FALLBACK = "fallback"

DEGRADED_NOTE = (
    "Add OPENAI_API_KEY to the environment or .env for real AI responses"
)


class Turn(BaseModel):
    """A single message in the conversation."""

    role: Literal["user", "assistant"] = Field(description="Message sender role")
    content: str = Field(description="Message content")


class Reply(BaseModel):
    """The assistant turn returned to the caller, tagged with how it was made."""

    turn: Turn
    mode: Literal["provider", "degraded", "fallback"] = MODE_PROVIDER

    @property
    def content(self) -> str:
        return self.turn.content

    @property
    def degraded(self) -> bool:
        return self.mode == MODE_DEGRADED


class InvalidRequest(ValueError):
    """Raised when a chat message is missing or blank."""


class ProviderError(RuntimeError):
    """Raised when the completion provider cannot produce a reply.

    Covers transport errors, timeouts, non-2xx statuses, malformed bodies
    and error payloads embedded in a 200 response.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
