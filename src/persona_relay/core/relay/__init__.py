"""The conversation relay: session history, bounds, provider hand-off."""

from .models import (  # noqa: F401
    DEGRADED_NOTE,
    MODE_DEGRADED,
    MODE_FALLBACK,
    MODE_PROVIDER,
    ROLE_ASSISTANT,
    ROLE_USER,
    InvalidRequest,
    ProviderError,
    Reply,
    Turn,
)
from .relay import (  # noqa: F401
    ConversationRelay,
    bound_history,
    build_provider_messages,
    validate_message,
)
