"""Chat-completion provider client."""

from .client import CompletionProvider, extract_reply  # noqa: F401
from .deps import build_completion_provider, get_completion_provider  # noqa: F401
