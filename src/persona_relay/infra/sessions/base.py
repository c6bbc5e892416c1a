"""Conversation history storage: abstract backend."""

from __future__ import annotations

from abc import ABC, abstractmethod

from persona_relay.core.relay.models import Turn


class HistoryBackend(ABC):
    """Key-value interface for per-session conversation history.

    Keyed by session id.  Backends own storage only; bounding the
    history and serialising writers is the caller's job.
    """

    @abstractmethod
    async def get(self, session_id: str) -> list[Turn]:
        """Return a copy of the session's turns (empty when unknown)."""

    @abstractmethod
    async def set(self, session_id: str, turns: list[Turn]) -> None:
        """Replace the session's turns, creating the session if needed."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Forget the session (no-op when unknown)."""

    @abstractmethod
    async def size(self) -> int:
        """Number of sessions currently held."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release any resources held by the backend."""
