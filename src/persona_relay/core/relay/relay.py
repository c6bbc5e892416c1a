"""ConversationRelay -- bounded per-session history in front of a provider."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import TYPE_CHECKING

from persona_relay.configs.persona import PersonaConfig
from persona_relay.configs.system import ChatConfig
from persona_relay.core.metrics import CHAT_REPLIES_TOTAL
from persona_relay.infra.telemetry import (
    ATTR_RELAY_HISTORY_LEN,
    ATTR_RELAY_MODE,
    ATTR_RELAY_SESSION_ID,
    SPAN_RELAY_MESSAGE,
    tracer,
)

from .models import (
    MODE_DEGRADED,
    MODE_FALLBACK,
    MODE_PROVIDER,
    ROLE_ASSISTANT,
    ROLE_SYSTEM,
    ROLE_USER,
    InvalidRequest,
    Reply,
    Turn,
)

if TYPE_CHECKING:
    from persona_relay.core.provider.client import CompletionProvider
    from persona_relay.infra.sessions.store import SessionStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def bound_history(turns: Sequence[Turn], limit: int) -> list[Turn]:
    """Keep the newest *limit* turns, dropping the oldest first."""
    if len(turns) <= limit:
        return list(turns)
    return list(turns[len(turns) - limit :])


def build_provider_messages(
    system_prompt: str, turns: Sequence[Turn]
) -> list[dict[str, str]]:
    """System prompt first, then the history in chronological order."""
    return [
        {"role": ROLE_SYSTEM, "content": system_prompt},
        *(turn.model_dump() for turn in turns),
    ]


def validate_message(message: object, max_length: int | None = None) -> str:
    """Return *message* unchanged, or raise ``InvalidRequest``."""
    # Whitespace-only messages are rejected like empty ones.
    if not isinstance(message, str) or not message.strip():
        raise InvalidRequest("Message is required")
    if max_length is not None and len(message) > max_length:
        raise InvalidRequest(f"Message is too long (max {max_length} characters)")
    return message


# ---------------------------------------------------------------------------
# Relay
# ---------------------------------------------------------------------------


class ConversationRelay:
    """Relays one user message to the provider and records the exchange.

    Two modes, decided by whether a provider is configured:

    * **provider** -- under the session lock: append the user turn, bound
      the history, call the provider with the persona prompt plus the
      history, then append and return the assistant turn.  A failed call
      raises ``ProviderError`` and records no assistant turn.
    * **degraded** -- no credential: return a random persona line without
      creating or touching any session.
    """

    def __init__(
        self,
        persona: PersonaConfig,
        store: SessionStore,
        provider: CompletionProvider | None,
        chat_config: ChatConfig,
        rng: random.Random | None = None,
    ) -> None:
        self._persona = persona
        self._store = store
        self._provider = provider
        self._chat = chat_config
        self._rng = rng or random.Random()

    @property
    def persona(self) -> PersonaConfig:
        return self._persona

    @property
    def degraded(self) -> bool:
        return self._provider is None

    def resolve_session_id(self, session_id: str | None) -> str:
        return session_id or self._chat.default_session_id

    async def handle_message(
        self, session_id: str | None, message: str | None
    ) -> Reply:
        """Relay *message* for *session_id* and return the assistant reply.

        Raises:
            InvalidRequest: *message* is missing or blank.
            ProviderError: the provider call failed (provider mode only).
        """
        text = validate_message(message, self._chat.max_message_length)
        sid = self.resolve_session_id(session_id)

        with tracer.start_as_current_span(SPAN_RELAY_MESSAGE) as span:
            span.set_attribute(ATTR_RELAY_SESSION_ID, sid)

            if self._provider is None:
                span.set_attribute(ATTR_RELAY_MODE, MODE_DEGRADED)
                CHAT_REPLIES_TOTAL.labels(mode=MODE_DEGRADED).inc()
                return self._canned_reply(self._persona.degraded_replies, MODE_DEGRADED)

            span.set_attribute(ATTR_RELAY_MODE, MODE_PROVIDER)
            limit = self._chat.max_history_turns

            async with self._store.lock(sid):
                history = await self._store.get(sid)
                history = bound_history(
                    [*history, Turn(role=ROLE_USER, content=text)], limit
                )
                await self._store.set(sid, history)

                reply_text = await self._provider.complete(
                    build_provider_messages(self._persona.system_prompt, history)
                )

                assistant = Turn(role=ROLE_ASSISTANT, content=reply_text)
                history = bound_history([*history, assistant], limit)
                await self._store.set(sid, history)

            span.set_attribute(ATTR_RELAY_HISTORY_LEN, len(history))
            CHAT_REPLIES_TOTAL.labels(mode=MODE_PROVIDER).inc()
            logger.debug("Session %s now holds %d turns", sid, len(history))
            return Reply(turn=assistant, mode=MODE_PROVIDER)

    def fallback_reply(self) -> Reply | None:
        """A persona line for a failed provider call, or ``None`` if the
        persona defines no failure replies."""
        if not self._persona.failure_replies:
            return None
        CHAT_REPLIES_TOTAL.labels(mode=MODE_FALLBACK).inc()
        return self._canned_reply(self._persona.failure_replies, MODE_FALLBACK)

    def _canned_reply(self, lines: Sequence[str], mode: str) -> Reply:
        return Reply(
            turn=Turn(role=ROLE_ASSISTANT, content=self._rng.choice(lines)),
            mode=mode,
        )
