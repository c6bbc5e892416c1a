"""FastAPI dependency factories for the relay.

``get_persona`` resolves the configured persona once per process.
``get_relay`` is a per-request ``Depends`` factory with an explicit
parameter chain; the session store and provider it wires in are
process-wide and live on ``app.state``.
"""

import functools
from pathlib import Path
from typing import Annotated

from fastapi import Depends

from persona_relay.configs.config import AppConfig, get_app_config
from persona_relay.configs.persona import PersonaConfig, load_persona
from persona_relay.core.provider.client import CompletionProvider
from persona_relay.core.provider.deps import get_completion_provider
from persona_relay.infra.sessions.store import SessionStore, get_session_store

from .relay import ConversationRelay


@functools.lru_cache(maxsize=8)
def _cached_persona(name: str, file: Path | None) -> PersonaConfig:
    return load_persona(name, file)


def get_persona(
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> PersonaConfig:
    """Load the configured persona, cached per (name, file).

    ``get_persona.reset()`` drops the cache, e.g. after a persona file
    was edited.
    """
    return _cached_persona(config.persona.name, config.persona.file)


get_persona.reset = _cached_persona.cache_clear  # type: ignore[attr-defined]


def get_relay(
    config: Annotated[AppConfig, Depends(get_app_config)],
    persona: Annotated[PersonaConfig, Depends(get_persona)],
    store: Annotated[SessionStore, Depends(get_session_store)],
    provider: Annotated[
        CompletionProvider | None, Depends(get_completion_provider)
    ],
) -> ConversationRelay:
    """Create a relay bound to the shared store and provider."""
    return ConversationRelay(persona, store, provider, config.chat)
