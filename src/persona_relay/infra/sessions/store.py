"""SessionStore -- history storage plus per-session serialisation."""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from persona_relay.configs.config import AppConfig, get_app_config
from persona_relay.core.relay.models import Turn
from persona_relay.infra.lifespan import get_app

from .base import HistoryBackend
from .local_backend import LocalHistoryBackend

logger = logging.getLogger(__name__)


class SessionStore:
    """History storage with one ``asyncio.Lock`` per session.

    Usage::

        async with store.lock(session_id):
            turns = await store.get(session_id)
            ...
            await store.set(session_id, turns)

    Locks live in a ``WeakValueDictionary``: a lock disappears once no
    request holds or waits on it, so the lock map never outgrows the
    set of in-flight sessions.
    """

    def __init__(self, backend: HistoryBackend) -> None:
        self._backend = backend
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @asynccontextmanager
    async def lock(self, session_id: str) -> AsyncGenerator[None, None]:
        """Hold the session's lock for a read-modify-write sequence."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        async with lock:
            yield

    async def get(self, session_id: str) -> list[Turn]:
        return await self._backend.get(session_id)

    async def set(self, session_id: str, turns: list[Turn]) -> None:
        await self._backend.set(session_id, turns)

    async def delete(self, session_id: str) -> None:
        await self._backend.delete(session_id)

    async def size(self) -> int:
        return await self._backend.size()

    async def aclose(self) -> None:
        """Shut down the underlying backend."""
        await self._backend.aclose()


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_session_store(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create a ``SessionStore``, attach to ``app.state``; close on shutdown."""
    sc = config.sessions
    backend = LocalHistoryBackend(
        max_sessions=sc.max_sessions,
        idle_ttl=sc.idle_ttl,
    )
    logger.info(
        "Session store: local backend (max_sessions=%d, idle_ttl=%s)",
        sc.max_sessions,
        sc.idle_ttl,
    )

    store = SessionStore(backend)
    app.state.session_store = store
    yield
    await store.aclose()


# ---------------------------------------------------------------------------
# Per-request dependency -- reads from app.state
# ---------------------------------------------------------------------------


def get_session_store(request: Request) -> SessionStore:
    """Return the ``SessionStore`` stored on ``app.state`` by the lifespan."""
    return request.app.state.session_store
