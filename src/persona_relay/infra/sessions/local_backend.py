"""Single-process history backend: a bounded LRU of sessions."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from datetime import timedelta

from persona_relay.core.metrics import SESSION_EVICTIONS_TOTAL, SESSIONS_ACTIVE
from persona_relay.core.relay.models import Turn

from .base import HistoryBackend

logger = logging.getLogger(__name__)


class LocalHistoryBackend(HistoryBackend):
    """In-process session map bounded by count and idle time.

    Least recently used sessions are dropped once ``max_sessions`` is
    exceeded.  Sessions idle for longer than ``idle_ttl`` are dropped
    lazily on the next access or write.
    """

    def __init__(
        self,
        max_sessions: int,
        idle_ttl: timedelta,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_sessions = max_sessions
        self._idle_ttl = idle_ttl.total_seconds()
        self._clock = clock
        # session_id -> (turns, last_access)
        self._sessions: OrderedDict[str, tuple[list[Turn], float]] = OrderedDict()

    async def get(self, session_id: str) -> list[Turn]:
        now = self._clock()
        self._evict_idle(now)
        entry = self._sessions.get(session_id)
        if entry is None:
            return []
        turns, _ = entry
        self._sessions[session_id] = (turns, now)
        self._sessions.move_to_end(session_id)
        return list(turns)

    async def set(self, session_id: str, turns: list[Turn]) -> None:
        now = self._clock()
        self._evict_idle(now)
        self._sessions[session_id] = (list(turns), now)
        self._sessions.move_to_end(session_id)
        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            SESSION_EVICTIONS_TOTAL.labels(reason="capacity").inc()
            logger.debug("Evicted least recently used session %s", evicted)
        SESSIONS_ACTIVE.set(len(self._sessions))

    async def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
        SESSIONS_ACTIVE.set(len(self._sessions))

    async def size(self) -> int:
        self._evict_idle(self._clock())
        return len(self._sessions)

    async def aclose(self) -> None:
        self._sessions.clear()
        SESSIONS_ACTIVE.set(0)

    def _evict_idle(self, now: float) -> None:
        if self._idle_ttl <= 0:
            return
        # Oldest access first, so stop at the first live session.
        while self._sessions:
            session_id, (_, last_access) = next(iter(self._sessions.items()))
            if now - last_access <= self._idle_ttl:
                break
            del self._sessions[session_id]
            SESSION_EVICTIONS_TOTAL.labels(reason="idle").inc()
            logger.debug("Evicted idle session %s", session_id)
        SESSIONS_ACTIVE.set(len(self._sessions))
