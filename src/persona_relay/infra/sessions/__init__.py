"""Per-session conversation history storage.

``HistoryBackend`` is the key-value seam (get / set / delete by session
id).  ``LocalHistoryBackend`` keeps everything in process memory,
bounded by session count (LRU) and idle time.  ``SessionStore`` adds a
per-session lock so concurrent requests on one session serialise their
read-modify-write, while different sessions never contend.
"""

from .base import HistoryBackend
from .local_backend import LocalHistoryBackend
from .store import SessionStore, build_session_store, get_session_store

__all__ = [
    "HistoryBackend",
    "LocalHistoryBackend",
    "SessionStore",
    "build_session_store",
    "get_session_store",
]
