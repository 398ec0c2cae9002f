import threading
import uuid
from collections import OrderedDict
from typing import Optional

from depmap.config import MAX_SESSIONS
from depmap.extraction.extractor import ExtractionResult


class SessionStore:
    """
    Uploaded extraction results, keyed by session id.

    In-memory only and bounded: the oldest session is dropped once
    `max_sessions` is exceeded.
    """

    def __init__(self, max_sessions: int = MAX_SESSIONS):
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, ExtractionResult]" = OrderedDict()
        self._lock = threading.Lock()

    def put(self, extraction: ExtractionResult) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = extraction
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                print(f"[Sessions] Evicted session {evicted}")
        return session_id

    def get(self, session_id: str) -> Optional[ExtractionResult]:
        with self._lock:
            return self._sessions.get(session_id)


# Global store instance
_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    global _store
    if _store is None:
        _store = SessionStore()
    return _store
