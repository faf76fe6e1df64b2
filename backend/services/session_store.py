"""Server-side storage of logged-in users' Jira credentials.

The browser only ever holds an opaque session id; the API token stays here.
"""

import secrets
import threading
import time
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional


class SessionStore(ABC):
    """Session id -> credential record."""

    @abstractmethod
    def create(self, record: dict) -> str:
        """Store ``record`` and return its new session id."""

    @abstractmethod
    def get(self, sid: str) -> Optional[dict]:
        """Record for ``sid``, or None if unknown or expired."""

    @abstractmethod
    def destroy(self, sid: str) -> None:
        """Forget ``sid``. Unknown ids are ignored."""


class MemorySessionStore(SessionStore):
    """Process-local store for single-instance deployments."""

    def __init__(self, lifetime: timedelta = timedelta(hours=8), clock=time.time):
        self.lifetime = lifetime
        self._clock = clock
        self._lock = threading.Lock()
        self._records = {}

    def create(self, record: dict) -> str:
        """Store ``record``; expired sessions are dropped on the way."""
        sid = secrets.token_urlsafe(32)
        now = self._clock()
        with self._lock:
            self._drop_expired(now)
            self._records[sid] = (now + self.lifetime.total_seconds(), dict(record))
        return sid

    def get(self, sid: str) -> Optional[dict]:
        if not sid:
            return None
        with self._lock:
            entry = self._records.get(sid)
            if entry is None:
                return None
            expires_at, record = entry
            if expires_at <= self._clock():
                del self._records[sid]
                return None
            return dict(record)

    def destroy(self, sid: str) -> None:
        with self._lock:
            self._records.pop(sid, None)

    def _drop_expired(self, now) -> int:
        # caller holds self._lock
        expired = [sid for sid, (expires_at, _) in self._records.items()
                   if expires_at <= now]
        for sid in expired:
            del self._records[sid]
        return len(expired)

    def purge_expired(self) -> int:
        """Drop expired records; returns how many were removed."""
        with self._lock:
            return self._drop_expired(self._clock())

    def __len__(self):
        with self._lock:
            return len(self._records)


BACKENDS = {
    "memory": MemorySessionStore,
}


def create_session_store(backend: str, lifetime: timedelta) -> SessionStore:
    """Instantiate the configured backend."""
    try:
        store_class = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown session backend: {backend}") from None
    return store_class(lifetime=lifetime)
