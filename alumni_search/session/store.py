"""Session storage backends.

The store is deliberately dumb: TTL policy lives in SessionManager, the
store only keeps sessions and can drop the ones idle since a cutoff.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from alumni_search.core.schemas import SearchSession


class SessionStore(ABC):
    """Base class for session backends (in-process map, cache, test double)."""

    @abstractmethod
    def get(self, user_id: str) -> SearchSession | None:
        """Return the stored session or None."""

    @abstractmethod
    def put(self, session: SearchSession) -> None:
        """Insert or replace the session for ``session.user_id``."""

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        """Remove a session. Returns True if one existed."""

    @abstractmethod
    def sweep(self, cutoff: datetime) -> int:
        """Remove sessions whose last activity is before ``cutoff``."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of stored sessions."""


class InMemorySessionStore(SessionStore):
    """Dict-backed store. Sessions are lost when the process exits."""

    def __init__(self) -> None:
        self._sessions: dict[str, SearchSession] = {}

    def get(self, user_id: str) -> SearchSession | None:
        return self._sessions.get(user_id)

    def put(self, session: SearchSession) -> None:
        self._sessions[session.user_id] = session

    def delete(self, user_id: str) -> bool:
        return self._sessions.pop(user_id, None) is not None

    def sweep(self, cutoff: datetime) -> int:
        stale = [uid for uid, s in self._sessions.items() if s.last_activity < cutoff]
        for uid in stale:
            del self._sessions[uid]
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)
