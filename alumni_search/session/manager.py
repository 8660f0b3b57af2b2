"""Session manager: per-user conversational state and pagination.

State machine per user:
  Active (shown_count < total) -> Exhausted (shown_count == total)
  -> Expired after ttl_minutes of inactivity, which behaves exactly like a
     session that never existed.

Expiry is checked lazily on access; sweep_expired() can be called to purge
idle sessions in bulk.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from alumni_search.core.config import SessionConfig
from alumni_search.core.schemas import RankedResult, SearchIntent, SearchSession
from alumni_search.core.vocabulary import DEFAULT_FOLLOW_UP_PHRASES
from alumni_search.session.store import InMemorySessionStore, SessionStore

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns every SearchSession; nothing else keeps a reference across calls.

    Usage::

        manager = SessionManager(InMemorySessionStore(), SessionConfig())
        async with manager.lock(user_id):
            session = manager.get_or_create(user_id)
            if manager.is_follow_up(query, session):
                page = manager.next_page(session)
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        config: SessionConfig | None = None,
        follow_up_phrases: list[str] | None = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store if store is not None else InMemorySessionStore()
        self._config = config or SessionConfig()
        phrases = follow_up_phrases if follow_up_phrases is not None else DEFAULT_FOLLOW_UP_PHRASES
        self._follow_ups = {" ".join(p.lower().split()) for p in phrases}
        self._now = now
        self._locks: dict[str, asyncio.Lock] = {}
        self._last_sweep = now()

    @property
    def ttl(self) -> timedelta:
        return timedelta(minutes=self._config.ttl_minutes)

    def lock(self, user_id: str) -> asyncio.Lock:
        """The lock serializing access to one user's session."""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    def get(self, user_id: str) -> SearchSession | None:
        """Return the live session or None, dropping it if expired."""
        session = self._store.get(user_id)
        if session is None:
            return None
        if self._is_expired(session):
            logger.info("Session for '%s' expired, resetting", user_id)
            self._store.delete(user_id)
            return None
        return session

    def get_or_create(self, user_id: str) -> SearchSession:
        """Return the unexpired session for a user, creating one if needed."""
        session = self.get(user_id)
        now = self._now()
        if session is None:
            session = SearchSession(user_id=user_id, created_at=now, last_activity=now)
            self._store.put(session)
            logger.debug("Created session for '%s'", user_id)
        else:
            session.last_activity = now
        return session

    def record_search(
        self,
        session: SearchSession,
        query: str,
        intent: SearchIntent,
        results: list[RankedResult],
    ) -> None:
        """Replace the session's search and mark the first page as shown."""
        session.last_query = query
        session.last_intent = intent
        session.ranked_results = list(results)
        session.shown_count = min(self._config.first_page_size, len(results))
        session.last_activity = self._now()
        self._store.put(session)

    def first_page(self, session: SearchSession) -> list[RankedResult]:
        return session.ranked_results[: session.shown_count]

    def is_follow_up_phrase(self, normalized_query: str) -> bool:
        return " ".join(normalized_query.split()) in self._follow_ups

    def is_follow_up(self, normalized_query: str, session: SearchSession | None) -> bool:
        """True for a "more"-style query on a live session with unshown results."""
        if session is None or not self.is_follow_up_phrase(normalized_query):
            return False
        if self._is_expired(session):
            return False
        return session.shown_count < len(session.ranked_results)

    def next_page(
        self,
        session: SearchSession,
        page_size: int | None = None,
    ) -> list[RankedResult]:
        """Return the next unseen slice and advance shown_count."""
        size = page_size or self._config.page_size
        start = session.shown_count
        page = session.ranked_results[start : start + size]
        session.shown_count = start + len(page)
        session.last_activity = self._now()
        self._store.put(session)
        logger.debug(
            "Served results %d-%d of %d to '%s'",
            start + 1, session.shown_count, len(session.ranked_results), session.user_id,
        )
        return page

    def reset(self, user_id: str) -> bool:
        """Explicitly destroy a user's session."""
        return self._store.delete(user_id)

    def maybe_sweep(self) -> int:
        """Run sweep_expired() if a full TTL has passed since the last sweep."""
        if self._now() - self._last_sweep < self.ttl:
            return 0
        return self.sweep_expired()

    def sweep_expired(self) -> int:
        """Drop every session idle for longer than the TTL, and unused locks."""
        self._last_sweep = self._now()
        removed = self._store.sweep(self._last_sweep - self.ttl)
        for user_id in [u for u, lock in self._locks.items() if not lock.locked()]:
            if self._store.get(user_id) is None:
                del self._locks[user_id]
        if removed:
            logger.info("Swept %d expired sessions", removed)
        return removed

    def _is_expired(self, session: SearchSession) -> bool:
        return self._now() - session.last_activity > self.ttl
