"""Search facade: wires normalizer, intent, planner, retriever, scorer and sessions.

Data flow for one message:
  1. Normalize the raw text
  2. Under the user's lock: serve a follow-up page, or capture the previous intent
  3. Without any lock: extract intent -> plan -> retrieve -> rank (skipped for empty text)
  4. Under the user's lock: record the new search and slice the first page
  5. Append to search_log
"""

import logging
import sqlite3
from datetime import datetime

from alumni_search.core.config import Settings
from alumni_search.core.db import insert_search_log
from alumni_search.core.schemas import (
    ErrorKind,
    SearchIntent,
    SearchOutcome,
    SearchSession,
)
from alumni_search.oracle.base import IntentOracle
from alumni_search.pipeline.normalizer import normalize
from alumni_search.pipeline.planner import plan
from alumni_search.pipeline.retriever import retrieve
from alumni_search.pipeline.scorer import rank
from alumni_search.session.manager import SessionManager
from alumni_search.store.base import ProfileStore

logger = logging.getLogger(__name__)


class AlumniSearchService:
    """Entry point for conversational searches: ``search(user_id, raw_query)``.

    ``conn`` is only used for the search log and should not be the connection
    a SQLiteProfileStore reads from.
    """

    def __init__(
        self,
        store: ProfileStore,
        sessions: SessionManager,
        extractor: IntentOracle,
        settings: Settings | None = None,
        conn: sqlite3.Connection | None = None,
    ) -> None:
        self._store = store
        self._sessions = sessions
        self._extractor = extractor
        self._settings = settings or Settings()
        self._conn = conn

    @property
    def sessions(self) -> SessionManager:
        return self._sessions

    async def search(self, user_id: str, raw_query: object) -> SearchOutcome:
        """Handle one message from a user. Never raises for odd input."""
        started_at = datetime.now()
        query = normalize(raw_query, self._settings.vocabulary.corrections)
        self._sessions.maybe_sweep()

        async with self._sessions.lock(user_id):
            session = self._sessions.get_or_create(user_id)
            follow_up = self._follow_up_outcome(query, session)
            context = session.last_intent

        if follow_up is not None:
            self._log(user_id, query, follow_up, started_at)
            return follow_up

        if not query:
            # Nothing searchable; the previous search stays pageable.
            outcome = SearchOutcome(query=query)
            self._log(user_id, query, outcome, started_at)
            return outcome

        intent = await self._extractor.extract(query, context)
        logger.info("Query '%s' from '%s': %s", query, user_id, intent.summary())

        retrieval = await retrieve(self._store, plan(intent), self._settings.retrieval)
        if retrieval.all_failed:
            logger.error("Every plan failed for '%s'; directory unavailable", query)
            outcome = SearchOutcome(
                query=query,
                intent_summary=intent,
                error=ErrorKind.STORE_UNAVAILABLE,
            )
            self._log(user_id, query, outcome, started_at)
            return outcome
        results = rank(retrieval.profiles, intent, self._settings.scoring)

        async with self._sessions.lock(user_id):
            session = self._sessions.get_or_create(user_id)
            self._sessions.record_search(session, query, intent, results)
            page = self._sessions.first_page(session)
            outcome = SearchOutcome(
                query=query,
                results=page,
                intent_summary=intent,
                total_results=session.total,
                remaining=session.remaining,
                exhausted=session.remaining == 0,
            )

        logger.info(
            "Search '%s': %d results, showing %d", query, outcome.total_results, len(page),
        )
        self._log(user_id, query, outcome, started_at)
        return outcome

    def _follow_up_outcome(self, query: str, session: SearchSession) -> SearchOutcome | None:
        """Outcome for a "more"-style message, or None for a fresh search."""
        if not self._sessions.is_follow_up_phrase(query):
            return None

        intent = session.last_intent or SearchIntent()
        if self._sessions.is_follow_up(query, session):
            page = self._sessions.next_page(session)
            return SearchOutcome(
                query=query,
                results=page,
                intent_summary=intent,
                follow_up=True,
                total_results=session.total,
                remaining=session.remaining,
                exhausted=session.remaining == 0,
            )

        if session.last_intent is None:
            logger.info("Follow-up '%s' from '%s' without a previous search", query, session.user_id)
            return SearchOutcome(
                query=query,
                error=ErrorKind.NO_SESSION_FOUND,
                follow_up=True,
            )

        return SearchOutcome(
            query=query,
            intent_summary=intent,
            follow_up=True,
            total_results=session.total,
            exhausted=True,
        )

    def _log(
        self,
        user_id: str,
        query: str,
        outcome: SearchOutcome,
        started_at: datetime,
    ) -> None:
        if self._conn is None or not self._settings.database.log_searches:
            return
        try:
            insert_search_log(
                self._conn,
                user_id=user_id,
                query=query,
                intent=outcome.intent_summary,
                result_count=outcome.total_results,
                follow_up=outcome.follow_up,
                started_at=started_at,
                finished_at=datetime.now(),
                error=outcome.error.value if outcome.error else None,
            )
        except sqlite3.Error:
            logger.warning("Failed to write search log for '%s'", user_id, exc_info=True)
