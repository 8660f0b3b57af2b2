"""Retrieval executor: run planned queries against a store and merge results.

Plans run in order. A plan that fails or times out is logged and skipped.
Relaxed plans only run while fewer than ``min_results`` candidates are held,
and collection stops at ``aggregate_cap``.
"""

import asyncio
import logging

from alumni_search.core.config import RetrievalConfig
from alumni_search.core.errors import StoreUnavailableError
from alumni_search.core.query import DocumentQuery
from alumni_search.core.schemas import Profile
from alumni_search.pipeline.matcher import (
    DeduplicationFilter,
    Filter,
    NameRequiredFilter,
    run_filter_chain,
)
from alumni_search.store.base import ProfileStore

logger = logging.getLogger(__name__)


class RetrievalResult:
    """Candidates collected for one search plus execution counters."""

    def __init__(
        self,
        profiles: list[Profile],
        executed: int,
        failed: int,
        plans_run: list[str],
    ) -> None:
        self.profiles = profiles
        self.executed = executed
        self.failed = failed
        self.plans_run = plans_run

    @property
    def all_failed(self) -> bool:
        """True when at least one plan ran and every one of them failed."""
        return self.executed > 0 and self.failed == self.executed


async def retrieve(
    store: ProfileStore,
    plans: list[DocumentQuery],
    config: RetrievalConfig,
) -> RetrievalResult:
    """Execute plans in order, returning deduplicated candidates."""
    filters: list[Filter] = [NameRequiredFilter(), DeduplicationFilter()]
    collected: list[Profile] = []
    executed = 0
    failed = 0
    plans_run: list[str] = []

    for query in plans:
        if len(collected) >= config.aggregate_cap:
            logger.debug("Aggregate cap %d reached", config.aggregate_cap)
            break
        if query.is_relaxed and len(collected) >= config.min_results:
            logger.debug(
                "Skipping relaxed plan '%s': %d candidates already held",
                query.label, len(collected),
            )
            break

        executed += 1
        try:
            found = await asyncio.wait_for(
                store.find(query, config.limit_per_plan),
                timeout=config.store_timeout_seconds,
            )
        except (StoreUnavailableError, TimeoutError):
            failed += 1
            logger.warning(
                "Plan '%s' failed on store '%s', skipping",
                query.label, store.store_id,
                exc_info=True,
            )
            continue

        plans_run.append(query.label)
        fresh = run_filter_chain(found, filters)
        room = config.aggregate_cap - len(collected)
        collected.extend(fresh[:room])
        logger.info(
            "Plan '%s': %d found, %d new, %d held",
            query.label, len(found), len(fresh), len(collected),
        )

    return RetrievalResult(
        profiles=collected,
        executed=executed,
        failed=failed,
        plans_run=plans_run,
    )
