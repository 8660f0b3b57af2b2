"""Filter chain applied to profiles as the retriever collects them.

Filter order:
  1. NameRequiredFilter:  profiles without any name field are never eligible
  2. DeduplicationFilter: in-memory across plans of one search, by profile id
"""

import logging
from collections.abc import Callable

from alumni_search.core.schemas import Profile

logger = logging.getLogger(__name__)

# A filter is a callable that takes profiles and returns a subset.
Filter = Callable[[list[Profile]], list[Profile]]


class NameRequiredFilter:
    """Remove profiles that expose no name field."""

    def __call__(self, profiles: list[Profile]) -> list[Profile]:
        result = [p for p in profiles if p.has_name]
        removed = len(profiles) - len(result)
        if removed:
            logger.debug("NameRequiredFilter: removed %d nameless profiles", removed)
        return result


class DeduplicationFilter:
    """Remove profiles already seen by this filter instance.

    Stateful: one instance per search, shared by every plan it runs.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def __len__(self) -> int:
        return len(self._seen)

    def __call__(self, profiles: list[Profile]) -> list[Profile]:
        result: list[Profile] = []
        for p in profiles:
            if p.id not in self._seen:
                self._seen.add(p.id)
                result.append(p)
        deduped = len(profiles) - len(result)
        if deduped:
            logger.debug("DeduplicationFilter: removed %d duplicates", deduped)
        return result


def run_filter_chain(profiles: list[Profile], filters: list[Filter]) -> list[Profile]:
    """Apply filters in order, returning the surviving profiles."""
    result = profiles
    for f in filters:
        result = f(result)
    return result
