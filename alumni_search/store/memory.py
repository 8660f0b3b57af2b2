"""In-process profile store that evaluates queries in Python."""

from collections.abc import Iterable

from alumni_search.core.query import DocumentQuery
from alumni_search.core.schemas import Profile
from alumni_search.store.base import ProfileStore


class InMemoryProfileStore(ProfileStore):
    """Holds profiles in a dict keyed by id, in insertion order."""

    def __init__(self, profiles: Iterable[Profile] = ()) -> None:
        self._profiles: dict[str, Profile] = {}
        for profile in profiles:
            self.add(profile)

    @property
    def store_id(self) -> str:
        return "memory"

    def add(self, profile: Profile) -> None:
        self._profiles[profile.id] = profile

    def __len__(self) -> int:
        return len(self._profiles)

    async def find(self, query: DocumentQuery, limit: int) -> list[Profile]:
        result: list[Profile] = []
        for profile in self._profiles.values():
            if len(result) >= limit:
                break
            if query.matches(profile):
                result.append(profile)
        return result

    async def count(self, query: DocumentQuery) -> int:
        return sum(1 for p in self._profiles.values() if query.matches(p))
