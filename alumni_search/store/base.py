"""Abstract base class for profile stores."""

from abc import ABC, abstractmethod

from alumni_search.core.query import DocumentQuery
from alumni_search.core.schemas import Profile


class ProfileStore(ABC):
    """Base class that every document store backend must implement.

    Implementations raise StoreUnavailableError when a query cannot be
    answered; the retriever skips that plan and carries on.
    """

    @property
    @abstractmethod
    def store_id(self) -> str:
        """Unique identifier for this backend (e.g. 'sqlite')."""

    @abstractmethod
    async def find(self, query: DocumentQuery, limit: int) -> list[Profile]:
        """Return at most ``limit`` profiles matching the query."""

    @abstractmethod
    async def count(self, query: DocumentQuery) -> int:
        """Return how many profiles match the query."""
