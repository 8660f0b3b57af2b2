"""Capability interface for anything that turns a query into a SearchIntent."""

from abc import ABC, abstractmethod

from alumni_search.core.schemas import SearchIntent


class IntentOracle(ABC):
    """Base class for intent extractors.

    The rule-based extractor is the default implementation; LLM-backed
    oracles wrap it and must fall back to it on any failure.
    """

    @abstractmethod
    async def extract(
        self,
        query: str,
        context: SearchIntent | None = None,
    ) -> SearchIntent:
        """Interpret a normalized query.

        Args:
            query: Output of normalize().
            context: Intent of the user's previous search, if any.
        """
