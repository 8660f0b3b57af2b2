"""LLM-assisted intent extraction layered over the rule-based extractor."""

import asyncio
import logging

from alumni_search.core.config import OracleConfig
from alumni_search.core.errors import OracleUnavailableError
from alumni_search.core.schemas import SearchIntent
from alumni_search.oracle.base import IntentOracle
from alumni_search.oracle.llm import build_user_prompt, get_provider, parse_response
from alumni_search.oracle.llm.base import LLMProvider

logger = logging.getLogger(__name__)

_MERGED_CATEGORIES = ("skills", "locations", "roles", "companies", "education")


class LLMIntentOracle(IntentOracle):
    """Ask an LLM for the intent, keeping the fallback's answer on any failure.

    The fallback always runs first, so a slow or broken provider costs at most
    ``config.timeout_seconds`` and never changes the outcome for the worse.
    """

    def __init__(
        self,
        fallback: IntentOracle,
        provider: LLMProvider,
        config: OracleConfig | None = None,
    ) -> None:
        self._fallback = fallback
        self._provider = provider
        self._config = config or OracleConfig(enabled=True)

    async def extract(
        self,
        query: str,
        context: SearchIntent | None = None,
    ) -> SearchIntent:
        base = await self._fallback.extract(query, context)
        if base.is_name_search():
            return base

        try:
            suggested = await asyncio.wait_for(
                asyncio.to_thread(self._ask_provider, query, context),
                timeout=self._config.timeout_seconds,
            )
        except (OracleUnavailableError, TimeoutError):
            logger.warning(
                "LLM intent extraction failed for '%s' (%s), using rule-based intent",
                query,
                self._provider.provider_id,
                exc_info=True,
            )
            return base

        merged = merge_intents(base, suggested)
        logger.debug("LLM intent merged: %s", merged.summary())
        return merged

    def _ask_provider(self, query: str, context: SearchIntent | None) -> SearchIntent:
        try:
            raw = self._provider.complete(
                build_user_prompt(query, context), model=self._config.model
            )
            return parse_response(raw)
        except Exception as e:
            msg = f"{self._provider.provider_id} provider failed: {e}"
            raise OracleUnavailableError(msg) from e


def merge_intents(base: SearchIntent, suggested: SearchIntent) -> SearchIntent:
    """Union the LLM's categories into the rule-based intent.

    Names reported by the LLM turn the result into a names-only intent.
    """
    if suggested.names:
        return SearchIntent(names=suggested.names)

    merged: dict[str, list[str]] = {}
    for category in _MERGED_CATEGORIES:
        values = list(getattr(base, category))
        for term in getattr(suggested, category):
            if term not in values:
                values.append(term)
        merged[category] = values

    return SearchIntent(
        **merged,
        keywords=base.keywords,
        requirement_flags=base.requirement_flags | suggested.requirement_flags,
    )


def build_oracle(fallback: IntentOracle, config: OracleConfig) -> IntentOracle:
    """Wrap ``fallback`` with an LLM oracle when enabled in config."""
    if not config.enabled:
        return fallback
    provider = get_provider(config.provider)
    logger.info("LLM intent oracle enabled (%s)", provider.provider_id)
    return LLMIntentOracle(fallback, provider, config)
