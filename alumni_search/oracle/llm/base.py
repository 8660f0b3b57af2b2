"""Abstract base class for LLM providers and shared logic."""

import importlib
import json
import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Any

from alumni_search.core.schemas import RequirementFlag, SearchIntent

logger = logging.getLogger(__name__)

# Output token cap for one intent object.
INTENT_MAX_TOKENS = 512

SYSTEM_PROMPT = (
    "You interpret search requests sent to an alumni directory over WhatsApp.\n\n"
    "Return ONLY a JSON object (no markdown, no explanation) with these fields:\n"
    "- names (list[str]): full or partial person names being looked up. "
    "Empty unless the user asks about a specific person.\n"
    "- skills (list[str]): skills, technologies or domains, lower-case, "
    "including close synonyms (e.g. web -> frontend, backend, javascript)\n"
    "- locations (list[str]): cities, states or countries, lower-case, "
    "with common alternate spellings\n"
    "- roles (list[str]): job titles or roles (developer, founder, lawyer)\n"
    "- companies (list[str]): employer names\n"
    "- education (list[str]): institutions or degrees, with acronyms expanded\n"
    "- needs_professional_help (bool): true if the user needs help or advice "
    "from a working professional rather than a student\n"
    "- senior_level (bool): true if the user asks for senior or experienced people\n\n"
    "If a previous search is given and the new message only refines it "
    "(e.g. 'what about mumbai'), keep the previous fields and apply the change. "
    "Use empty lists for anything not mentioned. Never invent names."
)

_LIST_FIELDS = ("names", "skills", "locations", "roles", "companies", "education")


def build_user_prompt(query: str, context: SearchIntent | None = None) -> str:
    """Assemble the user prompt from the query and the previous intent."""
    prompt = f"MESSAGE\n{query}\n"
    if context is not None and not context.is_empty():
        previous = context.model_dump(include=set(_LIST_FIELDS))
        prompt += f"\nPREVIOUS SEARCH\n{json.dumps(previous)}\n"
    return prompt


def parse_response(raw_text: str) -> SearchIntent:
    """Parse an LLM response text into a SearchIntent.

    Handles markdown-wrapped JSON (```json ... ```) and plain JSON.
    """
    cleaned = re.sub(r"^```(?:json)?\s*\n?", "", raw_text.strip())
    cleaned = re.sub(r"\n?```\s*$", "", cleaned)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        msg = f"Failed to parse LLM response as JSON: {e}"
        raise ValueError(msg) from e

    if not isinstance(data, dict):
        msg = "LLM response must be a JSON object"
        raise ValueError(msg)

    fields: dict[str, Any] = {name: _clean_list(data.get(name)) for name in _LIST_FIELDS}
    flags = set()
    if data.get("needs_professional_help") is True:
        flags.add(RequirementFlag.NEEDS_PROFESSIONAL_HELP)
    if data.get("senior_level") is True:
        flags.add(RequirementFlag.SENIOR_LEVEL)
    return SearchIntent(**fields, requirement_flags=frozenset(flags))


def _clean_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        msg = f"Expected a list of strings, got {type(value).__name__}"
        raise ValueError(msg)
    result: list[str] = []
    for item in value:
        term = " ".join(str(item).lower().split())
        if term and term not in result:
            result.append(term)
    return result


def import_sdk(module: str, extra: str, package: str | None = None) -> Any:
    """Import a provider SDK, pointing at the matching install extra if missing."""
    try:
        return importlib.import_module(module)
    except ImportError:
        msg = (
            f"{package or module} is required for the LLM intent oracle. "
            f"Install with: pip install 'alumni-search[{extra}]'"
        )
        raise ImportError(msg) from None


class LLMProvider(ABC):
    """Base class for the chat models that can interpret queries.

    Subclasses only implement ``_send``; model and system prompt defaults,
    credentials and logging live here.
    """

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'anthropic')."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""

    def complete(
        self,
        prompt: str,
        model: str | None = None,
        *,
        system: str | None = None,
    ) -> str:
        """Send a prompt to the LLM and return raw response text.

        Args:
            prompt: User message, usually from build_user_prompt().
            model: Override the provider's default model. None uses default.
            system: Override the system prompt. None falls back to SYSTEM_PROMPT.

        Returns:
            Raw text response from the LLM (expected to be JSON).
        """
        use_model = model or self.default_model
        use_system = system if system is not None else SYSTEM_PROMPT
        logger.debug("Asking %s (%s) to interpret %d chars", self.provider_id, use_model, len(prompt))
        return self._send(prompt, use_model, use_system) or ""

    def api_key(self) -> str | None:
        """Read the provider's key from the environment."""
        if self.env_var is None:
            return None
        key = os.environ.get(self.env_var)
        if not key:
            msg = f"{self.env_var} environment variable is required for the {self.provider_id} oracle"
            raise ValueError(msg)
        return key

    @abstractmethod
    def _send(self, prompt: str, model: str, system: str) -> str | None:
        """Make the SDK call. Raises whatever the SDK raises."""
