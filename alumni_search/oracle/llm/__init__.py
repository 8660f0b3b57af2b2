"""Intent providers, imported lazily so unused SDKs are never loaded.

    provider = get_provider("anthropic")
    intent = parse_response(provider.complete(build_user_prompt(query, context)))
"""

import importlib

from alumni_search.oracle.llm.base import (
    SYSTEM_PROMPT,
    LLMProvider,
    build_user_prompt,
    parse_response,
)

__all__ = [
    "SYSTEM_PROMPT",
    "LLMProvider",
    "available_providers",
    "build_user_prompt",
    "get_provider",
    "parse_response",
]

# provider name -> "module:ClassName"
_PROVIDERS: dict[str, str] = {
    "anthropic": "alumni_search.oracle.llm.anthropic:AnthropicProvider",
    "gemini": "alumni_search.oracle.llm.gemini:GeminiProvider",
    "ollama": "alumni_search.oracle.llm.ollama:OllamaProvider",
    "openai": "alumni_search.oracle.llm.openai:OpenAIProvider",
}


def get_provider(name: str) -> LLMProvider:
    """Instantiate the provider registered under ``name`` (case-insensitive).

    Raises:
        ValueError: If no provider has that name.
    """
    target = _PROVIDERS.get(name.strip().lower())
    if target is None:
        msg = f"Unknown LLM provider '{name}'. Available: {', '.join(available_providers())}"
        raise ValueError(msg)

    module_path, _, class_name = target.partition(":")
    provider_cls = getattr(importlib.import_module(module_path), class_name)
    return provider_cls()  # type: ignore[no-any-return]


def available_providers() -> list[str]:
    return sorted(_PROVIDERS)
