"""Local Ollama intent provider over its OpenAI-compatible endpoint."""

import os
from typing import Any

from alumni_search.oracle.llm.openai import OpenAICompatibleProvider

_OLLAMA_BASE_URL = "http://localhost:11434/v1"


class OllamaProvider(OpenAICompatibleProvider):
    """No API key; the server address comes from OLLAMA_BASE_URL."""

    json_mode = False

    @property
    def provider_id(self) -> str:
        return "ollama"

    @property
    def default_model(self) -> str:
        return "llama3"

    @property
    def env_var(self) -> None:
        return None

    def _client(self, openai: Any, api_key: str | None) -> Any:
        base_url = os.environ.get("OLLAMA_BASE_URL", _OLLAMA_BASE_URL)
        return openai.OpenAI(base_url=base_url, api_key="ollama")
