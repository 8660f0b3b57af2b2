"""OpenAI intent provider, also the base for OpenAI-compatible servers."""

from typing import Any

from alumni_search.oracle.llm.base import INTENT_MAX_TOKENS, LLMProvider, import_sdk


class OpenAICompatibleProvider(LLMProvider):
    """Chat-completions call shared by OpenAI and servers speaking its API."""

    # Servers that reject response_format set this to False.
    json_mode = True

    def _client(self, openai: Any, api_key: str | None) -> Any:
        return openai.OpenAI(api_key=api_key)

    def _send(self, prompt: str, model: str, system: str) -> str | None:
        api_key = self.api_key()
        openai = import_sdk("openai", extra="openai")
        client = self._client(openai, api_key)

        kwargs: dict[str, Any] = {}
        if self.json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = client.chat.completions.create(
            model=model,
            temperature=0,
            max_tokens=INTENT_MAX_TOKENS,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            **kwargs,
        )
        return response.choices[0].message.content  # type: ignore[no-any-return]


class OpenAIProvider(OpenAICompatibleProvider):
    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o-mini"

    @property
    def env_var(self) -> str:
        return "OPENAI_API_KEY"
