"""Anthropic Claude intent provider."""

from alumni_search.oracle.llm.base import INTENT_MAX_TOKENS, LLMProvider, import_sdk


class AnthropicProvider(LLMProvider):
    @property
    def provider_id(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    @property
    def env_var(self) -> str:
        return "ANTHROPIC_API_KEY"

    def _send(self, prompt: str, model: str, system: str) -> str | None:
        api_key = self.api_key()
        anthropic = import_sdk("anthropic", extra="anthropic")

        message = anthropic.Anthropic(api_key=api_key).messages.create(
            model=model,
            max_tokens=INTENT_MAX_TOKENS,
            temperature=0,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
        # Text blocks only; the model is not given tools.
        return "".join(getattr(block, "text", "") for block in message.content)
