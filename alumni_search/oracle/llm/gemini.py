"""Google Gemini intent provider."""

from alumni_search.oracle.llm.base import INTENT_MAX_TOKENS, LLMProvider, import_sdk


class GeminiProvider(LLMProvider):
    @property
    def provider_id(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return "gemini-2.0-flash"

    @property
    def env_var(self) -> str:
        return "GOOGLE_API_KEY"

    def _send(self, prompt: str, model: str, system: str) -> str | None:
        api_key = self.api_key()
        genai = import_sdk("google.genai", extra="gemini", package="google-genai")

        response = genai.Client(api_key=api_key).models.generate_content(
            model=model,
            contents=prompt,
            config=genai.types.GenerateContentConfig(
                system_instruction=system,
                temperature=0,
                max_output_tokens=INTENT_MAX_TOKENS,
                response_mime_type="application/json",
            ),
        )
        return response.text  # type: ignore[no-any-return]
