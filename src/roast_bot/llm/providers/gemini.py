from roast_bot.config import Settings
from roast_bot.exceptions import ProviderError
from roast_bot.llm.providers.base import HTTPProvider


class GeminiProvider(HTTPProvider):
    """Google Gemini generateContent."""

    name = "gemini"
    base_url = "https://generativelanguage.googleapis.com/v1beta"

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiProvider":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout=settings.provider_timeout,
        )

    async def generate(self, prompt: str) -> str:
        data = await self._post_json(
            f"{self.base_url}/models/{self.model}:generateContent",
            params={"key": self.api_key or ""},
            body={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": self.temperature,
                    "maxOutputTokens": self.max_tokens,
                },
            },
        )
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"gemini: неожиданный ответ: {e!r}") from e
