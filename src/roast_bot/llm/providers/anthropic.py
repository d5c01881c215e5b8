from anthropic import APIError, AsyncAnthropic

from roast_bot.config import Settings
from roast_bot.exceptions import ProviderError
from roast_bot.llm.providers.base import BaseProvider


class AnthropicProvider(BaseProvider):
    """Claude Messages API через официальный SDK."""

    name = "anthropic"

    def __init__(self, *args, client: AsyncAnthropic | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.client = client or AsyncAnthropic(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnthropicProvider":
        return cls(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout=settings.provider_timeout,
        )

    async def generate(self, prompt: str) -> str:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as e:
            raise ProviderError(f"anthropic: запрос не удался: {e}") from e

        try:
            return response.content[0].text
        except (AttributeError, IndexError) as e:
            raise ProviderError(f"anthropic: неожиданный ответ: {e!r}") from e
