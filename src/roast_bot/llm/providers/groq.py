import litellm

from roast_bot.config import Settings
from roast_bot.exceptions import ProviderError
from roast_bot.llm.prompts import SYSTEM_PERSONA
from roast_bot.llm.providers.base import BaseProvider


class GroqProvider(BaseProvider):
    """Chat completion в OpenAI-формате через litellm."""

    name = "groq"

    @classmethod
    def from_settings(cls, settings: Settings) -> "GroqProvider":
        return cls(
            api_key=settings.groq_api_key,
            model=settings.groq_model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout=settings.provider_timeout,
        )

    async def generate(self, prompt: str) -> str:
        try:
            response = await litellm.acompletion(
                model=f"groq/{self.model}",
                api_key=self.api_key,
                messages=[
                    {"role": "system", "content": SYSTEM_PERSONA},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        except Exception as e:
            raise ProviderError(f"groq: запрос не удался: {e}") from e

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise ProviderError(f"groq: неожиданный ответ: {e}") from e
        if not isinstance(text, str):
            raise ProviderError("groq: пустой ответ")
        return text
