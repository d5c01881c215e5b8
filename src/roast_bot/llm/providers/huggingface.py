from roast_bot.config import Settings
from roast_bot.exceptions import ProviderError
from roast_bot.llm.providers.base import HTTPProvider

INST_OPEN = "<s>[INST]"
INST_CLOSE = "[/INST]"


def wrap_instruction(prompt: str) -> str:
    return f"{INST_OPEN} {prompt} {INST_CLOSE}"


def extract_answer(generated_text: str) -> str:
    """Модель возвращает инструкцию вместе с ответом, берём то, что после последнего [/INST]."""
    _, delimiter, answer = generated_text.rpartition(INST_CLOSE)
    if not delimiter:
        raise ProviderError("huggingface: в ответе нет разделителя [/INST]")
    return answer.strip()


class HuggingFaceProvider(HTTPProvider):
    """Hugging Face Inference API, text generation."""

    name = "huggingface"
    base_url = "https://api-inference.huggingface.co"

    @classmethod
    def from_settings(cls, settings: Settings) -> "HuggingFaceProvider":
        return cls(
            api_key=settings.huggingface_api_key,
            model=settings.huggingface_model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout=settings.provider_timeout,
        )

    async def generate(self, prompt: str) -> str:
        data = await self._post_json(
            f"{self.base_url}/models/{self.model}",
            headers={"Authorization": f"Bearer {self.api_key}"},
            body={
                "inputs": wrap_instruction(prompt),
                "parameters": {
                    "max_new_tokens": self.max_tokens,
                    "temperature": self.temperature,
                },
            },
        )
        try:
            generated = data[0]["generated_text"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"huggingface: неожиданный ответ: {e!r}") from e
        if not isinstance(generated, str):
            raise ProviderError("huggingface: generated_text не строка")
        return extract_answer(generated)
