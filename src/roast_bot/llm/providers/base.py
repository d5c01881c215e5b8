"""Общий интерфейс провайдеров генерации.

Каждый провайдер принимает готовый промпт и возвращает текст комментария.
Провайдеры отличаются только конвертом запроса и тем, откуда в ответе
достаётся текст. Любой сбой (сеть, статус не 2xx, неожиданная форма ответа)
поднимается как ProviderError.
"""

from abc import ABC, abstractmethod

import httpx

from roast_bot.config import Settings
from roast_bot.exceptions import ProviderError


class BaseProvider(ABC):
    name: str = ""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        max_tokens: int = 1000,
        temperature: float = 0.8,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

    @classmethod
    @abstractmethod
    def from_settings(cls, settings: Settings) -> "BaseProvider":
        """Создать провайдер из настроек."""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Сгенерировать текст по промпту."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model!r})"


class HTTPProvider(BaseProvider):
    """Провайдер, который ходит в API напрямую через httpx."""

    base_url: str = ""

    def __init__(self, *args, transport: httpx.AsyncBaseTransport | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.transport = transport

    async def _post_json(self, url: str, body: dict, headers: dict | None = None, params: dict | None = None):
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(url, json=body, headers=headers, params=params)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPError as e:
            raise ProviderError(f"{self.name}: запрос не удался: {e}") from e
        except ValueError as e:
            raise ProviderError(f"{self.name}: ответ не JSON: {e}") from e
