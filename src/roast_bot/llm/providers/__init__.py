from rich.console import Console
from rich.markup import escape

from roast_bot.config import Settings
from roast_bot.exceptions import ProviderError
from roast_bot.llm.providers.anthropic import AnthropicProvider
from roast_bot.llm.providers.base import BaseProvider
from roast_bot.llm.providers.gemini import GeminiProvider
from roast_bot.llm.providers.groq import GroqProvider
from roast_bot.llm.providers.huggingface import HuggingFaceProvider

console = Console()

DEFAULT_PROVIDER = "groq"

PROVIDERS: dict[str, type[BaseProvider]] = {
    "groq": GroqProvider,
    "gemini": GeminiProvider,
    "huggingface": HuggingFaceProvider,
    "anthropic": AnthropicProvider,
}


def build_provider(settings: Settings) -> BaseProvider:
    """Выбрать провайдер по AI_PROVIDER. Неизвестное имя даёт провайдер по умолчанию."""
    provider_cls = PROVIDERS.get(settings.ai_provider)
    if provider_cls is None:
        console.print(
            f"[yellow]Неизвестный AI_PROVIDER '{escape(settings.ai_provider)}', "
            f"использую {DEFAULT_PROVIDER}[/yellow]"
        )
        provider_cls = PROVIDERS[DEFAULT_PROVIDER]
    return provider_cls.from_settings(settings)


__all__ = [
    "PROVIDERS",
    "DEFAULT_PROVIDER",
    "BaseProvider",
    "ProviderError",
    "GroqProvider",
    "GeminiProvider",
    "HuggingFaceProvider",
    "AnthropicProvider",
    "build_provider",
]
