from roast_bot.llm.prompts import build_prompt
from roast_bot.llm.providers import PROVIDERS, BaseProvider, ProviderError, build_provider

__all__ = ["build_prompt", "build_provider", "BaseProvider", "ProviderError", "PROVIDERS"]
