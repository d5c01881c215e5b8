from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    github_app_id: str | None = Field(None, validation_alias=AliasChoices("github_app_id", "app_id"))
    github_private_key: str | None = Field(
        None, validation_alias=AliasChoices("github_private_key", "private_key")
    )
    github_webhook_secret: str | None = Field(
        None, validation_alias=AliasChoices("github_webhook_secret", "webhook_secret")
    )
    # Личный токен для CLI и для событий без installation
    github_token: str | None = None
    github_api_url: str = "https://api.github.com"

    host: str = "0.0.0.0"
    port: int = 3000

    ai_provider: str = "groq"
    groq_api_key: str | None = None
    gemini_api_key: str | None = None
    huggingface_api_key: str | None = None
    anthropic_api_key: str | None = None

    groq_model: str = "llama-3.3-70b-versatile"
    gemini_model: str = "gemini-1.5-flash"
    huggingface_model: str = "mistralai/Mistral-7B-Instruct-v0.2"
    anthropic_model: str = "claude-3-5-sonnet-20241022"

    max_tokens: int = 1000
    temperature: float = 0.8
    provider_timeout: float = 30.0

    @field_validator("github_private_key")
    @classmethod
    def _unescape_newlines(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.replace("\\n", "\n")

    @field_validator("ai_provider")
    @classmethod
    def _normalize_provider(cls, value: str) -> str:
        return value.strip().lower()


def get_settings() -> Settings:
    return Settings()
