"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from ``API_WHISPR_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(env_prefix="API_WHISPR_", env_file=".env", extra="ignore")

    # LLM settings
    model: str = "gpt-4o-mini"
    temperature: float = 0.3
    completion_tokens: int = 1200

    # Chunking budget for spec context sent with questions
    max_tokens: int = 3000

    # Base URL used in generated snippets
    base_url: str = "https://api.example.com"


@lru_cache
def get_settings() -> Settings:
    return Settings()
