"""Pydantic Settings — loads configuration from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_prefix": "LLM_SCRAPER_", "extra": "ignore"}

    model: str = "openai:gpt-4o-mini"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
