"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    openai_api_key: str
    openai_model: str = "gpt-4o"
    openai_temperature: float = 0.3
    coach_model: str = "gpt-4o"
    coach_temperature: float = 0.7
    coach_max_tokens: int = 1000
    coach_history_days: int = 14
    meal_pattern_model: str = "o3-mini-2025-01-31"
    meal_recommendation_model: str = "gpt-4o-2024-08-06"
    feedback_daily_limit: int = 3
    frequent_items_lookback_days: int = 30
    frequent_items_cache_ttl_seconds: int = 300
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
