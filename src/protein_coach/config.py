"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from protein_coach.services.vision import AnalysisProfile

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_model: str = "gpt-4.1-mini"
    openai_temperature: float = 0.3
    photo_bucket: str = "meal_photos"
    signed_url_ttl_seconds: int = 600
    daily_protein_goal: int = 120
    analysis_profile: AnalysisProfile = AnalysisProfile.COACHED
    daily_totals_atomic: bool = False
    image_fetch_timeout_seconds: float = 20.0
    max_photo_bytes: int = 10 * 1024 * 1024
    cors_allowed_origins: str = "*"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins: list[str] = []
    for chunk in cleaned.split(","):
        value = chunk.strip().rstrip("/")
        if value and value not in origins:
            origins.append(value)
    return origins or ["*"]
