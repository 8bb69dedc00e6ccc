from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""
    # API Keys
    openweather_api_key: str | None = None
    anthropic_api_key: str | None = None

    # Weather provider
    openweather_base_url: str = "https://api.openweathermap.org/data/3.0/onecall"
    weather_timeout_seconds: float = 10.0

    # Plan narrative
    narrative_model: str = "anthropic:claude-sonnet-4-5-20250929"

    # Fallback reading used when the weather provider is unavailable
    fallback_temperature_celsius: float = 25.0
    fallback_uv_index: float = 5.0
    fallback_condition: str = "Clear"
    fallback_cloud_coverage_percent: float = 0.0
    fallback_location_name: str = "Unknown Location"

    # Local daylight window for best-time selection
    daylight_start_hour: int = 6
    daylight_end_hour: int = 18

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
