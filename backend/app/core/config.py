"""Service configuration loaded from the environment and an optional .env file."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Dose Timing Backend"
    debug: bool = False
    log_level: str = "INFO"
    engine_log_level: str | None = None
    database_url: str = "postgresql+psycopg2://localhost:5432/dose_timing"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "dose-timing"
    timing_default_wake_time: str = "07:00"
    timing_max_passes: int = 5
    timing_include_builtin_catalog: bool = True


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
