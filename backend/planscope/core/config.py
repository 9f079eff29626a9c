"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Planscope Backend"
    debug: bool = False
    log_level: str = "INFO"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "planscope"
    openai_api_key: str | None = None
    planner_model: str = "gpt-4o"
    planner_temperature: float = 0.6
    strict_task_enums: bool = False
    plan_rate_limit_max_requests: int = 10
    plan_rate_limit_window_seconds: int = 3600


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
