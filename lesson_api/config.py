# config.py

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """ Application settings read from LESSON_API_* environment variables or .env. """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LESSON_API_", case_sensitive=False)

    # Database
    db_file: str = "lessons.db"
    db_timeout_seconds: float = 5.0

    # API
    cors_origins: list[str] = ["*"]
    host: str = "0.0.0.0"
    port: int = 3000

    # Observability
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
