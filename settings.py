from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # `.env.prod` takes priority over `.env`
        env_file=(".env", ".env.prod"),
        extra="ignore",
    )

    # Falls back to the DB_HOST/DB_* parts or local SQLite (see database.py)
    database_url: Optional[str] = None

    log_format: str = "json"
    log_level: str = "INFO"

    # Identifier sequences
    response_id_prefix: str = "QRS"
    application_id_prefix: str = "APP"
    id_width: int = 7

    # Attempts for a save that loses an id/unique-constraint race
    id_allocation_retries: int = 3


@lru_cache()
def get_settings() -> Settings:
    return Settings()
