# knight_service/config.py
"""Settings loaded from the environment (prefix ``KNIGHTS_``) and ``.env``."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KNIGHTS_",
    )

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///db.sqlite")
    create_schema_on_startup: bool = Field(default=True)

    # Validation bounds
    name_max_length: int = Field(default=50, ge=1)
    create_nickname_max_length: int = Field(default=15, ge=1)
    update_nickname_max_length: int = Field(default=50, ge=1)

    # Server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=1, le=65535)
    log_level: str = Field(default="INFO")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
