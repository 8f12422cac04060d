"""
config.py - Runtime settings

Settings are read from ``CSV_LEDGER_*`` environment variables and an optional
``.env`` file. Command line options take precedence over them.
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging settings
    log_level: str = "WARNING"
    log_format: Optional[str] = None

    # Text encoding of the input csv and the saved statement
    encoding: str = "utf-8"

    model_config = SettingsConfigDict(
        env_prefix="CSV_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.strip().upper()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
