"""Client configuration module."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Reseller credentials and transport options sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRUSTICO_", env_file=".env", env_file_encoding="utf-8"
    )

    # Reseller account
    username: str = ""
    password: str = ""

    # Transport
    api_url: str = "https://api.ssl-processing.com/geodirect/postapi/"
    timeout: float = 30.0

    # Logging
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


settings = Settings()
