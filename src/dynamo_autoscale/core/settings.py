from __future__ import annotations

from pydantic_settings import (  # type: ignore[import-not-found]
    BaseSettings,
    SettingsConfigDict,
)


class Settings(BaseSettings):
    """
    App settings.

    Loads from environment variables and an optional local `.env` file.
    `.env` is gitignored.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    API_TITLE: str = "Dynamo Autoscale API"
    API_VERSION: str = "0.1.0"

    # Logging
    # LOG_LEVEL is kept raw (trace|debug|info|warn|error|fatal, any case).
    # The logging facade parses it once and falls back to info when unknown.
    LOG_LEVEL: str | None = None
    LOG_NAME: str = "dynamo"


settings = Settings()
