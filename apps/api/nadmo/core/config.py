"""Application configuration with environment variables."""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # Collaborator API (persistence + authoritative checks)
    API_BASE_URL: str = "http://localhost:8000/api"
    API_TOKEN: str = ""  # Sent as a Bearer token when set
    API_TIMEOUT_SECONDS: float = 15.0

    # Retry/backoff for transient API failures
    API_MAX_ATTEMPTS: int = 3
    API_RETRY_BASE_DELAY: float = 0.5
    API_RETRY_MAX_DELAY: float = 4.0

    # Exports
    EXPORT_MAX_ROWS: int = 10000

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def api_base_url(self) -> str:
        """Base URL without a trailing slash."""
        return self.API_BASE_URL.rstrip("/")

    @property
    def log_level(self) -> int:
        """LOG_LEVEL resolved to a logging constant (INFO on unknown names)."""
        level = logging.getLevelName(self.LOG_LEVEL.strip().upper())
        return level if isinstance(level, int) else logging.INFO


settings = Settings()
