"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from inspectflow.enums import DateNormalizationStrategy


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="INSPECTFLOW_", extra="ignore"
    )

    # Environment
    ENV: str = "dev"

    # Backend API
    API_BASE_URL: str = "http://localhost:5000"
    API_TIMEOUT_SECONDS: float = 20.0
    API_MAX_ATTEMPTS: int = 3  # Reads only; writes are never retried

    # Dates
    DISPLAY_TIMEZONE: str = "America/New_York"
    DATE_NORMALIZATION_STRATEGY: DateNormalizationStrategy = (
        DateNormalizationStrategy.UTC_NOON
    )

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def api_base_url(self) -> str:
        """Base URL without a trailing slash."""
        return self.API_BASE_URL.rstrip("/")


settings = Settings()
