from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Check configuration loaded from environment variables."""

    PROJECT_NAME: str = "check_newrelic"

    # New Relic REST endpoint
    NEWRELIC_BASE_URL: str = "https://rpm.newrelic.com"
    NEWRELIC_API_KEY_HEADER: str = "x-license-key"

    # Fallbacks for flags not given on the command line
    NEWRELIC_API_KEY: str | None = None
    NEWRELIC_APP_NAME: str | None = None

    # Transport
    HTTP_TIMEOUT_SEC: float = 10.0
    VERIFY_SSL: bool = True

    LOG_LEVEL: str = "WARNING"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return cached settings object to avoid re-parsing env vars."""
    return Settings()
