"""
Centralized application configuration implementing the 12-Factor App methodology.
Values are read from environment variables or a local .env file.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Immutable configuration schema backed by environment variables."""

    APP_NAME: str = "Origination Back Office"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Any SQLAlchemy URL (PostgreSQL in production, SQLite locally)
    DATABASE_URL: str = "sqlite:///./origination.db"

    LOG_LEVEL: str = "INFO"

    # ISO 4217 code echoed in loan summaries when the caller does not send one
    DEFAULT_CURRENCY: str = "USD"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
