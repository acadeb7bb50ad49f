"""
Application Configuration

Centralized configuration management using Pydantic Settings.
Loads configuration from environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator, Field
from sqlalchemy.engine import URL
from typing import List, Any, Optional
from functools import lru_cache
import json


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """

    # Application
    APP_NAME: str = "Opportunity Finder"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"

    # API Configuration
    API_URL: str = "http://localhost:3000"

    # Database
    # The defaults are for local development only; override them everywhere else.
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "neven_scraper"
    DB_USER: str = "pejman"
    DB_PASSWORD: str = ""
    DATABASE_URL: Optional[str] = None  # Full URL, takes precedence over DB_* when set
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds

    # Dashboard
    PAGE_SIZE: int = 25  # Rows per page in the UI

    # Redis (rate limit storage)
    REDIS_URL: str = "redis://localhost:6379"

    # CORS
    # Store as string to avoid Pydantic Settings trying to parse as JSON
    # Will be converted to list via property
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS"
    )

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """
        Get CORS origins as a list.

        Parses from string format (comma-separated or JSON).
        """
        value = getattr(self, 'cors_origins_str', "http://localhost:3000")

        if not value or not isinstance(value, str):
            return ["http://localhost:3000"]

        # Try JSON first
        try:
            parsed = json.loads(value)
            if isinstance(parsed, list):
                return [str(item) for item in parsed]
        except (json.JSONDecodeError, TypeError):
            pass

        origins = [origin.strip() for origin in value.split(",") if origin.strip()]
        return origins if origins else ["http://localhost:3000"]

    @model_validator(mode="before")
    @classmethod
    def parse_cors_origins_before(cls, data: Any) -> Any:
        """
        Handle CORS_ORIGINS before Pydantic tries to parse it.

        Converts lists to strings and handles empty values.
        """
        if not isinstance(data, dict):
            return data

        if "CORS_ORIGINS" in data:
            cors_value = data["CORS_ORIGINS"]

            if isinstance(cors_value, list):
                data["CORS_ORIGINS"] = ",".join(str(item) for item in cors_value)
            elif cors_value is None or cors_value == "":
                data["CORS_ORIGINS"] = "http://localhost:3000"

        return data

    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        """
        Get the SQLAlchemy connection URL.

        DATABASE_URL wins when set; otherwise the URL is assembled from the
        DB_* host/port/database/user/password settings.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        url = URL.create(
            "postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )
        return url.render_as_string(hide_password=False)

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 120

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    # Monitoring (Sentry)
    SENTRY_DSN: str = ""
    SENTRY_ENABLED: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        env_prefix="",
        env_parse_none_str=None
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
