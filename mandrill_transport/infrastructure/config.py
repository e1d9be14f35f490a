"""Transport configuration with environment variable support."""

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mandrill_transport.infrastructure.constants import HttpDefaults


class Settings(BaseSettings):
    """Transport settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="mandrill-transport", alias="APP_NAME")
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Mandrill
    mandrill_api_key: str = Field(
        default="dev-mandrill-api-key-UNSAFE",
        alias="MANDRILL_API_KEY",
        description="Mandrill API key - MUST be set in production",
    )

    # HTTP client
    http_timeout: float = Field(
        default=HttpDefaults.DEFAULT_TIMEOUT,
        alias="HTTP_TIMEOUT",
        description="Timeout in seconds for the Mandrill API request",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @field_validator("http_timeout")
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError(f"HTTP_TIMEOUT must be positive, got {v}")
        return v

    @field_validator("mandrill_api_key")
    @classmethod
    def validate_mandrill_api_key(cls, v: str, info: Any) -> str:
        """Validate Mandrill API key in production."""
        app_env = info.data.get("app_env", "development")
        if app_env.lower() == "production":
            if not v.strip() or "dev-mandrill" in v.lower() or "unsafe" in v.lower():
                raise ValueError(
                    "MANDRILL_API_KEY must be set to a real API key in production. "
                    "Default development key is not allowed."
                )
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
