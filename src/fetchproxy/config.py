"""Configuration management for fetchproxy."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )
    debug: bool = Field(False, description="Enable debug mode")

    # API Configuration
    api_host: str = Field("0.0.0.0", description="API host")
    api_port: int = Field(8000, description="API port")

    # Upstream Settings
    upstream_timeout: float | None = Field(
        None, description="Upstream timeout in seconds, unset for no timeout"
    )
    max_redirects: int = Field(
        20, description="Maximum redirects followed when followRedirect is on"
    )


# Global settings instance
settings = Settings()
