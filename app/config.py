"""
Configuration management for the TCP hex client API.

Uses Pydantic settings for validation and environment variable support.
"""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tcp_client.config import SessionSettings


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Application
    app_name: str = Field(default='TCP Hex Client')
    app_version: str = Field(default='1.0.0')
    debug: bool = Field(default=False)
    environment: str = Field(default='development')

    # Server
    host: str = Field(default='0.0.0.0')
    port: int = Field(default=5000)
    reload: bool = Field(default=False)

    # API
    api_prefix: str = Field(default='/api')
    cors_origins: List[str] = Field(default=['*'], description='Allowed CORS origins')

    # Logging
    log_level: str = Field(default='INFO')

    # Sub-settings
    session: SessionSettings = Field(default_factory=SessionSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == 'production'


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get cached application settings.

    Uses LRU cache to avoid re-reading environment variables on every access.
    """
    return AppSettings()
