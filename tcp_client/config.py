"""
Configuration for the TCP session core.

Provides settings for connect timing, reply collection,
repeat-send pacing and activity log sizing.
"""
from enum import Enum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReplyWaitMode(str, Enum):
    """How a send decides that the reply is complete."""
    FIXED = "fixed"
    IDLE = "idle"


class SessionSettings(BaseSettings):
    """TCP session configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TCP_SESSION_",
        env_file=".env",
        extra="ignore",
    )

    # Connection
    connect_timeout: float = Field(default=10.0, gt=0, description="Connect timeout in seconds")
    close_timeout: float = Field(default=5.0, gt=0, description="Graceful close timeout in seconds")
    read_chunk_size: int = Field(default=4096, ge=1, description="Maximum bytes per socket read")

    # Reply collection
    quiet_window: float = Field(default=1.0, ge=0, description="Wait after a write for the reply")
    reply_wait_mode: ReplyWaitMode = Field(
        default=ReplyWaitMode.FIXED,
        description="fixed: always wait the full window, idle: stop after idle_gap of silence",
    )
    idle_gap: float = Field(default=0.2, gt=0, description="Silence that ends a reply in idle mode")

    # Repeat-send
    repeat_interval: float = Field(default=0.05, ge=0, description="Pause between repeated sends")
    max_repeat_count: int = Field(default=100, ge=1, description="Maximum repeat count per request")

    # Activity log
    log_capacity: int = Field(default=100, ge=1, description="Entries kept in the activity log")
    status_log_limit: int = Field(default=50, ge=1, description="Entries returned in a status snapshot")

    # Caller-side bound
    operation_timeout: float = Field(default=15.0, gt=0, description="Advisory bound for API callers")

    @model_validator(mode="after")
    def _check_log_limits(self) -> "SessionSettings":
        if self.status_log_limit > self.log_capacity:
            raise ValueError("status_log_limit cannot exceed log_capacity")
        return self

    def send_budget(self, repeat_count: int = 1) -> float:
        """
        Expected worst-case duration of a send call plus the advisory slack.

        Args:
            repeat_count: Number of sequential attempts.

        Returns:
            Seconds a caller should wait before reporting a timeout.
        """
        count = max(1, repeat_count)
        per_attempt = self.quiet_window + self.repeat_interval
        return count * per_attempt + self.operation_timeout


@lru_cache()
def get_session_settings() -> SessionSettings:
    """
    Get cached session settings.

    Uses LRU cache to avoid re-reading environment variables on every access.
    """
    return SessionSettings()
