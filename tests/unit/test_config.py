"""
Unit tests for session settings.
"""
import pytest
from pydantic import ValidationError

from tcp_client.config import ReplyWaitMode, SessionSettings


class TestSessionSettings:
    """Test defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        """Test reference timing defaults."""
        for name in ("TCP_SESSION_CONNECT_TIMEOUT", "TCP_SESSION_QUIET_WINDOW"):
            monkeypatch.delenv(name, raising=False)

        settings = SessionSettings(_env_file=None)

        assert settings.connect_timeout == 10.0
        assert settings.quiet_window == 1.0
        assert settings.repeat_interval == 0.05
        assert settings.log_capacity == 100
        assert settings.status_log_limit == 50
        assert settings.reply_wait_mode == ReplyWaitMode.FIXED

    def test_env_override(self, monkeypatch):
        """Test environment variables use the TCP_SESSION_ prefix."""
        monkeypatch.setenv("TCP_SESSION_QUIET_WINDOW", "0.5")
        monkeypatch.setenv("TCP_SESSION_REPLY_WAIT_MODE", "idle")

        settings = SessionSettings(_env_file=None)

        assert settings.quiet_window == 0.5
        assert settings.reply_wait_mode == ReplyWaitMode.IDLE

    def test_status_limit_cannot_exceed_capacity(self):
        """Test snapshot limit is bounded by log capacity."""
        with pytest.raises(ValidationError):
            SessionSettings(_env_file=None, log_capacity=10, status_log_limit=20)

    def test_send_budget_scales_with_repeat(self):
        """Test caller-side budget covers every attempt."""
        settings = SessionSettings(
            _env_file=None,
            quiet_window=1.0,
            repeat_interval=0.05,
            operation_timeout=15.0,
        )

        assert settings.send_budget(1) == pytest.approx(16.05)
        assert settings.send_budget(10) == pytest.approx(25.5)
        assert settings.send_budget(0) == settings.send_budget(1)
