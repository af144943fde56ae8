"""
Shared pytest fixtures for the TCP hex client tests.

Provides fixtures for:
- Fast session settings
- Sessions and session managers
- TCP peer simulators
- API client (httpx)
"""
import os
import socket

import pytest
import pytest_asyncio

from tcp_client.config import SessionSettings
from tcp_client.connection import SessionManager, TCPSession

# Test environment configuration
os.environ.setdefault("ENVIRONMENT", "test")


# ============================================================================
# Settings Fixtures
# ============================================================================

@pytest.fixture
def session_settings() -> SessionSettings:
    """Session settings with short windows so tests stay fast."""
    return SessionSettings(
        connect_timeout=2.0,
        close_timeout=1.0,
        quiet_window=0.2,
        idle_gap=0.05,
        repeat_interval=0.01,
        operation_timeout=2.0,
    )


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def session(session_settings):
    """A fresh session, disconnected after the test."""
    tcp_session = TCPSession(session_settings)
    yield tcp_session
    await tcp_session.disconnect()


@pytest_asyncio.fixture
async def manager(session):
    """Session manager around the test session."""
    yield SessionManager(session=session)


# ============================================================================
# Simulator Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def echo_server():
    """Echo peer on an ephemeral port."""
    from tests.simulators import EchoSimulator

    simulator = EchoSimulator()
    await simulator.start()
    yield simulator
    await simulator.stop()


@pytest_asyncio.fixture
async def silent_server():
    """Peer that never replies."""
    from tests.simulators import SilentSimulator

    simulator = SilentSimulator()
    await simulator.start()
    yield simulator
    await simulator.stop()


@pytest.fixture
def closed_port() -> int:
    """A local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


# ============================================================================
# API Client Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def api_client(manager):
    """
    Test API client bound to the test session manager.

    The lifespan handler does not run under ASGITransport, so the manager
    is injected through a dependency override.
    """
    import httpx

    from app.main import app
    from app.api.dependencies import get_session_manager

    app.dependency_overrides[get_session_manager] = lambda: manager

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def freeze_time():
    """freezegun's freeze_time, for timestamp assertions."""
    from freezegun import freeze_time as _freeze_time
    return _freeze_time
