"""
FastAPI dependencies for the TCP client API.

Provides the session manager via dependency injection.
"""
from fastapi import Request

from tcp_client.connection import SessionManager


def get_session_manager(request: Request) -> SessionManager:
    """Get the session manager owned by the running application."""
    return request.app.state.session_manager
