"""
TCP hex client core.

Sends hex-encoded command frames to a remote TCP endpoint,
collects replies and keeps a rolling activity log.
"""
from .connection import SessionManager, TCPSession

__all__ = ["SessionManager", "TCPSession"]
