"""
TCP session management module.

Handles the single outbound connection, its activity log and
repeat-send orchestration.
"""
from .activity_log import ActivityLog, LogEntry, LogKind
from .tcp_session import SendResult, SessionState, StatusSnapshot, TCPSession
from .session_manager import SessionManager

__all__ = [
    "ActivityLog",
    "LogEntry",
    "LogKind",
    "SendResult",
    "SessionState",
    "StatusSnapshot",
    "TCPSession",
    "SessionManager",
]
