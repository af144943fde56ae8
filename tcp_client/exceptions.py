"""
TCP client exceptions.

Every failure the session core reports to a caller is one of these,
each with a stable code for API responses.
"""
from typing import Any, Dict, Optional


class TCPClientError(Exception):
    """
    Base exception for all session-related errors.

    All session exceptions inherit from this class so the HTTP layer
    can map them to responses in one place.
    """

    code = "TCP_CLIENT_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            'success': False,
            'error': self.code,
            'message': self.message,
            'details': self.details
        }


class InvalidHex(TCPClientError):
    """Raised when hex text is empty, odd-length or has non-hex characters."""

    code = "INVALID_HEX"

    def __init__(self, message: str, text: Optional[str] = None):
        details = {'input': text} if text is not None else None
        super().__init__(message, details=details)


class InvalidEndpoint(TCPClientError):
    """Raised when a host or port fails validation."""

    code = "INVALID_ENDPOINT"

    def __init__(self, message: str, host: Any = None, port: Any = None):
        super().__init__(message, details={'host': host, 'port': port})


class NotConnected(TCPClientError):
    """Raised when an operation needs a live socket and there is none."""

    code = "NOT_CONNECTED"

    def __init__(self, message: str = "Not connected"):
        super().__init__(message)


class ConnectFailed(TCPClientError):
    """Raised when the socket fails while connecting."""

    code = "CONNECT_FAILED"

    def __init__(self, message: str, endpoint: Optional[str] = None):
        details = {'endpoint': endpoint} if endpoint else None
        super().__init__(message, details=details)


class ConnectTimeout(ConnectFailed):
    """Raised when a connect attempt exceeds the connect timeout."""

    code = "CONNECT_TIMEOUT"


class SocketError(TCPClientError):
    """Raised when a write fails on an already connected socket."""

    code = "SOCKET_ERROR"


class OperationTimeout(TCPClientError):
    """Raised by callers that give up waiting on an operation."""

    code = "OPERATION_TIMEOUT"

    def __init__(self, operation: str, timeout: float):
        super().__init__(
            f"{operation} operation timed out after {timeout:g} seconds",
            details={'operation': operation, 'timeout': timeout},
        )
