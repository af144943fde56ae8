# Pydantic Schemas for the TCP client API

from .tcp_schemas import (
    ConnectRequest,
    SendRequest,
    OperationResponse,
    SendResponse,
    LogEntryResponse,
    StatusResponse,
    PresetResponse,
    ErrorResponse,
)

__all__ = [
    "ConnectRequest",
    "SendRequest",
    "OperationResponse",
    "SendResponse",
    "LogEntryResponse",
    "StatusResponse",
    "PresetResponse",
    "ErrorResponse",
]
