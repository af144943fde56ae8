"""
Pydantic schemas for TCP client API endpoints.

Field names are camelCase on the wire.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    """Base schema accepting both field names and camelCase aliases."""
    model_config = ConfigDict(populate_by_name=True)


class ConnectRequest(CamelModel):
    """Request to open the TCP connection."""
    ip_address: str = Field(..., alias="ipAddress", min_length=1, max_length=253)
    port: int = Field(..., ge=1, le=65535)


class SendRequest(CamelModel):
    """Request to send a hex command."""
    hex_code: str = Field(..., alias="hexCode", min_length=1)
    repeat_count: int = Field(default=1, alias="repeatCount", ge=1, le=100)


class OperationResponse(CamelModel):
    """Response for connect and disconnect."""
    success: bool


class SendResponse(CamelModel):
    """Response for a send, single or repeated."""
    success: bool
    response: Optional[str] = None
    responses: Optional[List[str]] = None
    success_count: Optional[int] = Field(default=None, alias="successCount")
    total_count: Optional[int] = Field(default=None, alias="totalCount")


class LogEntryResponse(CamelModel):
    """A single activity log entry."""
    timestamp: datetime
    type: str
    message: str


class StatusResponse(CamelModel):
    """Connection status snapshot."""
    connected: bool
    connection_info: Optional[str] = Field(default=None, alias="connectionInfo")
    log: List[LogEntryResponse]
    last_activity: Optional[datetime] = Field(default=None, alias="lastActivity")
    last_updated: datetime = Field(..., alias="lastUpdated")
    server_info: Optional[str] = Field(default=None, alias="serverInfo")


class PresetResponse(CamelModel):
    """A canned hex command."""
    label: str
    code: str
    group: str


class ErrorResponse(CamelModel):
    """Error body for failed operations."""
    success: bool = False
    error: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
