"""
TCP client API endpoints.

Maps connect, disconnect, send and status onto the session manager.
Each mutating call is bounded by a caller-side timeout; the operation
itself is shielded so it still completes and leaves the session in a
consistent state after the caller has given up.
"""
import asyncio
import logging
from typing import Awaitable, List, TypeVar

from fastapi import APIRouter, Depends

from tcp_client.connection import SessionManager, StatusSnapshot
from tcp_client.exceptions import OperationTimeout
from tcp_client.presets import PRESETS

from ..dependencies import get_session_manager
from ..schemas import (
    ConnectRequest,
    SendRequest,
    OperationResponse,
    SendResponse,
    LogEntryResponse,
    StatusResponse,
    PresetResponse,
    ErrorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tcp", tags=["TCP"])

T = TypeVar("T")

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


def _log_orphaned_result(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning(f"Operation finished after its caller timed out: {exc}")


async def run_with_timeout(operation: str, aw: Awaitable[T], timeout: float) -> T:
    """
    Race an operation against a caller-side timer.

    Raises:
        OperationTimeout: If the timer wins. The operation keeps running.
    """
    task = asyncio.ensure_future(aw)
    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{operation} did not finish within {timeout:g}s")
        task.add_done_callback(_log_orphaned_result)
        raise OperationTimeout(operation, timeout)


def _status_response(snapshot: StatusSnapshot) -> StatusResponse:
    return StatusResponse(
        connected=snapshot.connected,
        connection_info=snapshot.connection_info,
        log=[
            LogEntryResponse(
                timestamp=entry.timestamp,
                type=entry.kind.value,
                message=entry.message,
            )
            for entry in snapshot.log
        ],
        last_activity=snapshot.last_activity,
        last_updated=snapshot.last_updated,
        server_info=snapshot.server_info,
    )


@router.post(
    "/connect",
    response_model=OperationResponse,
    responses=_ERROR_RESPONSES,
    summary="Connect",
    description="Open the TCP connection, closing any existing one first.",
)
async def connect(
    request: ConnectRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> OperationResponse:
    settings = manager.settings
    result = await run_with_timeout(
        "Connect",
        manager.connect(request.ip_address, request.port),
        settings.connect_timeout + settings.close_timeout + settings.operation_timeout,
    )
    return OperationResponse(success=result)


@router.post(
    "/disconnect",
    response_model=OperationResponse,
    summary="Disconnect",
    description="Close the TCP connection. Succeeds even when not connected.",
)
async def disconnect(
    manager: SessionManager = Depends(get_session_manager),
) -> OperationResponse:
    settings = manager.settings
    result = await run_with_timeout(
        "Disconnect",
        manager.disconnect(),
        settings.close_timeout + settings.operation_timeout,
    )
    return OperationResponse(success=result)


@router.post(
    "/send",
    response_model=SendResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
    summary="Send hex command",
    description="Send a hex payload, optionally repeated, and return any replies.",
)
async def send_hex(
    request: SendRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> SendResponse:
    result = await run_with_timeout(
        "Send",
        manager.send_hex(request.hex_code, request.repeat_count),
        manager.settings.send_budget(request.repeat_count),
    )
    return SendResponse(
        success=result.success,
        response=result.response,
        responses=result.responses,
        success_count=result.success_count,
        total_count=result.total_count,
    )


@router.get(
    "/status",
    response_model=StatusResponse,
    response_model_exclude_none=True,
    summary="Connection status",
    description="Current connection flag and the most recent activity log entries.",
)
async def get_status(
    manager: SessionManager = Depends(get_session_manager),
) -> StatusResponse:
    return _status_response(manager.get_status())


@router.get(
    "/presets",
    response_model=List[PresetResponse],
    summary="Hex presets",
    description="Canned hex commands for common relay controllers.",
)
async def get_presets() -> List[PresetResponse]:
    return [
        PresetResponse(label=preset.label, code=preset.code, group=preset.group.value)
        for preset in PRESETS
    ]
