"""
Session manager for the single TCP session.

Wraps one TCPSession and adds repeat-send orchestration. The HTTP
layer holds one manager for the lifetime of the process.
"""
import asyncio
import logging
from typing import List, Optional

from ..config import SessionSettings
from ..exceptions import TCPClientError
from .activity_log import now_ms
from .tcp_session import SendResult, StatusSnapshot, TCPSession

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Coordinates all operations on the one TCP session.

    Responsibilities:
    - Connect/disconnect pass-through
    - Sequential repeat-send with per-attempt error capture
    - Status snapshots that never raise
    """

    def __init__(
        self,
        session: Optional[TCPSession] = None,
        settings: Optional[SessionSettings] = None,
    ):
        """
        Initialize the manager.

        Args:
            session: Session to manage. Created from settings if not provided.
            settings: Session settings.
        """
        self.session = session or TCPSession(settings)
        self.settings = settings or self.session.settings
        self._last_status: Optional[StatusSnapshot] = None

    async def connect(self, host: str, port: int) -> bool:
        return await self.session.connect(host, port)

    async def disconnect(self) -> bool:
        return await self.session.disconnect()

    async def send_hex(self, hex_text: str, repeat_count: int = 1) -> SendResult:
        """
        Send a hex payload once or several times in sequence.

        Each repeated attempt is independent: a failed attempt is logged
        and the loop moves on. The operation succeeds if any attempt did.

        Args:
            hex_text: Payload as hex text.
            repeat_count: Number of sequential attempts.

        Returns:
            The single-send result, or for repeat_count > 1 an aggregate with
            success_count, total_count and the non-empty responses in order.

        Raises:
            TCPClientError: The error of the last attempt, if every attempt failed.
        """
        if repeat_count <= 1:
            return await self.session.send(hex_text)

        responses: List[str] = []
        success_count = 0
        last_error: Optional[TCPClientError] = None

        logger.info(f"[TCP Client] Starting send operation with repeat count: {repeat_count}")

        for attempt in range(1, repeat_count + 1):
            logger.debug(f"[TCP Client] Send attempt {attempt}/{repeat_count}")
            try:
                result = await self.session.send(hex_text)
            except TCPClientError as e:
                last_error = e
                logger.info(f"[TCP Client] Attempt {attempt}: Error - {e.message}")
            else:
                success_count += 1
                if result.response:
                    responses.append(result.response)
                    logger.debug(f"[TCP Client] Attempt {attempt}: Successful with response")
                else:
                    logger.debug(f"[TCP Client] Attempt {attempt}: Successful without response")

            if attempt < repeat_count:
                await asyncio.sleep(self.settings.repeat_interval)

        if success_count > 0:
            logger.info(
                f"[TCP Client] Completed {success_count}/{repeat_count} "
                f"send operations successfully"
            )
            return SendResult(
                success=True,
                responses=responses,
                success_count=success_count,
                total_count=repeat_count,
            )

        raise last_error

    def get_status(self) -> StatusSnapshot:
        """Get a status snapshot, falling back to the last good one on failure."""
        try:
            status = self.session.get_status()
        except Exception:
            logger.exception("Failed to build status snapshot")
            if self._last_status is not None:
                return self._last_status
            return StatusSnapshot(connected=False, last_updated=now_ms())

        self._last_status = status
        return status

    async def shutdown(self) -> None:
        """Release the socket on process shutdown."""
        await self.session.disconnect()
