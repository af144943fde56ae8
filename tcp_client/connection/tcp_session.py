"""
TCP session for a single outbound connection.

Owns one asyncio stream pair at a time and drives it through
connect, send-and-collect and disconnect, recording every step in
the activity log.

Replies are framed by time only: after a write the session waits for
the quiet window and returns whatever bytes arrived in it. The wire
protocol carries no length or terminator, so a reply that straddles
the end of the window is split, and its tail shows up only in the log.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..codec import decode, encode
from ..config import ReplyWaitMode, SessionSettings, get_session_settings
from ..exceptions import (
    ConnectFailed,
    ConnectTimeout,
    InvalidEndpoint,
    InvalidHex,
    NotConnected,
    SocketError,
)
from ..validators import Endpoint
from .activity_log import ActivityLog, LogEntry, LogKind, now_ms

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Session state enumeration."""
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"
    CLOSED = "closed"


@dataclass
class SendResult:
    """Outcome of a send, single or repeated."""
    success: bool
    response: Optional[str] = None
    responses: Optional[List[str]] = None
    success_count: Optional[int] = None
    total_count: Optional[int] = None


@dataclass(frozen=True)
class StatusSnapshot:
    """Point-in-time view of the session for pollers."""
    connected: bool
    last_updated: datetime
    log: List[LogEntry] = field(default_factory=list)
    connection_info: Optional[str] = None
    last_activity: Optional[datetime] = None
    server_info: Optional[str] = None


class TCPSession:
    """
    A reusable TCP session.

    One instance lives for the whole process and is reset on every
    connect. Sends are serialized so that a reply window never mixes
    bytes from two commands.
    """

    def __init__(
        self,
        settings: Optional[SessionSettings] = None,
        activity_log: Optional[ActivityLog] = None,
    ):
        """
        Initialize the session.

        Args:
            settings: Session settings.
            activity_log: Log to record into. Created from settings if not provided.
        """
        self.settings = settings or get_session_settings()
        self.log = activity_log or ActivityLog(self.settings.log_capacity)

        # Socket
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._endpoint: Optional[Endpoint] = None

        # State tracking
        self._state = SessionState.IDLE
        self._last_error: Optional[str] = None
        self._last_activity: Optional[datetime] = None

        # Reply collection
        self._response_buffer = bytearray()
        self._data_event = asyncio.Event()
        self._send_lock = asyncio.Lock()
        self._connect_lock = asyncio.Lock()

        # Statistics
        self._bytes_sent = 0
        self._bytes_received = 0
        self._sends = 0

        self.log.info("TCP client initialized")

    @property
    def state(self) -> SessionState:
        """Get current session state."""
        return self._state

    @state.setter
    def state(self, value: SessionState) -> None:
        """Set session state."""
        if self._state != value:
            logger.debug(f"Session state: {self._state.value} -> {value.value}")
            self._state = value

    @property
    def is_connected(self) -> bool:
        """Check if the last confirmed transition left a live socket."""
        return self._state == SessionState.CONNECTED and self._writer is not None

    @property
    def endpoint(self) -> Optional[Endpoint]:
        """Endpoint of the current or most recent connection."""
        return self._endpoint

    @property
    def last_error(self) -> Optional[str]:
        """Error that closed the most recent connection, if any."""
        return self._last_error

    @property
    def last_activity(self) -> Optional[datetime]:
        return self._last_activity

    async def connect(self, host: str, port: int) -> bool:
        """
        Connect to a TCP server, replacing any open connection.

        Args:
            host: Server host name or address.
            port: Server port.

        Returns:
            True once connected.

        Raises:
            InvalidEndpoint: If host or port is invalid.
            ConnectTimeout: If the connect timeout elapses first.
            ConnectFailed: If the socket fails while connecting.
        """
        try:
            endpoint = Endpoint.parse(host, port)
        except InvalidEndpoint as e:
            self.log.error(f"Connection error: {e.message}")
            raise

        # Holding the send lock lets an in-flight send finish its window
        # before the buffer is reset for the new socket.
        async with self._connect_lock, self._send_lock:
            if self._writer is not None:
                await self.disconnect()

            self._endpoint = endpoint
            self.state = SessionState.CONNECTING
            self.log.info(f"Connecting to {endpoint}...")

            timeout = self.settings.connect_timeout
            try:
                reader, writer = await asyncio.wait_for(
                    asyncio.open_connection(endpoint.host, endpoint.port),
                    timeout=timeout,
                )
            except asyncio.TimeoutError as e:
                self._fail_connect("Connection timeout")
                raise ConnectTimeout(
                    f"Connection to {endpoint} timed out after {timeout:g} seconds",
                    str(endpoint),
                ) from e
            except OSError as e:
                self._fail_connect(f"Socket error: {e}")
                raise ConnectFailed(
                    f"Failed to connect to {endpoint}: {e}",
                    str(endpoint),
                ) from e
            except asyncio.CancelledError:
                self._fail_connect("Connection attempt cancelled")
                raise

            self._reader = reader
            self._writer = writer
            self._response_buffer.clear()
            self._data_event.clear()
            self._last_error = None
            self._last_activity = now_ms()
            self.state = SessionState.CONNECTED
            self.log.info(f"Connected to {endpoint}")

            self._reader_task = asyncio.create_task(
                self._read_loop(reader),
                name=f"tcp-reader-{endpoint}",
            )
            return True

    def _fail_connect(self, reason: str) -> None:
        self.log.error(reason)
        self._last_error = reason
        self.state = SessionState.CLOSED

    async def _read_loop(self, reader: asyncio.StreamReader) -> None:
        """Capture every inbound chunk until EOF or a socket error."""
        try:
            while True:
                data = await reader.read(self.settings.read_chunk_size)
                if not data:
                    break
                self._on_data(data)
        except OSError as e:
            self._on_closed(e)
            return
        self._on_closed(None)

    def _on_data(self, data: bytes) -> None:
        self._last_activity = now_ms()
        self._bytes_received += len(data)
        self._response_buffer.extend(data)
        self._data_event.set()
        self.log.append(LogKind.RECEIVED, f"Received: {decode(data)}")

    def _on_closed(self, error: Optional[BaseException]) -> None:
        """Handle the peer closing the socket or the socket failing."""
        if self._state != SessionState.CONNECTED:
            return

        if error is not None:
            self._last_error = str(error) or type(error).__name__
            self.log.error(f"Socket error: {self._last_error}")
            self.log.error("Connection closed due to error")
        else:
            self.log.info("Connection closed")

        if self._writer is not None:
            self._writer.close()
        self._reader = None
        self._writer = None
        self._reader_task = None
        self.state = SessionState.IDLE

    async def send(self, hex_text: str) -> SendResult:
        """
        Write a hex payload and collect the reply.

        Args:
            hex_text: Payload as hex text.

        Returns:
            Result with the reply as hex text, or no response if nothing arrived.

        Raises:
            NotConnected: If there is no live socket.
            InvalidHex: If hex_text does not encode.
            SocketError: If the write fails.
        """
        self._require_connected()
        try:
            payload = encode(hex_text)
        except InvalidHex as e:
            self.log.error(f"Send error: {e.message}")
            raise

        async with self._send_lock:
            self._require_connected()
            writer = self._writer

            self._response_buffer.clear()
            self._data_event.clear()

            try:
                writer.write(payload)
                await asyncio.wait_for(
                    writer.drain(),
                    timeout=self.settings.connect_timeout,
                )
            except (OSError, asyncio.TimeoutError) as e:
                reason = str(e) or type(e).__name__
                self.log.error(f"Send error: {reason}")
                raise SocketError(f"Failed to send data: {reason}") from e

            self._sends += 1
            self._bytes_sent += len(payload)
            self._last_activity = now_ms()
            self.log.append(LogKind.SENT, f"Sent: {decode(payload)}")

            await self._wait_for_reply()

            response = bytes(self._response_buffer)
            return SendResult(
                success=True,
                response=decode(response) if response else None,
            )

    def _require_connected(self) -> None:
        if not self.is_connected:
            self.log.error("Not connected. Cannot send data.")
            raise NotConnected()

    async def _wait_for_reply(self) -> None:
        """Wait out the quiet window according to the configured wait mode."""
        window = self.settings.quiet_window
        if self.settings.reply_wait_mode == ReplyWaitMode.FIXED:
            await asyncio.sleep(window)
            return

        loop = asyncio.get_running_loop()
        deadline = loop.time() + window
        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                return
            if self._response_buffer:
                timeout = min(self.settings.idle_gap, remaining)
            else:
                timeout = remaining

            self._data_event.clear()
            try:
                await asyncio.wait_for(self._data_event.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                if self._response_buffer:
                    return

    async def disconnect(self) -> bool:
        """
        Close the connection gracefully.

        Always reports success; close errors are logged only.
        """
        writer = self._writer
        if writer is None:
            self.log.info("Not connected")
            if self._state != SessionState.CONNECTING:
                self.state = SessionState.IDLE
            return True

        self.state = SessionState.DISCONNECTING
        self.log.info("Disconnecting...")

        reader_task = self._reader_task
        self._reader_task = None
        if reader_task is not None and not reader_task.done():
            reader_task.cancel()
            try:
                await reader_task
            except asyncio.CancelledError:
                pass

        try:
            writer.close()
            await asyncio.wait_for(
                writer.wait_closed(),
                timeout=self.settings.close_timeout,
            )
            self.log.info("Disconnected successfully")
        except (OSError, asyncio.TimeoutError) as e:
            self.log.error(f"Disconnect error: {str(e) or type(e).__name__}")
        finally:
            self._reader = None
            self._writer = None
            self.state = SessionState.IDLE

        return True

    def get_status(self) -> StatusSnapshot:
        """Build a status snapshot. Never touches the socket."""
        connected = self.is_connected
        endpoint = str(self._endpoint) if connected and self._endpoint else None
        return StatusSnapshot(
            connected=connected,
            connection_info=endpoint,
            log=self.log.snapshot(self.settings.status_log_limit),
            last_activity=self._last_activity,
            last_updated=now_ms(),
            server_info=f"Connected to TCP server at {endpoint}" if endpoint else None,
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get session statistics."""
        return {
            "state": self._state.value,
            "endpoint": str(self._endpoint) if self._endpoint else None,
            "last_error": self._last_error,
            "last_activity": self._last_activity.isoformat() if self._last_activity else None,
            "bytes_sent": self._bytes_sent,
            "bytes_received": self._bytes_received,
            "sends": self._sends,
            "log_entries": len(self.log),
        }

    def __repr__(self) -> str:
        return (
            f"TCPSession("
            f"endpoint={self._endpoint}, "
            f"state={self._state.value})"
        )
