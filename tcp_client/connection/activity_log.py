"""
Bounded activity log for a TCP session.

Keeps the most recent entries in insertion (chronological) order and
mirrors each entry to the process log.
"""
import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from itertools import islice
from typing import Deque, List, Optional

logger = logging.getLogger(__name__)


class LogKind(str, Enum):
    """Activity log entry category."""
    INFO = "info"
    ERROR = "error"
    SENT = "sent"
    RECEIVED = "received"


def now_ms() -> datetime:
    """Local wall-clock time truncated to milliseconds."""
    now = datetime.now().astimezone()
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@dataclass(frozen=True)
class LogEntry:
    """A single timestamped activity log entry."""
    timestamp: datetime
    kind: LogKind
    message: str

    @property
    def display_time(self) -> str:
        """Timestamp as HH:MM:SS.mmm."""
        return self.timestamp.strftime("%H:%M:%S.") + f"{self.timestamp.microsecond // 1000:03d}"

    def __str__(self) -> str:
        return f"{self.display_time} - {self.kind.value}: {self.message}"


class ActivityLog:
    """
    Fixed-capacity FIFO of log entries.

    Appends are expected to come from the owning session only; the log
    does no locking of its own.
    """

    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def last(self) -> Optional[LogEntry]:
        """Most recent entry, if any."""
        return self._entries[-1] if self._entries else None

    def append(self, kind: LogKind, message: str) -> LogEntry:
        """Record an entry, evicting the oldest once capacity is reached."""
        entry = LogEntry(timestamp=now_ms(), kind=LogKind(kind), message=message)
        self._entries.append(entry)

        if entry.kind == LogKind.ERROR:
            logger.warning(f"[TCP Client] {entry}")
        elif entry.kind == LogKind.INFO:
            logger.info(f"[TCP Client] {entry}")
        else:
            logger.debug(f"[TCP Client] {entry}")

        return entry

    def info(self, message: str) -> LogEntry:
        return self.append(LogKind.INFO, message)

    def error(self, message: str) -> LogEntry:
        return self.append(LogKind.ERROR, message)

    def snapshot(self, max_entries: Optional[int] = None) -> List[LogEntry]:
        """
        Get the most recent entries without mutating the log.

        Args:
            max_entries: Maximum number of entries to return. All if None.

        Returns:
            Entries in chronological order.
        """
        if max_entries is None or max_entries >= len(self._entries):
            return list(self._entries)
        if max_entries <= 0:
            return []
        start = len(self._entries) - max_entries
        return list(islice(self._entries, start, None))

    def clear(self) -> None:
        self._entries.clear()
