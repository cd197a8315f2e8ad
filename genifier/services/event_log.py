import logging
from collections import deque
from datetime import datetime, timezone

from genifier.models.pipeline import LogEntry, LogLevel

logger = logging.getLogger(__name__)

_LOGGING_LEVELS = {
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class EventLog:
    """Bounded, ordered log shown to the user; oldest entries fall off first."""

    def __init__(self, capacity: int = 500):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    def append(self, message: str, level: LogLevel = LogLevel.INFO) -> LogEntry:
        entry = LogEntry(timestamp=datetime.now(timezone.utc), level=level, message=message)
        self._entries.append(entry)
        logger.log(_LOGGING_LEVELS[level], message)
        return entry

    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    def messages(self) -> list[str]:
        return [e.message for e in self._entries]

    def last(self) -> LogEntry | None:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)
