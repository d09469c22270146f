"""
Status Log

In-memory log of what happened during a session (media loading, export
progress, errors) for display in the main window. Every entry is also
written to the application logger.
"""

import datetime
from dataclasses import dataclass
from typing import List, Optional, Dict, Any

from PySide6.QtCore import QObject, Signal

from clip_editor.config import logger

INFO = "info"
PROGRESS = "progress"
ERROR = "error"
SUCCESS = "success"

_LOG_LEVELS = {
    INFO: logger.info,
    PROGRESS: logger.debug,
    ERROR: logger.error,
    SUCCESS: logger.info,
}


@dataclass
class LogEntry:
    """
    A single status line.

    Attributes:
        id: Sequence number, increasing over the life of the log
        timestamp: Local wall-clock time (HH:MM:SS)
        message: Text as received
        kind: One of info, progress, error, success
    """
    id: int
    timestamp: str
    message: str
    kind: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "message": self.message,
            "kind": self.kind
        }


class StatusLog(QObject):
    """
    Bounded list of status entries.

    Consecutive identical progress lines are collapsed; FFmpeg repeats
    itself a lot.

    Signals:
        entry_added: Emitted with each new LogEntry
        cleared: Emitted after clear()
    """

    entry_added = Signal(object)
    cleared = Signal()

    def __init__(self, max_entries: int = 200, parent=None):
        super().__init__(parent)
        self._entries: List[LogEntry] = []
        self._max_entries = max_entries
        self._next_id = 0

    @property
    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def add(self, message: str, kind: str = INFO) -> Optional[LogEntry]:
        """
        Append an entry.

        Returns:
            The new entry, or None if it duplicated the previous progress line
        """
        if self._entries:
            last = self._entries[-1]
            if kind == PROGRESS and last.kind == PROGRESS and last.message == message:
                return None

        entry = LogEntry(
            id=self._next_id,
            timestamp=datetime.datetime.now().strftime("%H:%M:%S"),
            message=message,
            kind=kind
        )
        self._next_id += 1
        self._entries.append(entry)
        if len(self._entries) > self._max_entries:
            del self._entries[:len(self._entries) - self._max_entries]

        _LOG_LEVELS.get(kind, logger.info)(message)
        self.entry_added.emit(entry)
        return entry

    def last_progress_message(self) -> Optional[str]:
        for entry in reversed(self._entries):
            if entry.kind == PROGRESS:
                return entry.message
        return None

    def clear(self) -> None:
        self._entries.clear()
        self.cleared.emit()
