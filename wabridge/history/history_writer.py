"""
History sync persistence.

Each history sync chunk is written to its own JSON file, numbered by a
process-lifetime sequence so concurrent chunks never share a file name.
"""

import json
import os
import threading
from pathlib import Path

from wabridge.core.logging.logger import get_logger
from wabridge.events.bridge_events import HistorySyncEvent

HISTORY_FILE_MODE = 0o600


class HistorySequence:
    """Thread-safe counter handing out 1, 2, 3, ..."""

    def __init__(self, start: int = 1):
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value


class HistorySyncWriter:
    """Writes history sync chunks under the storage root."""

    def __init__(self, storage_root: str | Path, started_at: int, sequence: HistorySequence):
        """
        Args:
            storage_root: Directory the history files are written into
            started_at: Process start time in unix seconds, part of every file name
            sequence: Shared counter numbering the chunks
        """
        self.storage_root = Path(storage_root)
        self.started_at = started_at
        self.sequence = sequence
        self.logger = get_logger(__name__)

    def build_path(self, account_id: str, seq: int, sync_type: str) -> Path:
        return self.storage_root / f"history-{self.started_at}-{account_id}-{seq}-{sync_type}.json"

    def write(self, account_id: str, event: HistorySyncEvent) -> Path:
        """
        Persist one chunk as indented JSON.

        The sequence number is taken before any I/O, so a failed write still
        consumes its number.

        Returns:
            Path of the written file

        Raises:
            OSError: If the file cannot be created or written
            TypeError: If the chunk data is not JSON serializable
        """
        seq = self.sequence.next()
        path = self.build_path(account_id, seq, event.sync_type)
        body = json.dumps(event.data, indent=2)

        self.storage_root.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, HISTORY_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(body)

        self.logger.info(f"History sync {event.sync_type} #{seq} written to {path}")
        return path
