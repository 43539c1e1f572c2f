"""FIFO queue of pending uploads with pluggable position resolution."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

QueueResolver = Callable[[str, str], int]
"""Returns the 1-based queue position for (username, filename), or 0 to start now.

Raising an exception denies the upload.
"""


@dataclass
class QueueEntry:
    """A file waiting to be uploaded."""

    username: str
    filename: str
    token: int
    queued_at: datetime = field(default_factory=datetime.now)


class QueueManager:
    """Tracks queued uploads and reports their positions."""

    def __init__(self) -> None:
        self._resolver: QueueResolver | None = None
        self._queue: list[QueueEntry] = []
        self._lock = threading.Lock()

    def set_resolver(self, resolver: QueueResolver | None) -> None:
        """Install a custom position resolver; None restores FIFO order."""
        with self._lock:
            self._resolver = resolver

    def enqueue_upload(self, username: str, filename: str, token: int) -> int:
        """Append an upload and return its 1-based position."""
        with self._lock:
            self._queue.append(QueueEntry(username, filename, token))
            return len(self._queue)

    def dequeue_upload(self, token: int) -> None:
        """Remove the upload with this token, if queued."""
        with self._lock:
            for entry in self._queue:
                if entry.token == token:
                    self._queue.remove(entry)
                    return

    def get_position(self, username: str, filename: str) -> int:
        """The 1-based position of this file in the queue, or 0 if absent."""
        with self._lock:
            for position, entry in enumerate(self._queue, start=1):
                if entry.username == username and entry.filename == filename:
                    return position
        return 0

    def resolve_position(self, username: str, filename: str) -> int:
        """Position from the custom resolver, or FIFO position without one."""
        with self._lock:
            resolver = self._resolver
        if resolver is not None:
            return resolver(username, filename)
        return self.get_position(username, filename)

    def get_entry(self, token: int) -> QueueEntry | None:
        """The queued entry with this token, or None."""
        with self._lock:
            return next((e for e in self._queue if e.token == token), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)