"""A single file transfer with its state, progress and speed tracking."""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from .transfer_state import TransferDirection, TransferState

PROGRESS_UPDATE_INTERVAL = 1.0
"""Minimum number of seconds between moving-average speed updates."""

SPEED_ALPHA = 0.2
"""Smoothing factor of the exponential moving average (2 / (N + 1), N = 9)."""

PROGRESS_BUFFER = 100
"""Number of progress updates kept before new ones are dropped."""


@dataclass(frozen=True)
class TransferReadyInfo:
    """Sent by a peer when it is ready to upload a file we asked for."""

    remote_token: int
    file_size: int


@dataclass(frozen=True)
class TransferProgress:
    """A snapshot of a transfer's progress."""

    state: TransferState
    bytes_transferred: int
    file_size: int
    average_speed: float
    queue_position: int
    error: BaseException | None = None


class Transfer:
    """An active download or upload.

    Progress snapshots are delivered through the ``progress`` queue; after
    :meth:`close` a final ``None`` marks the end of the stream.
    """

    def __init__(
        self,
        direction: TransferDirection,
        username: str,
        filename: str,
        token: int,
    ) -> None:
        self.direction = TransferDirection(direction)
        self.username = username
        self.filename = filename
        self.token = token
        self.remote_token = 0

        self.size = 0
        self.start_offset = 0
        self.transferred = 0

        self.start_time: datetime | None = None
        self.end_time: datetime | None = None
        self.error: BaseException | None = None

        self.shared_file: Any = None

        self._state = TransferState.NONE
        self._prev_state = TransferState.NONE
        self._queue_position = 0

        self._avg_speed = 0.0
        self._last_progress_time: float | None = None
        self._last_progress_bytes = 0
        self._speed_initialized = False

        self._progress: queue.Queue[TransferProgress | None] = queue.Queue()
        self._closed = False
        self._transfer_ready: queue.Queue[TransferReadyInfo] | None = None
        self._transfer_conn: queue.Queue[Any] | None = None

        self._lock = threading.RLock()

    @property
    def state(self) -> TransferState:
        with self._lock:
            return self._state

    @property
    def previous_state(self) -> TransferState:
        with self._lock:
            return self._prev_state

    @property
    def average_speed(self) -> float:
        """Current average speed in bytes per second."""
        with self._lock:
            return self._avg_speed

    @average_speed.setter
    def average_speed(self, speed: float) -> None:
        with self._lock:
            self._avg_speed = speed

    @property
    def queue_position(self) -> int:
        """Position in the remote queue, 0 when not queued."""
        with self._lock:
            return self._queue_position

    @property
    def progress(self) -> queue.Queue[TransferProgress | None]:
        return self._progress

    @property
    def transfer_ready(self) -> queue.Queue[TransferReadyInfo] | None:
        """Queue of upload-ready signals; None until download channels exist."""
        with self._lock:
            return self._transfer_ready

    @property
    def transfer_conn(self) -> queue.Queue[Any] | None:
        """Queue of delivered transfer connections; None until download channels exist."""
        with self._lock:
            return self._transfer_conn

    def set_state(self, state: TransferState) -> None:
        """Move to a new state, stamping start and end times as needed."""
        state = TransferState(state)
        with self._lock:
            self._prev_state = self._state
            self._state = state
            if state & TransferState.IN_PROGRESS and self.start_time is None:
                self.start_time = datetime.now()
            if state & TransferState.COMPLETED and self.end_time is None:
                self.end_time = datetime.now()
                self._calculate_final_speed()

    def _calculate_final_speed(self) -> None:
        if self.start_time is None or self.end_time is None:
            return
        duration = (self.end_time - self.start_time).total_seconds()
        if duration > 0:
            self._avg_speed = (self.transferred - self.start_offset) / duration

    def percent_complete(self) -> float:
        """Progress as a percentage from 0 to 100."""
        with self._lock:
            if self.size == 0:
                return 0.0
            return self.transferred / self.size * 100

    def bytes_remaining(self) -> int:
        with self._lock:
            return self.size - self.transferred

    def remaining_time(self) -> timedelta:
        """Estimated time left at the current speed; zero when unknown."""
        with self._lock:
            if self._avg_speed <= 0:
                return timedelta(0)
            remaining = self.size - self.transferred
            if remaining <= 0:
                return timedelta(0)
            return timedelta(seconds=remaining / self._avg_speed)

    def update_progress(self, bytes_transferred: int) -> None:
        """Record bytes transferred and refresh the moving-average speed."""
        with self._lock:
            self.transferred = bytes_transferred
            now = time.monotonic()

            if self._state.is_completed():
                return

            last = self._last_progress_time
            if last is not None and now - last < PROGRESS_UPDATE_INTERVAL:
                return

            if last is not None:
                elapsed = now - last
                if elapsed > 0:
                    current = (bytes_transferred - self._last_progress_bytes) / elapsed
                    if not self._speed_initialized:
                        self._avg_speed = current
                        self._speed_initialized = True
                    else:
                        self._avg_speed = (
                            SPEED_ALPHA * current + (1 - SPEED_ALPHA) * self._avg_speed
                        )

            self._last_progress_time = now
            self._last_progress_bytes = bytes_transferred

    def set_queue_position(self, position: int) -> None:
        """Update the queue position and emit a progress snapshot."""
        with self._lock:
            self._queue_position = position
        self.emit_progress()

    def file_key(self) -> str:
        """Key identifying this transfer by direction, user and file."""
        return f"{int(self.direction)}:{self.username}:{self.filename}"

    def remote_token_key(self) -> str:
        """Key identifying this transfer by user and remote token."""
        return f"{self.username}:{self.remote_token}"

    def emit_progress(self) -> None:
        """Queue a progress snapshot; dropped if the buffer is full or closed."""
        with self._lock:
            if self._closed or self._progress.qsize() >= PROGRESS_BUFFER:
                return
            self._progress.put_nowait(
                TransferProgress(
                    state=self._state,
                    bytes_transferred=self.transferred,
                    file_size=self.size,
                    average_speed=self._avg_speed,
                    queue_position=self._queue_position,
                    error=self.error,
                )
            )

    def close(self) -> None:
        """End the progress stream; later updates are discarded."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._progress.put_nowait(None)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def init_download_channels(self) -> None:
        """Create the single-slot queues used to coordinate a download."""
        with self._lock:
            self._transfer_ready = queue.Queue(maxsize=1)
            self._transfer_conn = queue.Queue(maxsize=1)