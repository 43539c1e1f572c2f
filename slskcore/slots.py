"""Concurrency limits for downloads and uploads, with per-user upload slots."""

from __future__ import annotations

import threading
import time
from concurrent.futures import CancelledError
from dataclasses import dataclass
from datetime import timedelta
from types import TracebackType
from typing import Callable, Union

Duration = Union[float, int, timedelta]
"""A duration given either as seconds or as a timedelta."""

_CANCEL_POLL_INTERVAL = 0.01


class SlotManagerClosedError(RuntimeError):
    """Raised when acquiring a slot on a closed slot manager."""

    def __init__(self, message: str = "slot manager closed") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class SlotStats:
    """A snapshot of slot usage."""

    downloads_active: int
    downloads_max: int
    uploads_active: int
    uploads_max: int
    user_slots_count: int


class _UserSlot:
    """One upload at a time per user."""

    __slots__ = ("held", "last_used")

    def __init__(self) -> None:
        self.held = False
        self.last_used = time.monotonic()

    def touch(self) -> None:
        self.last_used = time.monotonic()


def _seconds(value: Duration) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class SlotManager:
    """Limits concurrent transfers.

    Downloads share one global limit. Uploads need both a per-user slot
    (one upload per user at a time) and a global upload slot. A limit of 0
    means unlimited. A positive ``cleanup_interval`` starts a background
    thread that drops per-user slots idle for longer than ``idle_threshold``.

    Acquisition blocks until a slot is free. ``timeout`` (seconds) raises
    TimeoutError when it runs out; ``cancel`` (a threading.Event) raises
    concurrent.futures.CancelledError once set; closing the manager raises
    SlotManagerClosedError in every waiter.
    """

    def __init__(
        self,
        max_downloads: int,
        max_uploads: int,
        cleanup_interval: Duration = 0.0,
        idle_threshold: Duration = 0.0,
    ) -> None:
        self._max_downloads = max_downloads
        self._max_uploads = max_uploads
        self._downloads_active = 0
        self._uploads_active = 0
        self._user_slots: dict[str, _UserSlot] = {}
        self._closed = False
        self._cond = threading.Condition()
        self._stop = threading.Event()
        self._cleanup_thread: threading.Thread | None = None

        interval = _seconds(cleanup_interval)
        if interval > 0:
            threshold = _seconds(idle_threshold)
            self._cleanup_thread = threading.Thread(
                target=self._cleanup_loop,
                args=(interval, threshold),
                name="slot-cleanup",
                daemon=True,
            )
            self._cleanup_thread.start()

    # -- downloads -----------------------------------------------------

    def acquire_download_slot(
        self,
        timeout: Duration | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        """Block until a download slot is held."""
        deadline = self._deadline(timeout)
        with self._cond:
            if self._closed:
                raise SlotManagerClosedError()
            if self._max_downloads <= 0:
                self._downloads_active += 1
                return
            self._wait_until(
                lambda: self._downloads_active < self._max_downloads,
                deadline,
                cancel,
            )
            self._downloads_active += 1

    def release_download_slot(self) -> None:
        """Give back a download slot."""
        with self._cond:
            if self._max_downloads <= 0:
                self._downloads_active -= 1
            elif self._downloads_active > 0:
                self._downloads_active -= 1
            self._cond.notify_all()

    # -- uploads -------------------------------------------------------

    def acquire_upload_slot(
        self,
        username: str,
        timeout: Duration | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        """Block until both the user's upload slot and a global upload slot are held."""
        deadline = self._deadline(timeout)
        with self._cond:
            if self._closed:
                raise SlotManagerClosedError()

            self._user_slot(username).touch()
            self._wait_until(
                lambda: not self._user_slot(username).held, deadline, cancel
            )
            slot = self._user_slot(username)
            slot.held = True
            slot.touch()

            try:
                if self._max_uploads <= 0:
                    self._uploads_active += 1
                    return
                self._wait_until(
                    lambda: self._uploads_active < self._max_uploads,
                    deadline,
                    cancel,
                )
                self._uploads_active += 1
            except BaseException:
                self._release_user_slot(username)
                self._cond.notify_all()
                raise

    def release_upload_slot(self, username: str) -> None:
        """Give back the user's upload slot and a global upload slot."""
        with self._cond:
            self._release_user_slot(username)
            if self._max_uploads <= 0:
                self._uploads_active -= 1
            elif self._uploads_active > 0:
                self._uploads_active -= 1
            self._cond.notify_all()

    # -- bookkeeping ---------------------------------------------------

    def stats(self) -> SlotStats:
        """Current slot usage."""
        with self._cond:
            return SlotStats(
                downloads_active=self._downloads_active,
                downloads_max=self._max_downloads,
                uploads_active=self._uploads_active,
                uploads_max=self._max_uploads,
                user_slots_count=len(self._user_slots),
            )

    def close(self) -> None:
        """Shut down, waking every blocked acquisition. Closing twice is harmless."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.notify_all()
        self._stop.set()

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def cleanup_idle_user_slots(self, threshold: Duration) -> None:
        """Drop per-user slots that are free and unused for longer than threshold.

        A threshold of 0 drops every free slot regardless of age.
        """
        limit = _seconds(threshold)
        cutoff = time.monotonic() - limit
        with self._cond:
            stale = [
                name
                for name, slot in self._user_slots.items()
                if not slot.held and not (limit > 0 and slot.last_used > cutoff)
            ]
            for name in stale:
                del self._user_slots[name]

    def __enter__(self) -> SlotManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -- internals -----------------------------------------------------

    @staticmethod
    def _deadline(timeout: Duration | None) -> float | None:
        if timeout is None:
            return None
        return time.monotonic() + _seconds(timeout)

    def _user_slot(self, username: str) -> _UserSlot:
        slot = self._user_slots.get(username)
        if slot is None:
            slot = self._user_slots[username] = _UserSlot()
        return slot

    def _release_user_slot(self, username: str) -> None:
        slot = self._user_slots.get(username)
        if slot is not None:
            slot.held = False
            slot.touch()

    def _wait_until(
        self,
        ready: Callable[[], bool],
        deadline: float | None,
        cancel: threading.Event | None,
    ) -> None:
        """Wait on the condition (lock held) until ready() is true."""
        while True:
            if self._closed:
                raise SlotManagerClosedError()
            if ready():
                return
            if cancel is not None and cancel.is_set():
                raise CancelledError()
            wait_for: float | None = None
            if deadline is not None:
                wait_for = deadline - time.monotonic()
                if wait_for <= 0:
                    raise TimeoutError("timed out waiting for a slot")
            if cancel is not None:
                wait_for = (
                    _CANCEL_POLL_INTERVAL
                    if wait_for is None
                    else min(wait_for, _CANCEL_POLL_INTERVAL)
                )
            self._cond.wait(wait_for)

    def _cleanup_loop(self, interval: float, threshold: float) -> None:
        while not self._stop.wait(interval):
            self.cleanup_idle_user_slots(threshold)