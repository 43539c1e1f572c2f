"""Transfer directions and bit-flag transfer states."""

from __future__ import annotations

import enum


class TransferDirection(enum.IntEnum):
    """Direction of a file transfer as seen from the local client."""

    DOWNLOAD = 0
    UPLOAD = 1

    def __str__(self) -> str:
        return self.name.lower()


class TransferState(enum.IntFlag):
    """State of a transfer.

    Values are bit flags so that compound states such as
    ``QUEUED | REMOTELY`` or ``COMPLETED | SUCCEEDED`` can be expressed.
    """

    NONE = 0

    # Primary lifecycle states
    REQUESTED = 1 << 0
    QUEUED = 1 << 1
    INITIALIZING = 1 << 2
    IN_PROGRESS = 1 << 3
    COMPLETED = 1 << 4

    # Completion reasons, combined with COMPLETED
    SUCCEEDED = 1 << 5
    CANCELLED = 1 << 6
    TIMED_OUT = 1 << 7
    ERRORED = 1 << 8
    REJECTED = 1 << 9
    ABORTED = 1 << 10

    # Queue location modifiers, combined with QUEUED
    LOCALLY = 1 << 11
    REMOTELY = 1 << 12

    def is_completed(self) -> bool:
        """True once the transfer has reached a terminal state."""
        return bool(self & TransferState.COMPLETED)

    def is_queued(self) -> bool:
        """True while the transfer waits in a queue."""
        return bool(self & TransferState.QUEUED)

    def is_active(self) -> bool:
        """True while the transfer is pending or running; never once completed."""
        if self.is_completed():
            return False
        return bool(self & _ACTIVE_MASK)

    def is_local(self) -> bool:
        """True if the LOCALLY flag is set."""
        return bool(self & TransferState.LOCALLY)

    def is_remote(self) -> bool:
        """True if the REMOTELY flag is set."""
        return bool(self & TransferState.REMOTELY)

    def __str__(self) -> str:
        if self == TransferState.NONE:
            return "None"
        return ", ".join(label for flag, label in _LABELS if self & flag)

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


_ACTIVE_MASK = (
    TransferState.REQUESTED
    | TransferState.QUEUED
    | TransferState.INITIALIZING
    | TransferState.IN_PROGRESS
)

_LABELS = (
    (TransferState.REQUESTED, "Requested"),
    (TransferState.QUEUED, "Queued"),
    (TransferState.INITIALIZING, "Initializing"),
    (TransferState.IN_PROGRESS, "InProgress"),
    (TransferState.COMPLETED, "Completed"),
    (TransferState.SUCCEEDED, "Succeeded"),
    (TransferState.CANCELLED, "Cancelled"),
    (TransferState.TIMED_OUT, "TimedOut"),
    (TransferState.ERRORED, "Errored"),
    (TransferState.REJECTED, "Rejected"),
    (TransferState.ABORTED, "Aborted"),
    (TransferState.LOCALLY, "Locally"),
    (TransferState.REMOTELY, "Remotely"),
)