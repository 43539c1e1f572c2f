"""Client configuration and upload rejection errors."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

UploadValidator = Callable[[str, str], None]
"""Checks an upload request for (username, filename).

Returning accepts the request; raising rejects it, and the exception's
message is sent to the peer.
"""

DEFAULT_SERVER_ADDRESS = "vps.slsknet.org:2271"
DEFAULT_CONNECT_TIMEOUT = timedelta(seconds=10)
DEFAULT_MESSAGE_TIMEOUT = timedelta(seconds=5)
DEFAULT_MAX_CONCURRENT_DOWNLOADS = 10
DEFAULT_MAX_CONCURRENT_UPLOADS = 10
DEFAULT_SLOT_CLEANUP_INTERVAL = timedelta(minutes=15)
DEFAULT_SLOT_IDLE_THRESHOLD = timedelta(minutes=15)


class UploadRejectedError(Exception):
    """An upload request was refused; the message is sent to the peer."""


class FileNotSharedError(UploadRejectedError):
    """The requested file is not shared."""

    def __init__(self, message: str = "file not shared") -> None:
        super().__init__(message)


class QueueFullError(UploadRejectedError):
    """The upload queue has no room."""

    def __init__(self, message: str = "queue is full") -> None:
        super().__init__(message)


class UserBlockedError(UploadRejectedError):
    """The requesting user is blocked."""

    def __init__(self, message: str = "user is blocked") -> None:
        super().__init__(message)


@dataclass
class Options:
    """Settings for the client.

    ``listen_port`` is the port for incoming peer connections (1024-65535),
    or 0 to accept none. Concurrency limits of 0 mean unlimited; a
    ``slot_cleanup_interval`` of zero turns automatic slot cleanup off.
    Without a ``file_sharer`` nothing is shared; without an
    ``upload_validator`` requests are accepted if the file is shared.
    """

    listen_port: int = 0
    server_address: str = DEFAULT_SERVER_ADDRESS
    connect_timeout: timedelta = DEFAULT_CONNECT_TIMEOUT
    message_timeout: timedelta = DEFAULT_MESSAGE_TIMEOUT
    max_concurrent_downloads: int = DEFAULT_MAX_CONCURRENT_DOWNLOADS
    max_concurrent_uploads: int = DEFAULT_MAX_CONCURRENT_UPLOADS
    slot_cleanup_interval: timedelta = DEFAULT_SLOT_CLEANUP_INTERVAL
    slot_idle_threshold: timedelta = DEFAULT_SLOT_IDLE_THRESHOLD
    file_sharer: Optional[Any] = None
    upload_validator: Optional[UploadValidator] = None


def default_options() -> Options:
    """A fresh Options object with the default settings."""
    return Options()