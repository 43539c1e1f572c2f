"""Exceptions raised by transfer handling."""

from __future__ import annotations

from .transfer_state import TransferDirection


class TransferError(Exception):
    """Base class for transfer errors."""


class DuplicateTransferError(TransferError):
    """A transfer for the same user, file and direction already exists."""

    def __init__(self, direction: TransferDirection, username: str, filename: str) -> None:
        self.direction = direction
        self.username = username
        self.filename = filename
        super().__init__(str(self))

    def __str__(self) -> str:
        kind = "upload" if self.direction == TransferDirection.UPLOAD else "download"
        return f"duplicate {kind}: {self.username}/{self.filename}"


class TransferNotFoundError(TransferError, LookupError):
    """No transfer is registered under the given token."""

    def __init__(self, token: int) -> None:
        self.token = token
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"transfer not found: token {self.token}"


class TransferRejectedError(TransferError):
    """The peer rejected the transfer request."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"transfer rejected: {self.reason}"


class TransferSizeMismatchError(TransferError):
    """Local and remote file sizes disagree."""

    def __init__(self, local_size: int, remote_size: int) -> None:
        self.local_size = local_size
        self.remote_size = remote_size
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"size mismatch: local {self.local_size}, remote {self.remote_size}"


class TransferFailedError(TransferError):
    """The peer accepted the transfer but reported that it failed."""

    def __init__(self, username: str, filename: str) -> None:
        self.username = username
        self.filename = filename
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"transfer failed: peer {self.username} reported failure for {self.filename}"


class TransferConnectionError(TransferError):
    """A connection failure in the middle of a transfer.

    The underlying exception is also available as ``__cause__``.
    """

    def __init__(
        self,
        operation: str,
        bytes_so_far: int,
        total_bytes: int,
        underlying: BaseException | None = None,
    ) -> None:
        self.operation = operation
        self.bytes_so_far = bytes_so_far
        self.total_bytes = total_bytes
        self.underlying = underlying
        super().__init__(str(self))
        self.__cause__ = underlying

    def __str__(self) -> str:
        return (
            f"connection {self.operation} error at byte "
            f"{self.bytes_so_far}/{self.total_bytes}: {self.underlying}"
        )