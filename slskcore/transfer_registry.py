"""Registry of active transfers, indexed by token, remote token and file."""

from __future__ import annotations

import threading

from .transfer import Transfer
from .transfer_errors import DuplicateTransferError, TransferNotFoundError
from .transfer_state import TransferDirection, TransferState


def file_key(direction: TransferDirection, username: str, filename: str) -> str:
    """Key identifying a transfer by direction, user and file."""
    return f"{int(direction)}:{username}:{filename}"


def _remote_key(username: str, remote_token: int) -> str:
    return f"{username}:{remote_token}"


class TransferRegistry:
    """Thread-safe store of active transfers.

    Transfers can be looked up by local token, by user and remote token,
    and by direction, user and file name.
    """

    def __init__(self) -> None:
        self._by_token: dict[int, Transfer] = {}
        self._by_remote_token: dict[str, Transfer] = {}
        self._by_file_key: dict[str, Transfer] = {}
        self._lock = threading.RLock()

    def register_download(self, username: str, filename: str, token: int) -> Transfer:
        """Register a new download.

        Raises DuplicateTransferError if the same file is already being
        downloaded from that user, or if the token is already in use.
        """
        return self._register(TransferDirection.DOWNLOAD, username, filename, token, 0)

    def register_upload(
        self, username: str, filename: str, token: int, size: int
    ) -> Transfer:
        """Register a new upload of known size.

        Raises DuplicateTransferError if the same file is already being
        uploaded to that user, or if the token is already in use.
        """
        return self._register(TransferDirection.UPLOAD, username, filename, token, size)

    def _register(
        self,
        direction: TransferDirection,
        username: str,
        filename: str,
        token: int,
        size: int,
    ) -> Transfer:
        with self._lock:
            key = file_key(direction, username, filename)
            if key in self._by_file_key or token in self._by_token:
                raise DuplicateTransferError(direction, username, filename)
            transfer = Transfer(direction, username, filename, token)
            transfer.size = size
            self._by_file_key[key] = transfer
            self._by_token[token] = transfer
            return transfer

    def get_by_token(self, token: int) -> Transfer | None:
        """The transfer with this local token, or None."""
        with self._lock:
            return self._by_token.get(token)

    def get_by_remote_token(self, username: str, remote_token: int) -> Transfer | None:
        """The transfer with this user and remote token, or None."""
        with self._lock:
            return self._by_remote_token.get(_remote_key(username, remote_token))

    def get_by_file(
        self, username: str, filename: str, direction: TransferDirection
    ) -> Transfer | None:
        """The transfer for this user, file and direction, or None."""
        with self._lock:
            return self._by_file_key.get(file_key(direction, username, filename))

    def _require(self, token: int) -> Transfer:
        transfer = self.get_by_token(token)
        if transfer is None:
            raise TransferNotFoundError(token)
        return transfer

    def set_remote_token(self, token: int, remote_token: int) -> None:
        """Record the peer's token for a transfer and index it."""
        with self._lock:
            transfer = self._require(token)
            transfer.remote_token = remote_token
            self._by_remote_token[_remote_key(transfer.username, remote_token)] = transfer

    def set_state(self, token: int, state: TransferState) -> None:
        """Change the state of a transfer."""
        self._require(token).set_state(state)

    def update_progress(self, token: int, bytes_transferred: int) -> None:
        """Record the number of bytes transferred so far."""
        self._require(token).update_progress(bytes_transferred)

    def set_size(self, token: int, size: int) -> None:
        """Set the file size of a transfer."""
        self._require(token).size = size

    def complete(
        self, token: int, state: TransferState, error: BaseException | None = None
    ) -> None:
        """Mark a transfer finished with the given state and optional error."""
        transfer = self._require(token)
        transfer.error = error
        transfer.set_state(state)

    def remove(self, token: int) -> None:
        """Drop a transfer from every index and close its progress stream."""
        with self._lock:
            transfer = self._by_token.pop(token, None)
            if transfer is None:
                return
            self._by_file_key.pop(transfer.file_key(), None)
            if transfer.remote_token != 0:
                self._by_remote_token.pop(
                    _remote_key(transfer.username, transfer.remote_token), None
                )
        transfer.close()

    def all(self) -> list[Transfer]:
        """Every active transfer."""
        with self._lock:
            return list(self._by_token.values())

    def downloads(self) -> list[Transfer]:
        """Every active download."""
        return [t for t in self.all() if t.direction == TransferDirection.DOWNLOAD]

    def uploads(self) -> list[Transfer]:
        """Every active upload."""
        return [t for t in self.all() if t.direction == TransferDirection.UPLOAD]