import pytest

from slskcore.transfer_errors import (
    DuplicateTransferError,
    TransferConnectionError,
    TransferError,
    TransferFailedError,
    TransferNotFoundError,
    TransferRejectedError,
    TransferSizeMismatchError,
)
from slskcore.transfer_state import TransferDirection


@pytest.mark.parametrize(
    "direction, username, filename, want",
    [
        (TransferDirection.DOWNLOAD, "user1", "file.mp3", "download"),
        (TransferDirection.UPLOAD, "user2", "doc.pdf", "upload"),
    ],
)
def test_duplicate_transfer_error(direction, username, filename, want):
    msg = str(DuplicateTransferError(direction, username, filename))
    assert want in msg
    assert username in msg


def test_duplicate_transfer_error_message():
    err = DuplicateTransferError(TransferDirection.DOWNLOAD, "user1", "file.mp3")
    assert str(err) == "duplicate download: user1/file.mp3"


def test_transfer_not_found_error():
    err = TransferNotFoundError(12345)
    assert "12345" in str(err)
    assert str(err) == "transfer not found: token 12345"
    assert isinstance(err, LookupError)


def test_transfer_rejected_error():
    err = TransferRejectedError("access denied")
    assert "access denied" in str(err)
    assert str(err) == "transfer rejected: access denied"


def test_transfer_size_mismatch_error():
    msg = str(TransferSizeMismatchError(1000, 2000))
    assert "1000" in msg and "2000" in msg
    assert msg == "size mismatch: local 1000, remote 2000"


def test_transfer_failed_error():
    msg = str(TransferFailedError("testuser", "@@music/file.mp3"))
    assert "testuser" in msg
    assert "file.mp3" in msg


def test_connection_error():
    underlying = TransferRejectedError("timeout")
    err = TransferConnectionError("read", 5000, 10000, underlying)
    msg = str(err)
    assert "read" in msg
    assert "5000" in msg
    assert "10000" in msg
    assert err.__cause__ is underlying
    assert err.underlying is underlying


def test_errors_share_base_class():
    err = TransferFailedError("user", "file")
    assert str(err) == "transfer failed: peer user reported failure for file"
    assert err.username == "user"
    with pytest.raises(TransferError, match="peer user reported failure"):
        raise err