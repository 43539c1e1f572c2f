import threading
from datetime import datetime

import pytest

from slskcore.queue_manager import QueueManager


def test_enqueue_returns_position():
    qm = QueueManager()
    assert qm.enqueue_upload("user1", "file1.mp3", 100) == 1
    assert qm.enqueue_upload("user2", "file2.mp3", 101) == 2
    assert qm.enqueue_upload("user1", "file3.mp3", 102) == 3


def test_get_position_fifo():
    qm = QueueManager()
    qm.enqueue_upload("user1", "file1.mp3", 100)
    qm.enqueue_upload("user2", "file2.mp3", 101)
    qm.enqueue_upload("user3", "file3.mp3", 102)
    assert qm.get_position("user1", "file1.mp3") == 1
    assert qm.get_position("user2", "file2.mp3") == 2
    assert qm.get_position("user3", "file3.mp3") == 3


def test_get_position_not_found():
    qm = QueueManager()
    assert qm.get_position("unknown", "unknown.mp3") == 0


def test_dequeue_recalculates_positions():
    qm = QueueManager()
    qm.enqueue_upload("user1", "file1.mp3", 100)
    qm.enqueue_upload("user2", "file2.mp3", 101)
    qm.enqueue_upload("user3", "file3.mp3", 102)
    qm.dequeue_upload(100)
    assert qm.get_position("user1", "file1.mp3") == 0
    assert qm.get_position("user2", "file2.mp3") == 1
    assert qm.get_position("user3", "file3.mp3") == 2


def test_dequeue_middle():
    qm = QueueManager()
    qm.enqueue_upload("user1", "file1.mp3", 100)
    qm.enqueue_upload("user2", "file2.mp3", 101)
    qm.enqueue_upload("user3", "file3.mp3", 102)
    qm.dequeue_upload(101)
    assert qm.get_position("user1", "file1.mp3") == 1
    assert qm.get_position("user2", "file2.mp3") == 0
    assert qm.get_position("user3", "file3.mp3") == 2


def test_dequeue_non_existent():
    qm = QueueManager()
    qm.enqueue_upload("user1", "file1.mp3", 100)
    qm.dequeue_upload(999)
    assert qm.get_position("user1", "file1.mp3") == 1


def test_custom_resolver():
    qm = QueueManager()
    qm.set_resolver(lambda username, _filename: 0 if username == "vip" else 999)
    qm.enqueue_upload("regular", "file1.mp3", 100)
    qm.enqueue_upload("vip", "file2.mp3", 101)
    assert qm.resolve_position("vip", "file2.mp3") == 0
    assert qm.resolve_position("regular", "file1.mp3") == 999


def test_resolver_error():
    qm = QueueManager()

    class NotShared(Exception):
        pass

    def resolver(_username, _filename):
        raise NotShared("file not shared")

    qm.set_resolver(resolver)
    with pytest.raises(NotShared, match="file not shared"):
        qm.resolve_position("user", "file.mp3")


def test_resolver_reset_to_fifo():
    qm = QueueManager()
    qm.enqueue_upload("user1", "file1.mp3", 100)
    qm.set_resolver(lambda _u, _f: 42)
    assert qm.resolve_position("user1", "file1.mp3") == 42
    qm.set_resolver(None)
    assert qm.resolve_position("user1", "file1.mp3") == 1


def test_resolve_position_default_fifo():
    qm = QueueManager()
    qm.enqueue_upload("user1", "file1.mp3", 100)
    qm.enqueue_upload("user2", "file2.mp3", 101)
    assert qm.resolve_position("user2", "file2.mp3") == 2


def test_resolve_position_not_in_queue():
    qm = QueueManager()
    assert qm.resolve_position("unknown", "unknown.mp3") == 0


def test_concurrent_access():
    qm = QueueManager()
    workers, ops = 10, 100

    def enqueue(worker):
        for j in range(ops):
            qm.enqueue_upload("user", "file.mp3", worker * ops + j)

    def dequeue(worker):
        for j in range(ops):
            qm.dequeue_upload(worker * ops + j)

    for target in (enqueue, dequeue):
        threads = [threading.Thread(target=target, args=(i,)) for i in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        if target is enqueue:
            assert len(qm) == workers * ops

    assert qm.get_position("user", "file.mp3") == 0
    assert len(qm) == 0


def test_queued_at_tracking():
    qm = QueueManager()
    before = datetime.now()
    qm.enqueue_upload("user", "file.mp3", 100)
    after = datetime.now()
    entry = qm.get_entry(100)
    assert entry is not None
    assert before <= entry.queued_at <= after


def test_get_entry():
    qm = QueueManager()
    qm.enqueue_upload("testuser", "testfile.mp3", 123)
    entry = qm.get_entry(123)
    assert entry is not None
    assert entry.username == "testuser"
    assert entry.filename == "testfile.mp3"
    assert entry.token == 123


def test_get_entry_not_found():
    qm = QueueManager()
    assert qm.get_entry(999) is None


def test_len():
    qm = QueueManager()
    assert len(qm) == 0
    qm.enqueue_upload("user1", "file1.mp3", 100)
    assert len(qm) == 1
    qm.enqueue_upload("user2", "file2.mp3", 101)
    assert len(qm) == 2
    qm.dequeue_upload(100)
    assert len(qm) == 1