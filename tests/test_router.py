import threading

from slskcore.router import MessageRouter


def test_register():
    r = MessageRouter()
    assert not r.has_handler(1)
    r.register(1, lambda code, payload: None)
    assert r.has_handler(1)
    assert not r.has_handler(2)


def test_register_returns_distinct_ids():
    r = MessageRouter()
    first = r.register(1, lambda code, payload: None)
    second = r.register(1, lambda code, payload: None)
    assert first != second


def test_dispatch():
    r = MessageRouter()
    received = []
    r.register(42, lambda code, payload: received.append((code, payload)))
    r.dispatch(42, b"\x01\x02\x03")
    assert received == [(42, b"\x01\x02\x03")]


def test_dispatch_no_handler():
    r = MessageRouter()
    calls = []
    r.register(1, lambda code, payload: calls.append(code))
    r.dispatch(99, b"\x01")
    assert calls == []
    assert not r.has_handler(99)


def test_multiple_handlers():
    r = MessageRouter()
    calls = []
    r.register(1, lambda code, payload: calls.append(1))
    r.register(1, lambda code, payload: calls.append(2))
    r.register(1, lambda code, payload: calls.append(3))
    r.dispatch(1, None)
    assert calls == [1, 2, 3]


def test_unregister():
    r = MessageRouter()
    calls = []
    handler_id = r.register(1, lambda code, payload: calls.append(code))
    assert r.unregister(1, handler_id) is True
    r.dispatch(1, None)
    assert calls == []
    assert not r.has_handler(1)


def test_unregister_unknown_returns_false():
    r = MessageRouter()
    handler_id = r.register(1, lambda code, payload: None)
    assert r.unregister(2, handler_id) is False
    assert r.unregister(1, handler_id + 1000) is False
    assert r.has_handler(1)


def test_unregister_specific():
    r = MessageRouter()
    calls = []
    id1 = r.register(1, lambda code, payload: calls.append(1))
    r.register(1, lambda code, payload: calls.append(2))
    r.unregister(1, id1)
    r.dispatch(1, None)
    assert calls == [2]


def test_unregister_all():
    r = MessageRouter()
    calls = []
    r.register(1, lambda code, payload: calls.append(1))
    r.register(1, lambda code, payload: calls.append(2))
    r.unregister_all(1)
    r.dispatch(1, None)
    assert calls == []
    assert not r.has_handler(1)


def test_concurrent_dispatch():
    r = MessageRouter()
    lock = threading.Lock()
    received = []

    def handler(code, payload):
        with lock:
            received.append((code, payload))

    handler_id = r.register(1, handler)
    threads = [threading.Thread(target=r.dispatch, args=(1, b"x")) for _ in range(100)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert received == [(1, b"x")] * 100
    assert r.has_handler(1) is True
    assert r.unregister(1, handler_id) is True