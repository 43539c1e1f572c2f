"""Dispatch of incoming messages to handlers registered by message code."""

from __future__ import annotations

import itertools
import threading
from collections import defaultdict
from collections.abc import Callable

Handler = Callable[[int, bytes], None]
"""Called with the message code and the payload (including the code prefix)."""

_handler_ids = itertools.count(1)
_id_lock = threading.Lock()


def _next_handler_id() -> int:
    with _id_lock:
        return next(_handler_ids)


class MessageRouter:
    """Routes messages to every handler registered for their code."""

    def __init__(self) -> None:
        self._handlers: defaultdict[int, list[tuple[int, Handler]]] = defaultdict(list)
        self._lock = threading.Lock()

    def register(self, code: int, handler: Handler) -> int:
        """Add a handler for a code and return an id for removing it later."""
        handler_id = _next_handler_id()
        with self._lock:
            self._handlers[code].append((handler_id, handler))
        return handler_id

    def unregister(self, code: int, handler_id: int) -> bool:
        """Remove one handler; True if it was registered."""
        with self._lock:
            entries = self._handlers.get(code)
            if not entries:
                return False
            for entry in entries:
                if entry[0] == handler_id:
                    entries.remove(entry)
                    return True
        return False

    def unregister_all(self, code: int) -> None:
        """Remove every handler for a code."""
        with self._lock:
            self._handlers.pop(code, None)

    def dispatch(self, code: int, payload: bytes | None) -> None:
        """Call every handler for the code, in registration order."""
        with self._lock:
            entries = list(self._handlers.get(code, ()))
        for _, handler in entries:
            handler(code, payload)

    def has_handler(self, code: int) -> bool:
        """True if at least one handler is registered for the code."""
        with self._lock:
            return bool(self._handlers.get(code))