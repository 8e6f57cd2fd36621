"""Thread-safe bookkeeping of original -> dispatched requests."""

from __future__ import annotations

import threading

from requests import PreparedRequest


class CorrelationTable:
    """Map each in-flight original request to the decorated copy sent for it.

    Keys are compared by identity. Every operation holds one lock for a single
    dict operation, so callers never wait on network I/O here.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[PreparedRequest, PreparedRequest] = {}

    def put(self, original: PreparedRequest, decorated: PreparedRequest) -> None:
        """Record ``decorated`` for ``original``, replacing any previous entry."""
        with self._lock:
            self._entries[original] = decorated

    def remove(self, original: PreparedRequest) -> None:
        """Forget ``original``; absent entries are ignored."""
        with self._lock:
            self._entries.pop(original, None)

    def pop(self, original: PreparedRequest) -> PreparedRequest | None:
        """Atomically return and forget the decorated request for ``original``."""
        with self._lock:
            return self._entries.pop(original, None)

    def get(self, original: PreparedRequest) -> PreparedRequest | None:
        with self._lock:
            return self._entries.get(original)

    def __contains__(self, original: object) -> bool:
        with self._lock:
            return original in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
