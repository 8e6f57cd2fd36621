"""Response body wrapper that fires a callback when the body is finished."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from typing import Any


class OnCompleteReader:
    """Wrap a response body and run ``callback`` on its first terminal event.

    Terminal events are reaching end-of-stream through :meth:`read`,
    :meth:`readinto`, :meth:`read1` or :meth:`stream`, and :meth:`close`. Whichever comes first runs the
    callback; every later event is a no-op. Attributes not defined here
    (``release_conn``, ``isclosed``, ``_original_response``...) resolve on the
    wrapped stream so ``requests`` can keep treating this as ``Response.raw``.
    """

    def __init__(self, raw: Any, callback: Callable[[], None]) -> None:
        self._raw = raw
        self._callback: Callable[[], None] | None = callback
        self._lock = threading.Lock()

    @property
    def wrapped(self) -> Any:
        return self._raw

    def read(self, amt: int | None = None, *args: Any, **kwargs: Any) -> bytes:
        data = self._raw.read(amt, *args, **kwargs)
        if amt is None or (amt > 0 and not data):
            self._complete()
        return data

    def readinto(self, buffer: Any) -> int:
        count = self._raw.readinto(buffer)
        if len(buffer) > 0 and not count:
            self._complete()
        return count

    def read1(self, amt: int | None = None) -> bytes:
        data = self._raw.read1(amt)
        if amt != 0 and not data:
            self._complete()
        return data

    def stream(self, amt: int | None = 2**16, decode_content: bool | None = None) -> Iterator[bytes]:
        if hasattr(self._raw, "stream"):
            yield from self._raw.stream(amt, decode_content=decode_content)
        else:
            while True:
                chunk = self._raw.read(amt)
                if not chunk:
                    break
                yield chunk
        self._complete()

    def close(self) -> None:
        try:
            self._raw.close()
        finally:
            self._complete()

    def _complete(self) -> None:
        with self._lock:
            callback, self._callback = self._callback, None
        if callback is not None:
            callback()

    def __getattr__(self, name: str) -> Any:
        if name == "_raw":
            raise AttributeError(name)
        return getattr(self._raw, name)

    def __iter__(self) -> Iterator[bytes]:
        return self.stream()

    def __repr__(self) -> str:
        return f"OnCompleteReader({self._raw!r})"
