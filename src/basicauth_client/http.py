"""HTTP transport used underneath the authenticating adapter."""

from __future__ import annotations

import contextlib
import logging
import socket
import threading
import weakref
from typing import Any

from requests import PreparedRequest, Response
from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool

from .exceptions import RequestCancelledError

logger = logging.getLogger(__name__)

# The request state of the ``send`` running on this thread, read by the pools
# when they hand out a connection.
_sending = threading.local()


class _Inflight:
    """Cancellation state of one request, bound to the connection serving it."""

    def __init__(self, request: PreparedRequest) -> None:
        self.request = request
        self.cancelled = False
        self._conn: Any = None
        self._lock = threading.Lock()

    def attach(self, conn: Any) -> None:
        with self._lock:
            if self.cancelled:
                raise RequestCancelledError("Request was cancelled", request=self.request)
            self._conn = conn
            conn._inflight = self

    def detach(self, conn: Any) -> None:
        with self._lock:
            if self._conn is conn:
                self._conn = None
            conn._inflight = None

    def check_connected(self, conn: Any) -> None:
        with self._lock:
            cancelled = self.cancelled
        if cancelled:
            conn.close()
            raise RequestCancelledError("Request was cancelled", request=self.request)

    def cancel(self) -> None:
        # Shutting the socket down wakes a thread blocked on send or recv.
        with self._lock:
            self.cancelled = True
            sock = getattr(self._conn, "sock", None)
            if sock is not None:
                with contextlib.suppress(OSError):
                    sock.shutdown(socket.SHUT_RDWR)


class _CancellableConnectionMixin:
    _inflight: _Inflight | None = None

    def connect(self) -> None:
        super().connect()
        if self._inflight is not None:
            self._inflight.check_connected(self)


class _CancellablePoolMixin:
    def _get_conn(self, timeout: float | None = None) -> Any:
        conn = super()._get_conn(timeout=timeout)
        inflight = getattr(_sending, "inflight", None)
        if inflight is not None:
            try:
                inflight.attach(conn)
            except RequestCancelledError:
                self._put_conn(conn)
                raise
        return conn

    def _put_conn(self, conn: Any) -> None:
        inflight = getattr(conn, "_inflight", None)
        if inflight is not None:
            inflight.detach(conn)
        super()._put_conn(conn)


class CancellableHTTPConnection(_CancellableConnectionMixin, HTTPConnection):
    pass


class CancellableHTTPSConnection(_CancellableConnectionMixin, HTTPSConnection):
    pass


class CancellableHTTPConnectionPool(_CancellablePoolMixin, HTTPConnectionPool):
    ConnectionCls = CancellableHTTPConnection


class CancellableHTTPSConnectionPool(_CancellablePoolMixin, HTTPSConnectionPool):
    ConnectionCls = CancellableHTTPSConnection


_POOL_CLASSES = {"http": CancellableHTTPConnectionPool, "https": CancellableHTTPSConnectionPool}


class CancellableHTTPAdapter(HTTPAdapter):
    """`HTTPAdapter` whose requests can be aborted at any stage.

    Each request is bound to the pooled connection serving it from checkout
    until the connection goes back to the pool, i.e. until the response body
    is finished. :meth:`cancel` shuts that connection's socket down, which
    interrupts sending, waiting for headers and reading the body alike. A
    request still connecting fails as soon as its socket is up, and one
    cancelled before it reaches a connection fails with
    :class:`RequestCancelledError` without being dispatched. Requests sent
    through a SOCKS proxy are not covered.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._inflight_lock = threading.Lock()
        self._inflight: weakref.WeakValueDictionary[PreparedRequest, _Inflight] = (
            weakref.WeakValueDictionary()
        )
        self._started: weakref.WeakSet[PreparedRequest] = weakref.WeakSet()
        self._cancelled_early: weakref.WeakSet[PreparedRequest] = weakref.WeakSet()
        super().__init__(*args, **kwargs)

    def init_poolmanager(self, *args: Any, **kwargs: Any) -> None:
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = dict(_POOL_CLASSES)

    def proxy_manager_for(self, proxy: str, **proxy_kwargs: Any) -> Any:
        manager = super().proxy_manager_for(proxy, **proxy_kwargs)
        if not proxy.lower().startswith("socks"):
            manager.pool_classes_by_scheme = dict(_POOL_CLASSES)
        return manager

    def send(self, request: PreparedRequest, **kwargs: Any) -> Response:
        with self._inflight_lock:
            if request in self._cancelled_early:
                self._cancelled_early.discard(request)
                raise RequestCancelledError("Request was cancelled", request=request)
            inflight = _Inflight(request)
            self._inflight[request] = inflight
            self._started.add(request)

        previous = getattr(_sending, "inflight", None)
        _sending.inflight = inflight
        try:
            return super().send(request, **kwargs)
        except RequestCancelledError:
            raise
        except Exception as exc:
            if inflight.cancelled:
                raise RequestCancelledError("Request was cancelled", request=request) from exc
            raise
        finally:
            _sending.inflight = previous

    def cancel(self, request: PreparedRequest) -> None:
        """Abort ``request`` wherever it is; finished requests are ignored."""
        with self._inflight_lock:
            inflight = self._inflight.get(request)
            if inflight is None and request not in self._started:
                self._cancelled_early.add(request)
        if inflight is None:
            return
        logger.debug("Closing connection for %s %s", request.method, request.url)
        inflight.cancel()

    def __setstate__(self, state: dict[str, Any]) -> None:
        self._inflight_lock = threading.Lock()
        self._inflight = weakref.WeakValueDictionary()
        self._started = weakref.WeakSet()
        self._cancelled_early = weakref.WeakSet()
        super().__setstate__(state)
