"""Transport adapter that adds HTTP Basic auth to every request it sends."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from requests import PreparedRequest, Response
from requests.adapters import BaseAdapter

from .auth.base import AuthSource
from .correlation import CorrelationTable
from .exceptions import ConfigurationError
from .http import CancellableHTTPAdapter
from .reader import OnCompleteReader

logger = logging.getLogger(__name__)

Canceler = Callable[[PreparedRequest], None]


class BasicAuthAdapter(BaseAdapter):
    """Decorate another adapter so outgoing requests carry credentials.

    The caller's request is never modified: credentials go onto a copy and
    the copy is what ``base`` sends. While a request is in flight the adapter
    remembers which copy belongs to it, so :meth:`cancel` can be called with
    the original. The entry is dropped on the first of: ``base`` raising, the
    body being read to the end, or the body being closed.

    Cancellation is only forwarded when a canceler is available, either the
    ``canceler`` argument or ``base.cancel``. Without one, cancelling is a
    no-op.
    """

    def __init__(
        self,
        auth: AuthSource | None,
        base: BaseAdapter | None = None,
        *,
        canceler: Canceler | None = None,
        table: CorrelationTable | None = None,
    ) -> None:
        super().__init__()
        self._auth = auth
        self._base = base if base is not None else CancellableHTTPAdapter()
        self._canceler = canceler if canceler is not None else getattr(self._base, "cancel", None)
        self._table = table if table is not None else CorrelationTable()

    @property
    def auth(self) -> AuthSource | None:
        return self._auth

    @property
    def base(self) -> BaseAdapter:
        return self._base

    @property
    def correlations(self) -> CorrelationTable:
        return self._table

    @property
    def can_cancel(self) -> bool:
        return self._canceler is not None

    def send(self, request: PreparedRequest, **kwargs: Any) -> Response:
        if self._auth is None:
            raise ConfigurationError("BasicAuthAdapter has no credential holder")

        decorated = request.copy()
        self._auth.apply(decorated)
        self._table.put(request, decorated)
        logger.debug(
            "Sending %s %s as user %s",
            request.method,
            request.url,
            self._auth.username,
        )
        try:
            response = self._base.send(decorated, **kwargs)
        except BaseException:
            self._table.remove(request)
            raise

        response.raw = OnCompleteReader(response.raw, lambda: self._release(request))
        return response

    def cancel(self, request: PreparedRequest) -> None:
        """Abort ``request`` if it is still in flight; otherwise do nothing."""
        decorated = self._table.pop(request)
        if decorated is None or self._canceler is None:
            return
        logger.debug("Cancelling %s %s", request.method, request.url)
        self._canceler(decorated)

    def close(self) -> None:
        self._base.close()

    def _release(self, request: PreparedRequest) -> None:
        self._table.remove(request)
        logger.debug("Released %s %s", request.method, request.url)
