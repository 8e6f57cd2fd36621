"""Entry points for building sessions that authenticate with HTTP Basic auth."""

from __future__ import annotations

import logging

import requests
import urllib3
from requests.adapters import BaseAdapter
from urllib3.exceptions import InsecureRequestWarning

from .auth.base import AuthSource
from .config import ClientConfig
from .http import CancellableHTTPAdapter
from .transport import BasicAuthAdapter

logger = logging.getLogger(__name__)

_MOUNT_PREFIXES = ("http://", "https://")


def new_client(
    auth: AuthSource | None = None,
    *,
    config: ClientConfig | None = None,
    base: BaseAdapter | None = None,
) -> requests.Session:
    """Return a new session whose requests carry the credentials in ``auth``.

    With ``auth=None`` the session only gets the plain base adapter and sends
    requests unmodified. ``base`` replaces the default network adapter, which
    is a :class:`CancellableHTTPAdapter` sized from ``config``.
    """

    config = config or ClientConfig()
    _suppress_insecure_warning_if_needed(config)
    if base is None:
        base = CancellableHTTPAdapter(
            pool_connections=config.pool_connections,
            pool_maxsize=config.pool_maxsize,
            pool_block=config.pool_block,
        )

    session = requests.Session()
    session.verify = config.verify_ssl
    session.headers.update(config.resolved_headers())

    adapter: BaseAdapter = base if auth is None else BasicAuthAdapter(auth, base)
    for prefix in _MOUNT_PREFIXES:
        session.mount(prefix, adapter)

    if auth is None:
        logger.debug("Built session without credentials")
    else:
        logger.debug("Built session with basic auth as %s", auth.username)
    return session


def cancel_request(session: requests.Session, request: requests.PreparedRequest) -> None:
    """Best-effort cancellation of ``request`` sent through ``session``."""

    adapter = session.get_adapter(request.url)
    cancel = getattr(adapter, "cancel", None)
    if cancel is not None:
        cancel(request)


def _suppress_insecure_warning_if_needed(config: ClientConfig) -> None:
    if isinstance(config.verify_ssl, bool) and not config.verify_ssl:
        urllib3.disable_warnings(InsecureRequestWarning)
