"""Custom exception hierarchy for the Basic Auth client."""
from __future__ import annotations

from typing import Any

import requests


class BasicAuthClientError(RuntimeError):
    """Base error for failures raised by this package itself."""

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        super().__init__(message)
        self.details = details


class ConfigurationError(BasicAuthClientError):
    """Raised when an adapter is used without a credential holder."""


class RequestCancelledError(requests.ConnectionError):
    """Raised by a transport whose in-flight request was cancelled."""
