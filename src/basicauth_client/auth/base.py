"""Base abstractions for credential holders."""
from __future__ import annotations

from abc import ABC, abstractmethod

from requests import PreparedRequest


class AuthSource(ABC):
    """Anything that can put authentication onto a request's headers."""

    @property
    @abstractmethod
    def username(self) -> str:
        """User the credentials belong to."""

    @abstractmethod
    def apply(self, request: PreparedRequest) -> None:
        """Mutate ``request.headers`` in-place with the credentials."""

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        # Lets a holder double as a ``requests`` auth hook (``auth=holder``).
        self.apply(request)
        return request
