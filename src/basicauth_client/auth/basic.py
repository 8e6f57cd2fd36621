"""HTTP Basic authentication support."""

from __future__ import annotations

from requests import PreparedRequest
from requests.auth import _basic_auth_str

from .base import AuthSource


class BasicAuth(AuthSource):
    """Apply HTTP Basic auth headers.

    The holder is read-only after construction. Only the username can be
    read back; the password stays private and is left out of ``repr``.
    """

    __slots__ = ("_username", "_password")

    def __init__(self, username: str, password: str) -> None:
        self._username = username
        self._password = password

    @property
    def username(self) -> str:
        return self._username

    def apply(self, request: PreparedRequest) -> None:
        # bytes skip requests' latin-1 encoding, so non-ASCII credentials go out as UTF-8
        request.headers["Authorization"] = _basic_auth_str(
            self._username.encode("utf-8"), self._password.encode("utf-8")
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BasicAuth):
            return NotImplemented
        return (self._username, self._password) == (other._username, other._password)

    def __hash__(self) -> int:
        return hash((self._username, self._password))

    def __repr__(self) -> str:
        return f"BasicAuth(username={self._username!r})"
