"""Configuration helpers for Basic Auth clients."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(slots=True)
class ClientConfig:
    """Typed configuration for sessions built by `new_client`."""

    verify_ssl: bool | str = True
    default_headers: Mapping[str, str] | None = None
    pool_connections: int = 10
    pool_maxsize: int = 10
    pool_block: bool = False

    def resolved_headers(self) -> dict[str, str]:
        return dict(self.default_headers or {})
