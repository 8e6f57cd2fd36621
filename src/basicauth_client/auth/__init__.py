"""Credential holders for outgoing requests."""
from .base import AuthSource
from .basic import BasicAuth

__all__ = ["AuthSource", "BasicAuth"]
