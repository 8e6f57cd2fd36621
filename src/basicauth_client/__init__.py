"""HTTP clients that attach Basic auth credentials to every request."""
from .auth import AuthSource, BasicAuth
from .client import cancel_request, new_client
from .config import ClientConfig
from .exceptions import BasicAuthClientError, ConfigurationError, RequestCancelledError
from .transport import BasicAuthAdapter

__all__ = [
    "AuthSource",
    "BasicAuth",
    "BasicAuthAdapter",
    "BasicAuthClientError",
    "ClientConfig",
    "ConfigurationError",
    "RequestCancelledError",
    "cancel_request",
    "new_client",
]
