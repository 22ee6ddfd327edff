"""
csrf_client exception hierarchy.

All exceptions inherit from ClientError for easy catching.
"""

from typing import Any


class ClientError(Exception):
    """Base exception for all csrf_client errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class TransportError(ClientError):
    """No response received (connection refused, DNS, TLS, timeout)."""


class SessionBootstrapError(ClientError):
    """Client ID and/or CSRF token could not be negotiated."""


class DecodeError(ClientError):
    """A JSON body did not match the expected shape."""


class APIError(ClientError):
    """The server answered with a non-200 status."""

    def __init__(self, message: str, *, code: int, endpoint: str | None = None) -> None:
        super().__init__(message, code=code, endpoint=endpoint)
        self.code = code
        self.endpoint = endpoint


class AuthenticationError(APIError):
    """Credentials were rejected."""


class InvalidCredentialsError(AuthenticationError):
    """Invalid username or password (401)."""

    def __init__(
        self, message: str = "Invalid username or password", *, endpoint: str | None = None
    ) -> None:
        super().__init__(message, code=401, endpoint=endpoint)


class InvalidAPIKeyError(AuthenticationError):
    """API key rejected (403 in API-key mode)."""

    def __init__(self, message: str = "Invalid API key", *, endpoint: str | None = None) -> None:
        super().__init__(message, code=403, endpoint=endpoint)


class InvalidCSRFError(AuthenticationError):
    """CSRF token rejected (403 in session mode)."""

    def __init__(self, message: str = "Invalid CSRF token", *, endpoint: str | None = None) -> None:
        super().__init__(message, code=403, endpoint=endpoint)


class InvalidEndpointError(APIError):
    """Unknown endpoint or API call (404)."""

    def __init__(
        self, message: str = "Invalid endpoint or API call", *, endpoint: str | None = None
    ) -> None:
        super().__init__(message, code=404, endpoint=endpoint)


class RemoteError(APIError):
    """Any other non-200 status, carrying the server's message."""


class UnknownStatusError(RemoteError):
    """Non-200 status with no usable message in the body."""

    def __init__(self, status: str, *, code: int, endpoint: str | None = None) -> None:
        super().__init__(f"Unknown HTTP status returned: {status}", code=code, endpoint=endpoint)
        self.status = status
