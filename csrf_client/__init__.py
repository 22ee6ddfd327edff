"""
Stateful HTTP client for client ID + CSRF cookie sessions.

Talks to backends that either take a static API key in a request header,
or hand out a client ID header plus a CSRF cookie named after that ID and
expect both to be echoed back on every request.

Example:
    ```python
    from csrf_client import ClientConfig, HttpClient

    config = ClientConfig(
        endpoint="http://localhost:8000",
        url_prefix="/api/v1",
        header_client_key_name="Xds-Agent-Sid",
    )

    with HttpClient(config) as client:
        # Session is negotiated on the first call
        info = client.get("/version", into=dict)
        client.post("/folders", {"label": "demo"})
    ```
"""

from csrf_client.api.http_client import HttpClient
from csrf_client.config import ClientConfig
from csrf_client.exceptions import (
    APIError,
    AuthenticationError,
    ClientError,
    DecodeError,
    InvalidAPIKeyError,
    InvalidCredentialsError,
    InvalidCSRFError,
    InvalidEndpointError,
    RemoteError,
    SessionBootstrapError,
    TransportError,
    UnknownStatusError,
)
from csrf_client.log import LogLevel

__version__ = "0.1.0"

__all__ = [
    # Main client
    "HttpClient",
    "ClientConfig",
    "LogLevel",
    # Exceptions
    "ClientError",
    "TransportError",
    "SessionBootstrapError",
    "DecodeError",
    "APIError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "InvalidAPIKeyError",
    "InvalidCSRFError",
    "InvalidEndpointError",
    "RemoteError",
    "UnknownStatusError",
]
