"""
HTTP client for backends using client ID + CSRF cookie sessions.

Negotiates the session lazily on first use, attaches credentials to every
request, keeps them current from every response and turns failure statuses
into typed errors.
"""

import dataclasses
import json
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Any, TypeVar, get_origin

import httpx
from structlog.typing import FilteringBoundLogger

from csrf_client.api.credentials import attach_credentials, extract_credentials, sanitize_headers
from csrf_client.api.status import classify_response
from csrf_client.config import ClientConfig
from csrf_client.exceptions import (
    ClientError,
    DecodeError,
    InvalidCSRFError,
    TransportError,
)
from csrf_client.log import level_to_string, make_logger, parse_level
from csrf_client.models.session import ClientSession
from csrf_client.services.session_service import SessionNegotiator

T = TypeVar("T")

JSON_HEADERS = {"Content-Type": "application/json"}


def join_url(endpoint: str, prefix: str, path: str) -> str:
    """
    Join endpoint, path prefix and call path with exactly one slash between each.

    Example:
        ```python
        join_url("http://h/", "/rest/", "/foo")  # "http://h/rest/foo"
        ```
    """
    url = endpoint.rstrip("/") + "/"
    prefix = prefix.strip("/")
    if prefix:
        url += prefix + "/"
    return url + path.lstrip("/")


def decode_body(content: bytes, into: type[T], *, endpoint: str | None = None) -> T:
    """
    Decode a JSON body into the requested type.

    Args:
        content: Raw response body.
        into: A type the decoded value must be an instance of (``dict``,
            ``list``, ``object`` for anything), or a dataclass built from a
            decoded JSON object.
        endpoint: URL reported in errors.

    Returns:
        The decoded value.

    Raises:
        DecodeError: If the body is not JSON or does not fit ``into``.
    """
    try:
        data = json.loads(content)
    except ValueError as e:
        msg = "Invalid JSON response"
        raise DecodeError(msg, endpoint=endpoint) from e

    if dataclasses.is_dataclass(into):
        if not isinstance(data, dict):
            msg = f"Expected a JSON object for {into.__name__}, got {type(data).__name__}"
            raise DecodeError(msg, endpoint=endpoint)
        # Unknown fields are ignored
        names = {f.name for f in dataclasses.fields(into)}
        try:
            return into(**{k: v for k, v in data.items() if k in names})
        except TypeError as e:
            msg = f"Response does not match {into.__name__}"
            raise DecodeError(msg, endpoint=endpoint) from e

    if into is Any:
        return data
    expected = get_origin(into) or into
    if expected is float and isinstance(data, int) and not isinstance(data, bool):
        return float(data)
    if not isinstance(data, expected):
        msg = f"Expected {getattr(expected, '__name__', expected)}, got {type(data).__name__}"
        raise DecodeError(msg, endpoint=endpoint)
    return data


class HttpClient:
    """
    Stateful HTTP client.

    In session mode the client ID and CSRF token are obtained from the
    endpoint root before the first call and rotated from every response. In
    API-key mode (``config.api_key`` set) only the key header is sent.

    All requests through one client are serialized on the session lock.

    Example:
        ```python
        config = ClientConfig(
            endpoint="http://localhost:8000",
            url_prefix="/api/v1",
            header_client_key_name="Xds-Agent-Sid",
        )
        with HttpClient(config) as client:
            version = client.get("/version", into=dict)
        ```
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Args:
            config: Client configuration.
            transport: Optional transport for testing (mock transport).
        """
        self._config = config
        self._session = ClientSession()
        self._log_level = config.log_level
        self._log = make_logger(config.log_out, config.log_level, config.log_prefix)

        # Certificate verification is off unless explicitly enabled. Cookies are
        # never stored or replayed: the CSRF token travels back in a header only.
        self._client = httpx.Client(
            cookies=CookieJar(policy=DefaultCookiePolicy(allowed_domains=[])),
            verify=config.verify_tls,
            timeout=config.timeout,
            transport=transport,
            follow_redirects=True,
        )
        self._negotiator = SessionNegotiator(self, self._session, config)

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying connection pool. Safe to call more than once."""
        if self._client.is_closed:
            return
        self._client.close()
        self._log.debug("HTTP client closed", endpoint=self._config.endpoint)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def client_id(self) -> str:
        """Client ID received from the server, empty if none yet."""
        with self._session.lock:
            return self._session.client_id

    @property
    def is_initialized(self) -> bool:
        """Whether a session bootstrap has succeeded."""
        with self._session.lock:
            return self._session.initialized

    @property
    def log(self) -> FilteringBoundLogger:
        return self._log

    @property
    def log_level(self) -> str:
        """Readable name of the current log level."""
        return level_to_string(self._log_level)

    def set_log_level(self, level: str) -> None:
        """
        Change the log level.

        Args:
            level: panic, error, warn, warning, info or debug.

        Raises:
            ValueError: If the level name is unknown.
        """
        self._log_level = parse_level(level)
        self._log = make_logger(self._config.log_out, self._log_level, self._config.log_prefix)

    def initialize(self) -> None:
        """
        Negotiate the session now instead of on the first call.

        Raises:
            SessionBootstrapError: If the client ID or CSRF token is missing.
            APIError: If the server rejected the bootstrap request.
            TransportError: If the server could not be reached.
        """
        with self._session.lock:
            try:
                self._negotiator.bootstrap()
            except ClientError as e:
                self._log.error("Cannot retrieve client ID and/or CSRF token", error=str(e))
                raise
            self._session.initialized = True
        self._log.debug("HTTP client init done", endpoint=self._config.endpoint)

    # High level API: JSON in, JSON out

    def get(self, path: str, into: type[T] | None = None) -> T | None:
        """
        Send a GET request and decode the JSON response.

        Args:
            path: Call path, joined to the endpoint and prefix.
            into: Expected type of the response, None to skip decoding.

        Returns:
            Decoded response, or None when ``into`` is None.
        """
        return self._request("GET", path, None, into)

    def post(self, path: str, body: Any, into: type[T] | None = None) -> T | None:
        """Send ``body`` as JSON in a POST request and decode the JSON response."""
        return self._request("POST", path, body, into)

    def put(self, path: str, body: Any, into: type[T] | None = None) -> T | None:
        """Send ``body`` as JSON in a PUT request and decode the JSON response."""
        return self._request("PUT", path, body, into)

    def delete(self, path: str, into: type[T] | None = None) -> T | None:
        """Send a DELETE request and decode the JSON response."""
        return self._request("DELETE", path, None, into)

    # Low level API: raw bodies

    def http_get(self, path: str) -> bytes:
        """Send a GET request and return the raw response body."""
        return self._http_request("GET", path).content

    def http_get_with_response(self, path: str) -> httpx.Response:
        """Send a GET request and return the response."""
        return self._http_request("GET", path)

    def http_post(self, path: str, body: str | bytes | None = None) -> None:
        """Send a POST request with a raw body."""
        self._http_request("POST", path, body)

    def http_post_with_response(self, path: str, body: str | bytes | None = None) -> httpx.Response:
        """Send a POST request with a raw body and return the response."""
        return self._http_request("POST", path, body)

    def http_put(self, path: str, body: str | bytes | None = None) -> None:
        """Send a PUT request with a raw body."""
        self._http_request("PUT", path, body)

    def http_put_with_response(self, path: str, body: str | bytes | None = None) -> httpx.Response:
        """Send a PUT request with a raw body and return the response."""
        return self._http_request("PUT", path, body)

    def http_delete(self, path: str) -> None:
        """Send a DELETE request."""
        self._http_request("DELETE", path)

    def http_delete_with_response(self, path: str) -> httpx.Response:
        """Send a DELETE request and return the response."""
        return self._http_request("DELETE", path)

    def format_url(self, path: str) -> str:
        """Absolute URL of a call path."""
        return join_url(self._config.endpoint, self._config.url_prefix, path)

    def build_request(
        self,
        method: str,
        url: str,
        *,
        content: str | bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Request:
        """
        Build a request for an absolute URL.

        Raises:
            TransportError: If the URL is invalid.
        """
        try:
            return self._client.build_request(method, url, content=content, headers=headers)
        except httpx.InvalidURL as e:
            msg = f"Invalid URL: {e}"
            raise TransportError(msg, url=url) from e

    def dispatch(self, request: httpx.Request, *, refresh_on_forbidden: bool = True) -> httpx.Response:
        """
        Send a request with the session credentials and check the response.

        Credentials are extracted from every response, including failures.
        In session mode a 403 triggers one session bootstrap so that later
        calls use fresh credentials; the failed request is not retried.

        Args:
            request: Request to send.
            refresh_on_forbidden: Whether a 403 may trigger a session
                bootstrap. Disabled for the bootstrap request itself.

        Returns:
            The 200 response, body already read.

        Raises:
            APIError: For any non-200 status.
            TransportError: If no response was received.
        """
        url = str(request.url)
        with self._session.lock:
            attach_credentials(request, self._session, self._config)
            self._log.debug(
                "HTTP request",
                method=request.method,
                url=url,
                headers=sanitize_headers(request.headers, self._config),
            )
            try:
                response = self._client.send(request)
            except httpx.RequestError as e:
                self._log.info("HTTP request failed", method=request.method, url=url, error=str(e))
                raise TransportError(str(e) or type(e).__name__, url=url) from e

            self._log.debug(
                "HTTP response",
                status=response.status_code,
                headers=sanitize_headers(response.headers, self._config),
            )
            extract_credentials(self._session, response, self._config)

            error = classify_response(
                response, api_key_mode=self._config.api_key_mode, endpoint=url
            )
            if error is None:
                return response

            if isinstance(error, InvalidCSRFError) and refresh_on_forbidden:
                self._refresh_session()
            raise error

    def _request(self, method: str, path: str, body: Any, into: type[T] | None) -> T | None:
        content = None
        headers = None
        if body is not None:
            try:
                content = json.dumps(body)
            except (TypeError, ValueError) as e:
                msg = "Cannot encode request body"
                raise DecodeError(msg, endpoint=path) from e
            headers = JSON_HEADERS

        response = self._http_request(method, path, content, headers=headers)

        # Without an expected type the body is not looked at.
        if into is None:
            return None
        return decode_body(response.content, into, endpoint=str(response.request.url))

    def _http_request(
        self,
        method: str,
        path: str,
        body: str | bytes | None = None,
        *,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        with self._session.lock:
            self._ensure_initialized()
            request = self.build_request(method, self.format_url(path), content=body, headers=headers)
            return self.dispatch(request)

    def _ensure_initialized(self) -> None:
        """Bootstrap the session once; failures are left to surface on the call itself."""
        if self._session.initialized:
            return
        try:
            self._negotiator.bootstrap()
        except ClientError as e:
            self._log.warning("Session bootstrap failed", error=str(e))
            return
        self._session.initialized = True

    def _refresh_session(self) -> None:
        self._log.debug("CSRF token rejected, requesting a new one")
        try:
            self._negotiator.bootstrap()
        except ClientError as e:
            self._log.info("Session refresh failed", error=str(e))
