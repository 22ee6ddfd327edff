"""
Credential attachment and extraction.

The backend issues a client ID in a configurable response header and a CSRF
token in a cookie named after the first characters of that ID. Both are
echoed back on every following request. In API-key mode only the key header
is sent.
"""

import base64
from collections.abc import Iterator, Mapping
from http.cookies import CookieError, SimpleCookie

import httpx

from csrf_client.config import ClientConfig
from csrf_client.models.session import ClientSession

SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "set-cookie"})


def iter_cookies(response: httpx.Response) -> Iterator[tuple[str, str]]:
    """Yield ``(name, value)`` for every cookie set by a response, in header order."""
    for header in response.headers.get_list("set-cookie"):
        jar = SimpleCookie()
        try:
            jar.load(header)
        except CookieError:
            continue
        for name, morsel in jar.items():
            yield name, morsel.value


def extract_credentials(
    session: ClientSession,
    response: httpx.Response,
    config: ClientConfig,
) -> None:
    """
    Update the session from a response.

    A client ID header that differs from the stored one replaces it. The
    CSRF cookie is then looked up under the name derived from the (possibly
    new) client ID. Missing values leave the session untouched.
    """
    if config.header_client_key_name:
        client_id = response.headers.get(config.header_client_key_name, "")
        if client_id and client_id != session.client_id:
            session.client_id = client_id

    cookie_name = session.csrf_cookie_name
    if cookie_name is None:
        return
    for name, value in iter_cookies(response):
        if name == cookie_name:
            session.csrf_token = value
            break


def attach_credentials(
    request: httpx.Request,
    session: ClientSession,
    config: ClientConfig,
) -> None:
    """Set the authentication headers for the current session on a request."""
    if config.header_api_key_name and config.api_key:
        request.headers[config.header_api_key_name] = config.api_key
    if config.header_client_key_name and session.client_id:
        request.headers[config.header_client_key_name] = session.client_id
    if config.username or config.password:
        userpass = f"{config.username}:{config.password}".encode()
        request.headers["Authorization"] = "Basic " + base64.b64encode(userpass).decode()
    header_name = session.csrf_header_name
    if session.csrf_token and header_name is not None:
        request.headers[header_name] = session.csrf_token


def sanitize_headers(headers: Mapping[str, str], config: ClientConfig) -> dict[str, str]:
    """
    Copy headers for logging with secret values replaced by "***".

    Masks the API key header, CSRF headers and cookies, and basic auth.
    """
    sensitive = set(SENSITIVE_HEADERS)
    if config.header_api_key_name:
        sensitive.add(config.header_api_key_name.lower())

    result = {}
    for key, value in headers.items():
        lowered = key.lower()
        if lowered in sensitive or lowered.startswith("x-csrf-token-"):
            result[key] = "***"
        else:
            result[key] = value
    return result
