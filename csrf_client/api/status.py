"""
Mapping of HTTP status codes to typed errors.
"""

import json

import httpx

from csrf_client.exceptions import (
    APIError,
    InvalidAPIKeyError,
    InvalidCredentialsError,
    InvalidCSRFError,
    InvalidEndpointError,
    RemoteError,
    UnknownStatusError,
)


def status_line(response: httpx.Response) -> str:
    """Status code and reason phrase, e.g. ``"500 Internal Server Error"``."""
    if response.reason_phrase:
        return f"{response.status_code} {response.reason_phrase}"
    return str(response.status_code)


def error_message(body: bytes) -> str | None:
    """
    Extract a server error message from a response body.

    A JSON object with a string ``"error"`` field wins, even when empty,
    otherwise the trimmed body text is used.

    Returns:
        The message, or None when the body carries nothing usable.
    """
    try:
        data = json.loads(body)
    except ValueError:
        data = None
    if isinstance(data, dict):
        message = data.get("error")
        if isinstance(message, str):
            return message

    text = body.decode("utf-8", errors="replace").strip()
    return text or None


def classify_response(
    response: httpx.Response,
    *,
    api_key_mode: bool,
    endpoint: str | None = None,
) -> APIError | None:
    """
    Classify a response by status code.

    Args:
        response: Response with its body already read.
        api_key_mode: Whether the client authenticates with an API key.
            Decides how a 403 is reported.
        endpoint: URL reported in the error.

    Returns:
        None for a 200 response, otherwise the error to raise.
    """
    code = response.status_code

    if code == httpx.codes.OK:
        return None
    if code == httpx.codes.UNAUTHORIZED:
        return InvalidCredentialsError(endpoint=endpoint)
    if code == httpx.codes.FORBIDDEN:
        if api_key_mode:
            return InvalidAPIKeyError(endpoint=endpoint)
        return InvalidCSRFError(endpoint=endpoint)
    if code == httpx.codes.NOT_FOUND:
        return InvalidEndpointError(endpoint=endpoint)

    message = error_message(response.content)
    if message is not None:
        return RemoteError(message, code=code, endpoint=endpoint)
    return UnknownStatusError(status_line(response), code=code, endpoint=endpoint)
