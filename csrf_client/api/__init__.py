"""
HTTP client layer.

Request pipeline, credential handling and status classification.
"""

from csrf_client.api.credentials import attach_credentials, extract_credentials, sanitize_headers
from csrf_client.api.http_client import HttpClient, decode_body, join_url
from csrf_client.api.status import classify_response

__all__ = [
    "HttpClient",
    "attach_credentials",
    "classify_response",
    "decode_body",
    "extract_credentials",
    "join_url",
    "sanitize_headers",
]
