"""
Domain models for csrf_client.
"""

from csrf_client.models.session import CSRF_SCOPE_LENGTH, ClientSession

__all__ = [
    "CSRF_SCOPE_LENGTH",
    "ClientSession",
]
