"""
Services built on top of the HTTP client.
"""

from csrf_client.services.session_service import SessionNegotiator

__all__ = [
    "SessionNegotiator",
]
