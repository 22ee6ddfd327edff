"""
Session state negotiated with the backend.
"""

import threading
from dataclasses import dataclass, field

CSRF_SCOPE_LENGTH = 5


@dataclass(kw_only=True)
class ClientSession:
    """
    Client ID and CSRF token currently known to a client.

    Owned by a single HttpClient. All reads and writes happen while holding
    ``lock``; the lock is re-entrant because the session bootstrap request is
    sent from inside a locked request.

    Attributes:
        client_id: Server issued client/device ID, empty until discovered.
        csrf_token: Current CSRF token, empty until discovered.
        initialized: Whether a bootstrap has succeeded.
    """

    client_id: str = ""
    csrf_token: str = ""
    initialized: bool = False
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @property
    def csrf_scope(self) -> str:
        """Leading characters of the client ID that scope the CSRF cookie and header."""
        return self.client_id[:CSRF_SCOPE_LENGTH]

    @property
    def csrf_cookie_name(self) -> str | None:
        """Name of the cookie carrying the CSRF token, None without a client ID."""
        if not self.client_id:
            return None
        return f"CSRF-Token-{self.csrf_scope}"

    @property
    def csrf_header_name(self) -> str | None:
        """Name of the request header echoing the CSRF token, None without a client ID."""
        if not self.client_id:
            return None
        return f"X-CSRF-Token-{self.csrf_scope}"
