"""
Session negotiation.

Obtains the client ID and CSRF token with an unauthenticated request to the
endpoint root.
"""

from typing import TYPE_CHECKING

from csrf_client.config import ClientConfig
from csrf_client.exceptions import SessionBootstrapError
from csrf_client.models.session import ClientSession

if TYPE_CHECKING:
    from csrf_client.api.http_client import HttpClient


class SessionNegotiator:
    """
    Bootstraps and refreshes the session of an HttpClient.

    Does nothing in API-key mode: the key replaces the client ID and CSRF
    token entirely.
    """

    def __init__(
        self,
        http_client: "HttpClient",
        session: ClientSession,
        config: ClientConfig,
    ) -> None:
        """
        Args:
            http_client: Client used to send the bootstrap request.
            session: Session state updated by the bootstrap response.
            config: Client configuration.
        """
        self._http = http_client
        self._session = session
        self._config = config

    def bootstrap(self) -> None:
        """
        Fetch the endpoint root and check that the session is usable.

        The request goes through the regular dispatch path, so the client ID
        and CSRF token are picked up by credential extraction. A 403 on this
        request never triggers another bootstrap.

        Raises:
            SessionBootstrapError: If no client ID was received, or no CSRF
                token while CSRF is enabled.
            APIError: If the server rejected the request.
            TransportError: If no response was received.
        """
        if self._config.api_key_mode:
            return

        with self._session.lock:
            request = self._http.build_request("GET", self._config.endpoint)
            self._http.dispatch(request, refresh_on_forbidden=False)

            if not self._session.client_id:
                msg = "missing client id"
                raise SessionBootstrapError(msg, endpoint=self._config.endpoint)
            if not self._config.csrf_disable and not self._session.csrf_token:
                msg = "missing csrf token"
                raise SessionBootstrapError(msg, endpoint=self._config.endpoint)

        self._http.log.debug("Session negotiated", client_id=self._session.client_id)
