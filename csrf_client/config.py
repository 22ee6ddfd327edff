"""
Client configuration.
"""

from dataclasses import dataclass
from typing import TextIO

from csrf_client.log import LogLevel


@dataclass(frozen=True, kw_only=True)
class ClientConfig:
    """
    Attributes:
        endpoint: Base URL of the backend (scheme and host, optionally a path).
        url_prefix: Path prefix inserted between the endpoint and every call path.
        header_api_key_name: Request header carrying the API key.
        api_key: Static API key. When set, client ID / CSRF negotiation is skipped.
        header_client_key_name: Header the server uses to send the client ID,
            echoed back on every request.
        csrf_disable: Accept a session without a CSRF token.
        username: Basic auth user name.
        password: Basic auth password.
        verify_tls: Verify server certificates. Disabled by default.
        timeout: Transport timeout in seconds, ``None`` for no timeout.
        log_out: Log sink, standard output when ``None``.
        log_level: Highest level written to the sink.
        log_prefix: String inserted at the start of every log message.
    """

    endpoint: str
    url_prefix: str = ""
    header_api_key_name: str = ""
    api_key: str = ""
    header_client_key_name: str = ""
    csrf_disable: bool = False
    username: str = ""
    password: str = ""
    verify_tls: bool = False
    timeout: float | None = None
    log_out: TextIO | None = None
    log_level: LogLevel = LogLevel.PANIC
    log_prefix: str = ""

    def __post_init__(self) -> None:
        if not self.endpoint:
            msg = "endpoint must be provided"
            raise ValueError(msg)
        if not self.endpoint.startswith(("http://", "https://")):
            msg = "endpoint must be an http or https URL"
            raise ValueError(msg)
        if self.timeout is not None and self.timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
        if not isinstance(self.log_level, LogLevel):
            object.__setattr__(self, "log_level", LogLevel(self.log_level))

    @property
    def api_key_mode(self) -> bool:
        """True when requests authenticate with the static API key."""
        return self.api_key != ""
