"""Error taxonomy for credential issuance and secret resolution.

Configuration and argument errors are raised before any I/O happens.
Remote failures are wrapped in `TokenExchangeError` with the original
exception chained as `__cause__`; nothing here retries.

Messages never include secret values, signed assertions or tokens.
"""

from typing import Optional

# Event name emitted (never raised) when the vault read fails and the
# resolver moves on to the next source.
SECRET_RESOLUTION_DEGRADED = "secret_resolution_degraded"


class ConfigurationError(Exception):
    """A required secret is missing or unusable (empty app id, bad key).

    Fatal to the current operation and not retried.
    """

    def __init__(self, message: str, secret_name: Optional[str] = None):
        self.secret_name = secret_name
        super().__init__(message)


class InvalidArgument(ValueError):
    """The caller passed a missing or invalid installation identifier."""


class SecretStoreError(Exception):
    """Raised by a vault client when a secret cannot be read.

    Never escapes the resolver: it is the trigger for environment fallback.
    """

    def __init__(self, name: str, message: str, status_code: Optional[int] = None):
        self.name = name
        self.status_code = status_code
        super().__init__(f"[{name}] {message}")


class TokenExchangeError(Exception):
    """The installation access token request failed.

    Carries the installation id and HTTP status (when there was a response)
    so the calling layer can decide on retry or re-installation.
    """

    def __init__(
        self,
        installation_id: int,
        message: str,
        status_code: Optional[int] = None,
    ):
        self.installation_id = installation_id
        self.status_code = status_code
        self.message = message
        super().__init__(
            f"Installation token exchange failed for installation "
            f"{installation_id}: {message}"
        )
