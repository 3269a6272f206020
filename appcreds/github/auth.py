"""GitHub App authentication.

Handles JWT generation for authenticating as the GitHub App itself.
The app id and private key come from the secret resolver (Doppler, then
environment); they are never stored on disk or logged.

GitHub App auth flow:
1. Generate a JWT signed with the App's private key
2. Exchange the JWT for a short-lived installation access token
3. Use the installation token for API calls scoped to that installation

Steps 2 and 3 live in `appcreds.github.client`.
"""

import asyncio
import time
import uuid
from typing import Callable, Optional

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from appcreds.core.errors import ConfigurationError
from appcreds.core.events import CredentialObserver, StructlogObserver
from appcreds.secrets.accessors import GITHUB_APP_ID, GITHUB_PRIVATE_KEY, GitHubSecrets

ASSERTION_ALGORITHM = "RS256"

# GitHub rejects JWTs whose iat is in the future; backdate to absorb skew.
ASSERTION_BACKDATE_SECONDS = 60

# exp - iat. Well under GitHub's 10 minute ceiling.
ASSERTION_LIFETIME_SECONDS = 300


def build_assertion_claims(app_id: str, now: int) -> dict:
    """Claims for an app assertion created at epoch second `now`."""
    issued_at = now - ASSERTION_BACKDATE_SECONDS
    return {
        "iat": issued_at,
        "exp": issued_at + ASSERTION_LIFETIME_SECONDS,
        "iss": app_id,
        # Unique per assertion so two mints in the same second differ.
        "jti": uuid.uuid4().hex,
    }


def load_signing_key(private_key: str) -> rsa.RSAPrivateKey:
    """Parse the PEM private key, accepting only unencrypted RSA keys.

    Raises:
        ConfigurationError: for unparseable PEM, public keys, encrypted
            keys and non-RSA keys. The key material is never echoed.
    """
    try:
        key = serialization.load_pem_private_key(private_key.encode("utf-8"), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ConfigurationError(
            f"{GITHUB_PRIVATE_KEY} could not sign an {ASSERTION_ALGORITHM} "
            f"assertion: not a readable PEM private key ({type(exc).__name__})",
            secret_name=GITHUB_PRIVATE_KEY,
        ) from exc

    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConfigurationError(
            f"{GITHUB_PRIVATE_KEY} could not sign an {ASSERTION_ALGORITHM} "
            f"assertion: expected an RSA private key, got {type(key).__name__}",
            secret_name=GITHUB_PRIVATE_KEY,
        )
    return key


class AppAssertionMinter:
    """Mints signed app assertions (JWTs) from the resolved credentials.

    A new assertion is minted on every call; nothing is cached.
    """

    def __init__(
        self,
        secrets: GitHubSecrets,
        observer: Optional[CredentialObserver] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._secrets = secrets
        self._observer = observer or StructlogObserver()
        self._clock = clock

    async def mint_assertion(self) -> str:
        """Return a freshly signed RS256 JWT for the GitHub App.

        Raises:
            ConfigurationError: if the app id or private key resolves to
                empty, or the private key cannot sign.
        """
        app_id, private_key = await asyncio.gather(
            self._secrets.app_id(),
            self._secrets.private_key(),
        )

        if not app_id:
            raise ConfigurationError(
                f"GitHub App id not configured. Set {GITHUB_APP_ID}.",
                secret_name=GITHUB_APP_ID,
            )
        if not private_key:
            raise ConfigurationError(
                f"GitHub App private key not configured. Set {GITHUB_PRIVATE_KEY}.",
                secret_name=GITHUB_PRIVATE_KEY,
            )

        signing_key = load_signing_key(private_key)
        claims = build_assertion_claims(app_id, int(self._clock()))

        try:
            assertion = jwt.encode(claims, signing_key, algorithm=ASSERTION_ALGORITHM)
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise ConfigurationError(
                f"{GITHUB_PRIVATE_KEY} could not sign an {ASSERTION_ALGORITHM} "
                f"assertion: {type(exc).__name__}",
                secret_name=GITHUB_PRIVATE_KEY,
            ) from exc

        self._observer.emit(
            "debug",
            "app_assertion_minted",
            app_id=app_id,
            expires_at=claims["exp"],
        )
        return assertion
