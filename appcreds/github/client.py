"""Installation access token exchange.

Uses httpx for async HTTP calls. Every exchange mints a fresh app
assertion (see `appcreds.github.auth`) and presents it as a bearer
credential to:

    POST /app/installations/{installation_id}/access_tokens

Installation tokens are scoped to the repos the installation was granted
and expire after about an hour. Expiry is not tracked here: callers
exchange again per logical session or after a 401. There is no retry at
this layer either; backoff belongs to the caller.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from appcreds.core.errors import InvalidArgument, TokenExchangeError
from appcreds.core.events import CredentialObserver, StructlogObserver
from appcreds.github.auth import AppAssertionMinter

GITHUB_API_BASE = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
INSTALLATION_TOKEN_ENDPOINT = "/app/installations/{installation_id}/access_tokens"

# Timeout for GitHub calls when no client is injected
API_TIMEOUT = 30.0


@dataclass(frozen=True)
class InstallationToken:
    """An installation access token as returned by GitHub."""

    token: str
    installation_id: int
    expires_at: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"InstallationToken(installation_id={self.installation_id}, "
            f"expires_at={self.expires_at!r}, token=<redacted>)"
        )


def validate_installation_id(installation_id) -> int:
    """Return `installation_id` if it is a positive int, else raise.

    Raises:
        InvalidArgument: for None, 0, negatives, bools and non-ints.
    """
    if (
        isinstance(installation_id, bool)
        or not isinstance(installation_id, int)
        or installation_id <= 0
    ):
        raise InvalidArgument(
            f"installation_id must be a positive integer, got {installation_id!r}"
        )
    return installation_id


class InstallationTokenExchanger:
    """Exchanges app assertions for installation-scoped access tokens.

    Pass `http_client` to reuse a long-lived `httpx.AsyncClient` (or a
    `MockTransport` in tests); otherwise one is opened per call.
    """

    def __init__(
        self,
        minter: AppAssertionMinter,
        api_base: str = GITHUB_API_BASE,
        http_client: Optional[httpx.AsyncClient] = None,
        observer: Optional[CredentialObserver] = None,
        timeout: float = API_TIMEOUT,
    ):
        self._minter = minter
        self._api_base = api_base.rstrip("/")
        self._http_client = http_client
        self._observer = observer or StructlogObserver()
        self._timeout = timeout

    async def exchange_for_installation_token(self, installation_id: int) -> str:
        """Return a new installation access token string."""
        installation_token = await self.create_installation_token(installation_id)
        return installation_token.token

    async def create_installation_token(self, installation_id: int) -> InstallationToken:
        """Exchange a freshly minted app assertion for an installation token.

        Raises:
            InvalidArgument: before any I/O if installation_id is invalid.
            ConfigurationError: unchanged from the minter.
            TokenExchangeError: on any HTTP, transport or response error.
        """
        installation_id = validate_installation_id(installation_id)
        self._observer.emit(
            "debug",
            "installation_token_requested",
            installation_id=installation_id,
        )

        app_jwt = await self._minter.mint_assertion()

        try:
            data = await self._post_access_token(installation_id, app_jwt)
            token = data["token"]
            if not isinstance(token, str) or not token:
                raise ValueError("token is missing or empty")
            installation_token = InstallationToken(
                token=token,
                installation_id=installation_id,
                expires_at=data.get("expires_at"),
            )
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            raise self._failed(
                installation_id,
                f"GitHub returned HTTP {status_code}{_github_message(exc.response)}",
                status_code,
                exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise self._failed(
                installation_id,
                f"{type(exc).__name__}: {exc}",
                None,
                exc,
            ) from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise self._failed(
                installation_id,
                "GitHub response did not contain an access token",
                None,
                exc,
            ) from exc

        self._observer.emit(
            "info",
            "installation_token_issued",
            installation_id=installation_id,
            expires_at=installation_token.expires_at,
        )
        return installation_token

    async def installation_client(self, installation_id: int, **kwargs) -> httpx.AsyncClient:
        """Exchange a token and return a client authenticated with it.

        The client's base_url is the GitHub API, so callers pass relative
        paths. The caller owns the client and must close it (`async with`).
        """
        token = await self.exchange_for_installation_token(installation_id)
        kwargs.setdefault("timeout", self._timeout)
        return httpx.AsyncClient(
            base_url=self._api_base,
            headers=_auth_headers(token),
            **kwargs,
        )

    async def _post_access_token(self, installation_id: int, app_jwt: str) -> dict:
        url = f"{self._api_base}{INSTALLATION_TOKEN_ENDPOINT.format(installation_id=installation_id)}"

        if self._http_client is not None:
            response = await self._http_client.post(url, headers=_auth_headers(app_jwt))
            response.raise_for_status()
            return response.json()

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(url, headers=_auth_headers(app_jwt))
            response.raise_for_status()
            return response.json()

    def _failed(
        self,
        installation_id: int,
        message: str,
        status_code: Optional[int],
        cause: Exception,
    ) -> TokenExchangeError:
        self._observer.emit(
            "error",
            "installation_token_exchange_failed",
            installation_id=installation_id,
            status_code=status_code,
            error=message,
        )
        return TokenExchangeError(installation_id, message, status_code=status_code)


def _github_message(response: httpx.Response) -> str:
    """GitHub's error `message` field, formatted as a suffix, if present."""
    try:
        message = response.json().get("message", "")
    except (ValueError, AttributeError):
        return ""
    return f": {message}" if message else ""


def _auth_headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }
