"""Wiring for the credential subsystem.

`create_credentials()` builds the whole graph from `Settings`:

    InstallationTokenExchanger -> AppAssertionMinter -> GitHubSecrets
        -> SecretResolver -> (Doppler, environment)

Collaborators are constructed here and passed down explicitly; there are
no module-level client singletons. Build once per process and close with
`await credentials.aclose()` (or `async with`).
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from appcreds.core.config import Settings, get_settings
from appcreds.core.events import CredentialObserver, StructlogObserver
from appcreds.core.logging import configure_structlog
from appcreds.github.auth import AppAssertionMinter
from appcreds.github.client import InstallationTokenExchanger
from appcreds.secrets.accessors import GitHubSecrets
from appcreds.secrets.doppler import DopplerClient
from appcreds.secrets.resolver import SecretResolver, build_resolver


@dataclass
class Credentials:
    """The assembled credential graph."""

    resolver: SecretResolver
    secrets: GitHubSecrets
    minter: AppAssertionMinter
    exchanger: InstallationTokenExchanger
    doppler_client: Optional[DopplerClient] = None

    async def aclose(self) -> None:
        if self.doppler_client is not None:
            await self.doppler_client.aclose()

    async def __aenter__(self) -> "Credentials":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_credentials(
    settings: Optional[Settings] = None,
    observer: Optional[CredentialObserver] = None,
    environ: Optional[Mapping[str, str]] = None,
    configure_logging: bool = True,
) -> Credentials:
    """Build the credential graph.

    Logging is configured here unless `configure_logging` is False (for
    hosts that configure structlog themselves).
    """
    settings = settings or get_settings()

    if configure_logging:
        configure_structlog(debug=settings.debug)

    observer = observer or StructlogObserver()

    doppler_client = None
    if settings.doppler_token:
        doppler_client = DopplerClient(
            settings.doppler_token,
            api_base=settings.doppler_api_base,
            timeout=settings.http_timeout,
        )

    resolver = build_resolver(
        doppler_client,
        project=settings.doppler_project,
        config=settings.doppler_config,
        observer=observer,
        environ=environ,
    )
    secrets = GitHubSecrets(resolver)
    minter = AppAssertionMinter(secrets, observer=observer)
    exchanger = InstallationTokenExchanger(
        minter,
        api_base=settings.github_api_base,
        observer=observer,
        timeout=settings.http_timeout,
    )

    return Credentials(
        resolver=resolver,
        secrets=secrets,
        minter=minter,
        exchanger=exchanger,
        doppler_client=doppler_client,
    )
