"""Named accessors for the GitHub App secrets.

Each accessor delegates to the resolver with a fixed secret name and
returns whatever it resolves, including "". Whether an empty value is
fatal depends on the caller: signing cannot work without a private key,
but a read-only flow can live without the webhook secret.
"""

import re
from typing import Optional

from appcreds.secrets.resolver import SecretResolver

GITHUB_APP_ID = "GITHUB_APP_ID"
GITHUB_PRIVATE_KEY = "GITHUB_PRIVATE_KEY"
GITHUB_CLIENT_ID = "GITHUB_CLIENT_ID"
GITHUB_CLIENT_SECRET = "GITHUB_CLIENT_SECRET"
GITHUB_WEBHOOK_SECRET = "GITHUB_WEBHOOK_SECRET"
GITHUB_INSTALLATION_ID = "GITHUB_INSTALLATION_ID"

_NON_ALNUM = re.compile(r"[^A-Z0-9]")


def installation_secret_name(org: str) -> str:
    """Secret name holding the installation id for one organisation.

    "my-org" -> "GITHUB_INSTALLATION_MY_ORG"
    """
    return f"GITHUB_INSTALLATION_{_NON_ALNUM.sub('_', org.upper())}"


class GitHubSecrets:
    """Typed view over a `SecretResolver` for the GitHub App secrets."""

    def __init__(self, resolver: SecretResolver):
        self._resolver = resolver

    async def app_id(self) -> str:
        return await self._resolver.resolve(GITHUB_APP_ID)

    async def private_key(self) -> str:
        return await self._resolver.resolve(GITHUB_PRIVATE_KEY)

    async def client_id(self) -> str:
        return await self._resolver.resolve(GITHUB_CLIENT_ID)

    async def client_secret(self) -> str:
        return await self._resolver.resolve(GITHUB_CLIENT_SECRET)

    async def webhook_secret(self) -> str:
        return await self._resolver.resolve(GITHUB_WEBHOOK_SECRET)

    async def installation_id(self, org: Optional[str] = None) -> str:
        """Installation id for `org`, or the default installation.

        Prefer looking installations up from stored webhook events; this
        is the configured fallback. An org without its own entry falls
        back to GITHUB_INSTALLATION_ID.
        """
        if org:
            value = await self._resolver.resolve(installation_secret_name(org))
            if value:
                return value
        return await self._resolver.resolve(GITHUB_INSTALLATION_ID)
