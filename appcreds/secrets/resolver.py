"""Layered secret resolution.

A `SecretResolver` walks an ordered list of strategies and returns the
first non-empty value:

    1. VaultStrategy: Doppler, scoped to one project/config pair
    2. EnvironmentStrategy: identically-named process environment variable

A strategy that raises is reported as a `secret_resolution_degraded`
warning and the next one is tried. An empty value is a plain miss.
`resolve()` never raises: when every strategy misses it returns "", and
the first consumer that needs a non-empty value (the assertion minter,
the webhook verifier) decides whether that is fatal.

Values are resolved fresh on every call; nothing is cached here.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol, Sequence

from appcreds.core.errors import SECRET_RESOLUTION_DEGRADED
from appcreds.core.events import CredentialObserver, StructlogObserver
from appcreds.secrets.doppler import DopplerClient


class SecretStrategy(Protocol):
    """One source of secrets. `name` is used as the `source` label."""

    name: str

    async def fetch(self, secret_name: str) -> str:
        ...  # noqa: PLR6301


@dataclass(frozen=True)
class ResolvedSecret:
    """A resolved secret plus where it came from.

    `source` is the strategy name ("vault" or "env"), or None when no
    strategy had a value. `degraded` is True exactly when at least one
    strategy raised and a `secret_resolution_degraded` warning was emitted.
    """

    name: str
    value: str
    source: Optional[str]
    degraded: bool = False

    def __repr__(self) -> str:
        return (
            f"ResolvedSecret(name={self.name!r}, value=<redacted>, "
            f"source={self.source!r}, degraded={self.degraded!r})"
        )


class VaultStrategy:
    """Reads secrets from Doppler for a fixed project/config pair."""

    name = "vault"

    def __init__(self, client: DopplerClient, project: str, config: str):
        self._client = client
        self._project = project
        self._config = config

    async def fetch(self, secret_name: str) -> str:
        secret = await self._client.get(self._project, self._config, secret_name)
        return secret.value


class EnvironmentStrategy:
    """Reads secrets from process environment variables."""

    name = "env"

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ if environ is not None else os.environ

    async def fetch(self, secret_name: str) -> str:
        return self._environ.get(secret_name, "")


class SecretResolver:
    """Resolves named secrets through an ordered strategy chain."""

    def __init__(
        self,
        strategies: Sequence[SecretStrategy],
        observer: Optional[CredentialObserver] = None,
    ):
        if not strategies:
            raise ValueError("SecretResolver needs at least one strategy")
        self._strategies = list(strategies)
        self._observer = observer or StructlogObserver()

    @property
    def strategies(self) -> list[SecretStrategy]:
        return list(self._strategies)

    async def resolve(self, name: str) -> str:
        """Return the value of `name`, or "" if no source has it."""
        resolved = await self.resolve_with_source(name)
        return resolved.value

    async def resolve_with_source(self, name: str) -> ResolvedSecret:
        if not name:
            self._observer.emit("warning", "secret_name_empty")
            return ResolvedSecret(name=name, value="", source=None)

        degraded = False
        for strategy in self._strategies:
            try:
                value = await strategy.fetch(name)
            except Exception as exc:
                degraded = True
                self._observer.emit(
                    "warning",
                    SECRET_RESOLUTION_DEGRADED,
                    secret_name=name,
                    strategy=strategy.name,
                    error=str(exc),
                )
                continue

            if value:
                self._observer.emit(
                    "debug",
                    "secret_resolved",
                    secret_name=name,
                    strategy=strategy.name,
                )
                return ResolvedSecret(
                    name=name, value=value, source=strategy.name, degraded=degraded
                )

            self._observer.emit(
                "debug",
                "secret_not_found",
                secret_name=name,
                strategy=strategy.name,
            )

        return ResolvedSecret(name=name, value="", source=None, degraded=degraded)


def build_resolver(
    doppler_client: Optional[DopplerClient],
    project: str,
    config: str,
    observer: Optional[CredentialObserver] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SecretResolver:
    """Build the standard vault-then-environment chain.

    Without a Doppler client the chain is environment-only, so a missing
    DOPPLER_TOKEN does not produce a warning on every lookup.
    """
    strategies: list[SecretStrategy] = []
    if doppler_client is not None:
        strategies.append(VaultStrategy(doppler_client, project, config))
    strategies.append(EnvironmentStrategy(environ))
    return SecretResolver(strategies, observer=observer)
