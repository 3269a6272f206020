"""Shared fixtures for the appcreds test suite.

RSA keys are generated once per session with `cryptography`. HTTP is
stubbed with `httpx.MockTransport`, so nothing touches the network.
"""

from typing import Any, Callable

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from appcreds.secrets.accessors import GitHubSecrets
from appcreds.secrets.resolver import SecretResolver


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_key) -> str:
    """A valid PEM-encoded RSA private key."""
    pem = rsa_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    )
    return pem.decode()


@pytest.fixture(scope="session")
def public_key_pem(rsa_key) -> str:
    pem = rsa_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return pem.decode()


# ---------------------------------------------------------------------------
# Observer and strategy doubles
# ---------------------------------------------------------------------------


class RecordingObserver:
    """Collects every emitted event as (level, event, fields)."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    def emit(self, level: str, event: str, **fields: Any) -> None:
        self.events.append((level, event, fields))

    def at(self, level: str) -> list[tuple[str, str, dict[str, Any]]]:
        return [e for e in self.events if e[0] == level]

    def named(self, event: str) -> list[tuple[str, str, dict[str, Any]]]:
        return [e for e in self.events if e[1] == event]


class StaticStrategy:
    """Serves secrets from a dict and records every lookup."""

    def __init__(self, values: dict[str, str], name: str = "vault") -> None:
        self.name = name
        self.values = values
        self.calls: list[str] = []

    async def fetch(self, secret_name: str) -> str:
        self.calls.append(secret_name)
        return self.values.get(secret_name, "")


class FailingStrategy:
    """Raises on every lookup, like an unreachable vault."""

    def __init__(self, exc: Exception | None = None, name: str = "vault") -> None:
        self.name = name
        self.exc = exc or RuntimeError("vault unreachable")
        self.calls: list[str] = []

    async def fetch(self, secret_name: str) -> str:
        self.calls.append(secret_name)
        raise self.exc


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def static_strategy() -> Callable[..., StaticStrategy]:
    return StaticStrategy


@pytest.fixture
def failing_strategy() -> Callable[..., FailingStrategy]:
    return FailingStrategy


@pytest.fixture
def make_secrets(observer) -> Callable[..., GitHubSecrets]:
    """Build GitHubSecrets over a single in-memory strategy."""

    def _make(values: dict[str, str]) -> GitHubSecrets:
        resolver = SecretResolver([StaticStrategy(values)], observer=observer)
        return GitHubSecrets(resolver)

    return _make


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Wrap a request handler in an AsyncClient backed by MockTransport."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
