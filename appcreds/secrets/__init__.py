"""Secret resolution: Doppler first, process environment as fallback.

Public API:
    build_resolver(doppler_client, project, config) -> SecretResolver
    SecretResolver.resolve(name) -> str
    GitHubSecrets(resolver).app_id() / private_key() / ...
"""

from appcreds.secrets.accessors import GitHubSecrets, installation_secret_name
from appcreds.secrets.doppler import DopplerClient, DopplerSecret
from appcreds.secrets.resolver import (
    EnvironmentStrategy,
    ResolvedSecret,
    SecretResolver,
    SecretStrategy,
    VaultStrategy,
    build_resolver,
)

__all__ = [
    "GitHubSecrets",
    "installation_secret_name",
    "DopplerClient",
    "DopplerSecret",
    "EnvironmentStrategy",
    "ResolvedSecret",
    "SecretResolver",
    "SecretStrategy",
    "VaultStrategy",
    "build_resolver",
]
