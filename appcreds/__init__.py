"""GitHub App credential issuance and layered secret resolution.

Public API:
    create_credentials(settings) -> Credentials
    Credentials.exchanger.exchange_for_installation_token(installation_id) -> str
"""

from appcreds.core.errors import (
    ConfigurationError,
    InvalidArgument,
    SecretStoreError,
    TokenExchangeError,
)
from appcreds.main import Credentials, create_credentials

__all__ = [
    "ConfigurationError",
    "InvalidArgument",
    "SecretStoreError",
    "TokenExchangeError",
    "Credentials",
    "create_credentials",
]
