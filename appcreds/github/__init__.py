"""GitHub App credentials.

Public API:
    AppAssertionMinter(secrets).mint_assertion() -> str
    InstallationTokenExchanger(minter).exchange_for_installation_token(id) -> str
    verify_webhook_signature(secrets, body, header) -> bool
"""

from appcreds.github.auth import (
    ASSERTION_BACKDATE_SECONDS,
    ASSERTION_LIFETIME_SECONDS,
    AppAssertionMinter,
    build_assertion_claims,
)
from appcreds.github.client import (
    InstallationToken,
    InstallationTokenExchanger,
    validate_installation_id,
)
from appcreds.github.webhooks import parse_installation_event, verify_webhook_signature

__all__ = [
    "ASSERTION_BACKDATE_SECONDS",
    "ASSERTION_LIFETIME_SECONDS",
    "AppAssertionMinter",
    "build_assertion_claims",
    "InstallationToken",
    "InstallationTokenExchanger",
    "validate_installation_id",
    "parse_installation_event",
    "verify_webhook_signature",
]
