"""GitHub webhook verification.

Verifies webhook signatures and parses installation events. The webhook
secret is shared between GitHub and the app and resolved through the
secret accessors; it must never be logged or exposed.

Signature verification uses HMAC-SHA256 as specified by GitHub:
https://docs.github.com/en/webhooks/using-webhooks/validating-webhook-deliveries
"""

import hashlib
import hmac

from appcreds.core.errors import ConfigurationError
from appcreds.secrets.accessors import GITHUB_WEBHOOK_SECRET, GitHubSecrets

SIGNATURE_PREFIX = "sha256="


async def verify_webhook_signature(
    secrets: GitHubSecrets,
    payload_body: bytes,
    signature_header: str,
) -> bool:
    """Verify that a webhook payload was signed by GitHub.

    Args:
        secrets: Accessors used to resolve the webhook secret.
        payload_body: Raw request body bytes.
        signature_header: Value of the X-Hub-Signature-256 header.

    Returns:
        True if the signature is valid, False otherwise.

    Raises:
        ConfigurationError: if the webhook secret resolves to empty.
    """
    webhook_secret = await secrets.webhook_secret()
    if not webhook_secret:
        raise ConfigurationError(
            f"{GITHUB_WEBHOOK_SECRET} not configured",
            secret_name=GITHUB_WEBHOOK_SECRET,
        )

    if not signature_header or not signature_header.startswith(SIGNATURE_PREFIX):
        return False

    expected_signature = hmac.new(
        webhook_secret.encode("utf-8"),
        payload_body,
        hashlib.sha256,
    ).hexdigest()

    received_signature = signature_header.removeprefix(SIGNATURE_PREFIX)

    return hmac.compare_digest(expected_signature, received_signature)


def parse_installation_event(payload: dict) -> dict:
    """Extract the installation id, account and repos from an event.

    Works for `installation` and `installation_repositories` events; the
    latter lists repos under `repositories_added`.
    """
    installation = payload.get("installation") or {}
    account = installation.get("account") or {}
    repositories = payload.get("repositories") or payload.get("repositories_added") or []

    return {
        "action": payload.get("action", ""),
        "installation_id": installation.get("id"),
        "account_login": account.get("login"),
        "account_id": account.get("id"),
        "repositories": [
            {
                "id": r["id"],
                "full_name": r["full_name"],
                "name": r["name"],
            }
            for r in repositories
        ],
    }
