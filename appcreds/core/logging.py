"""Structured logging via structlog.

Configures structlog once at process startup. All subsequent calls to
`structlog.get_logger()` (or `logging.getLogger()` via the stdlib bridge)
use this configuration.

Renderer selection:
  debug=True:  `ConsoleRenderer` with colours for local development.
  debug=False: `JSONRenderer` for machine-parseable logs in production.

Redaction:
  Credential events carry installation ids and secret *names*, never values.
  `redact_sensitive_fields` still replaces the value of any field whose key
  looks like a credential, so an accidental `token=...` cannot reach stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Keywords that mark a log field as sensitive
_SENSITIVE_KEYS = frozenset(
    {"token", "secret", "private_key", "password", "assertion", "jwt"}
)

# Fields whose names contain a sensitive keyword but hold safe metadata
_SAFE_KEYS = frozenset({"secret_name", "token_expires_at"})

REDACTED = "[REDACTED]"


def redact_sensitive_fields(
    logger: logging.Logger,
    method: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor: redact values for credential-like keys."""
    _redact_dict(event_dict)
    return event_dict


def _redact_dict(d: dict[str, Any]) -> None:
    for key in list(d.keys()):
        if key == "event" or key in _SAFE_KEYS:
            continue
        if any(sensitive in key.lower() for sensitive in _SENSITIVE_KEYS):
            d[key] = REDACTED
        elif isinstance(d[key], dict):
            _redact_dict(d[key])


def configure_structlog(debug: bool = True) -> None:
    """Configure structlog for the process lifetime.

    Call once from `appcreds.main` before any credential call logs anything.
    Calling it more than once is safe.
    """
    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_sensitive_fields,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )

    # Bridge stdlib logging so httpx request logs share the same stream.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )
