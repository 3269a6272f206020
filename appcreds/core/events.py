"""Observer interface for credential events.

Credential code reports what it did through a `CredentialObserver` instead
of a concrete logger, so callers choose the backend and tests can assert
on exact events.
"""

from typing import Any, Optional, Protocol, runtime_checkable

import structlog


@runtime_checkable
class CredentialObserver(Protocol):
    """Receives structured events from the resolver, minter and exchanger.

    `level` is a structlog/stdlib method name: "debug", "info", "warning"
    or "error". Field values are ids and secret names only.
    """

    def emit(self, level: str, event: str, **fields: Any) -> None:
        ...  # noqa: PLR6301


class StructlogObserver:
    """Default observer: forwards every event to a structlog logger."""

    def __init__(self, logger: Optional[Any] = None):
        self._logger = logger or structlog.get_logger("appcreds")

    def emit(self, level: str, event: str, **fields: Any) -> None:
        getattr(self._logger, level)(event, **fields)
