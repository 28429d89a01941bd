"""Failure taxonomy raised inside adapters.

Adapters raise ``CanopyError`` subclasses on expected failures and convert
them to a ``ServiceFailure`` result at their public method boundary (see
``canopy.services.result.failure_from_error``). Programmer bugs raise normal
exceptions.
"""

from __future__ import annotations

from typing import Literal

ServiceFailureCode = Literal[
    "configuration_missing",
    "conflict",
    "not_found",
    "transport_failed",
    "unexpected_state",
]


class CanopyError(Exception):
    """Expected failure: configuration, conflict, lookup, or transport error.

    Use ``raise SomeError(...) from exc`` to chain a causing exception; it is
    available as ``__cause__`` and is carried onto the converted result.
    """

    code: ServiceFailureCode = "unexpected_state"

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.recovery_hint = recovery_hint


class ConfigurationError(CanopyError):
    """Required settings are missing or invalid."""

    code: ServiceFailureCode = "configuration_missing"


class ConflictError(CanopyError):
    """Target resource already exists."""

    code: ServiceFailureCode = "conflict"


class NotFoundError(CanopyError):
    """Expected resource is absent."""

    code: ServiceFailureCode = "not_found"


class TransportError(CanopyError):
    """Network, authentication, or external command failure."""

    code: ServiceFailureCode = "transport_failed"


class UnexpectedError(CanopyError):
    """Anything else that went wrong talking to a collaborator."""

    code: ServiceFailureCode = "unexpected_state"
