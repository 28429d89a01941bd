"""Result values returned by adapters and workflow services.

Callers branch on ``isinstance(result, ServiceFailure)``; expected failures
never escape as exceptions past a public service or adapter method.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .errors import CanopyError, ServiceFailureCode

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceSuccess(Generic[T]):
    outcome: T
    ok = True


@dataclass(frozen=True)
class ServiceFailure:
    """An expected failure with a stable ``code`` and an optional hint.

    ``cause`` keeps the originating exception for debugging and is ignored
    by equality.
    """

    code: ServiceFailureCode
    message: str
    recovery_hint: str | None = None
    cause: BaseException | None = field(default=None, compare=False, repr=False)
    ok = False

    def describe(self) -> str:
        """Return the message followed by a ``hint:`` line when one is set.

        Example:
            >>> print(ServiceFailure("not_found", "no branch", "run `canopy branch`").describe())
            no branch
            hint: run `canopy branch`
        """
        if not self.recovery_hint:
            return self.message
        return f"{self.message}\nhint: {self.recovery_hint}"


ServiceResult = ServiceSuccess[T] | ServiceFailure


def service_success(outcome: T) -> ServiceSuccess[T]:
    return ServiceSuccess(outcome=outcome)


def service_failure(
    *,
    code: ServiceFailureCode,
    message: str,
    recovery_hint: str | None = None,
    cause: BaseException | None = None,
) -> ServiceFailure:
    return ServiceFailure(code=code, message=message, recovery_hint=recovery_hint, cause=cause)


def failure_from_error(error: CanopyError) -> ServiceFailure:
    """Convert a raised ``CanopyError``, preferring its chained ``__cause__``."""
    return service_failure(
        code=error.code,
        message=error.message,
        recovery_hint=error.recovery_hint,
        cause=error.__cause__ or error,
    )
