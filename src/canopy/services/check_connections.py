"""Report connectivity to the configured tracker and code-review services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from .result import ServiceFailure, ServiceResult, service_success

ConnectionProbe = Callable[[], ServiceResult[str]]


@dataclass(frozen=True)
class ConnectionCheck:
    name: str
    ok: bool
    message: str


@dataclass(frozen=True)
class CheckConnectionsOutcome:
    checks: tuple[ConnectionCheck, ...]

    @property
    def all_ok(self) -> bool:
        return all(check.ok for check in self.checks)


class CheckConnectionsService:
    """Run every probe and collect one line per system.

    Probes run in the given order and a failing probe does not stop the rest.
    """

    def __init__(self, *, probes: Sequence[tuple[str, ConnectionProbe]]) -> None:
        self._probes = tuple(probes)

    def run(self) -> ServiceResult[CheckConnectionsOutcome]:
        checks: list[ConnectionCheck] = []
        for name, probe in self._probes:
            result = probe()
            if isinstance(result, ServiceFailure):
                checks.append(ConnectionCheck(name=name, ok=False, message=result.message))
            else:
                checks.append(ConnectionCheck(name=name, ok=True, message=result.outcome))
        return service_success(CheckConnectionsOutcome(checks=tuple(checks)))
