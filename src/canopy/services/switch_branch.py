"""Switch the working copy to an existing ticket branch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel

from .. import log
from ..branching import branch_name
from .result import ServiceFailure, ServiceResult, service_failure, service_success

if TYPE_CHECKING:
    from ..ports import VersionControl


class SwitchBranchRequest(BaseModel):
    """Input contract for switching to a ticket branch."""

    ticket_key: str
    prefix: str


@dataclass(frozen=True)
class SwitchBranchOutcome:
    branch_name: str


class SwitchBranchService:
    """Check out the ticket's branch, tracking ``origin`` when only remote."""

    def __init__(self, *, version_control: VersionControl) -> None:
        self._version_control = version_control

    def run(self, request: SwitchBranchRequest) -> ServiceResult[SwitchBranchOutcome]:
        name = branch_name(request.prefix, request.ticket_key)
        exists = self._version_control.branch_exists(name)
        if isinstance(exists, ServiceFailure):
            log.error(exists.message)
            return exists
        if not exists.outcome:
            return service_failure(code="not_found", message=f"Branch '{name}' does not exist")
        checked_out = self._version_control.checkout(name)
        if isinstance(checked_out, ServiceFailure):
            log.error(checked_out.message)
            return checked_out
        log.success(f"Switched to branch: {name}")
        return service_success(SwitchBranchOutcome(branch_name=name))
