"""Create a ticket branch from a freshly synced target branch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel

from .. import log
from ..branching import branch_name
from .result import ServiceFailure, ServiceResult, service_failure, service_success

if TYPE_CHECKING:
    from ..ports import VersionControl


class CreateBranchRequest(BaseModel):
    """Input contract for branch creation.

    Attributes:
        ticket_key: Ticket the branch is named after.
        prefix: Branch prefix applied verbatim.
        target_branch: Base branch to create from.
    """

    ticket_key: str
    prefix: str
    target_branch: str


@dataclass(frozen=True)
class CreateBranchOutcome:
    """Outcome payload for branch creation.

    Args:
        branch_name: The created and checked-out branch.
        warnings: Best-effort steps that failed (e.g. the pull).
    """

    branch_name: str
    warnings: tuple[str, ...] = ()


class CreateBranchService:
    """Create and check out ``prefix + ticket_key`` from the target branch.

    Steps run strictly in order: conflict check, checkout of the target
    branch when needed, a best-effort pull, then branch creation. A failed
    creation leaves the working copy on the target branch.
    """

    def __init__(self, *, version_control: VersionControl) -> None:
        self._version_control = version_control

    def run(self, request: CreateBranchRequest) -> ServiceResult[CreateBranchOutcome]:
        target = request.target_branch.strip()
        if not target:
            return service_failure(
                code="configuration_missing",
                message="default target branch is not configured",
                recovery_hint="Run `canopy config set git.default_target_branch main`.",
            )
        name = branch_name(request.prefix, request.ticket_key)
        vcs = self._version_control

        exists = vcs.branch_exists(name)
        if isinstance(exists, ServiceFailure):
            return self._fail(exists, f"Could not check whether {name} exists")
        if exists.outcome:
            return self._fail(
                service_failure(code="conflict", message=f"Branch '{name}' already exists"),
            )

        current = vcs.current_branch_name()
        if isinstance(current, ServiceFailure):
            return self._fail(current, "Could not read the current branch")
        if current.outcome != target:
            log.debug(f"Checking out {target} before creating {name}")
            checked_out = vcs.checkout(target)
            if isinstance(checked_out, ServiceFailure):
                return self._fail(checked_out, f"Failed to checkout {target}")

        warnings: list[str] = []
        pulled = vcs.pull()
        if isinstance(pulled, ServiceFailure):
            warning = f"Failed to pull latest changes: {pulled.message}"
            log.warning(warning)
            warnings.append(warning)

        created = vcs.create_and_checkout(name)
        if isinstance(created, ServiceFailure):
            return self._fail(created, f"Failed to create branch: {name}")
        log.success(f"Successfully created and checked out branch: {name}")
        return service_success(CreateBranchOutcome(branch_name=name, warnings=tuple(warnings)))

    @staticmethod
    def _fail(failure: ServiceFailure, context: str | None = None) -> ServiceFailure:
        if context:
            failure = service_failure(
                code=failure.code,
                message=f"{context}: {failure.message}",
                recovery_hint=failure.recovery_hint,
                cause=failure.cause,
            )
        log.error(failure.message)
        return failure
