"""Reconcile tracker tickets with branch and pull request state."""

from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from pydantic import BaseModel, Field

from .. import log
from ..branching import branch_name
from ..prs import find_pull_request_for_branch
from ..state import BranchState, TicketWorkflowState
from ..tickets import Ticket, TicketFilter
from .result import ServiceFailure, ServiceResult, service_success

if TYPE_CHECKING:
    from ..ports import CodeReview, IssueTracker, VersionControl

DEFAULT_MAX_WORKERS = 8


class ReconcileTicketsRequest(BaseModel):
    """Input contract for a full refresh.

    Attributes:
        prefix: Branch prefix applied to ticket keys.
        show_completed: Include tickets in the Done status category.
        max_results: Upper bound on tickets fetched from the tracker.
    """

    prefix: str
    show_completed: bool = False
    max_results: int = Field(default=50, ge=1)


@dataclass(frozen=True)
class ReconcileOutcome:
    """Workflow states in tracker order plus any per-ticket degradations.

    Args:
        states: One state per input ticket, in input order.
        warnings: Human-readable notes for lookups that failed and were
            downgraded.
    """

    states: tuple[TicketWorkflowState, ...]
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class _TicketEvaluation:
    state: TicketWorkflowState
    warnings: tuple[str, ...]


class ReconcileTicketsService:
    """Compute each ticket's ``TicketWorkflowState``.

    Only a failure to fetch the ticket list fails the call; branch and pull
    request lookup failures degrade the affected ticket and are reported as
    warnings.
    """

    def __init__(
        self,
        *,
        tracker: IssueTracker,
        version_control: VersionControl,
        code_review: CodeReview,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._tracker = tracker
        self._version_control = version_control
        self._code_review = code_review
        self._max_workers = max(int(max_workers), 1)

    def run(self, request: ReconcileTicketsRequest) -> ServiceResult[ReconcileOutcome]:
        """Fetch assigned tickets and reconcile them.

        Returns:
            ``ServiceSuccess`` with the reconciled states, or the tracker's
            ``ServiceFailure`` when tickets could not be fetched.
        """

        fetched = self._tracker.query_assigned(
            TicketFilter(show_completed=request.show_completed, max_results=request.max_results)
        )
        if isinstance(fetched, ServiceFailure):
            log.error(f"Failed to load tickets: {fetched.message}")
            return fetched
        return service_success(self.reconcile(fetched.outcome, request.prefix))

    def reconcile(self, tickets: Sequence[Ticket], prefix: str) -> ReconcileOutcome:
        """Return one state per ticket, preserving input order."""
        if not tickets:
            return ReconcileOutcome(states=())
        warnings: list[str] = []
        current = self._version_control.current_branch_name()
        current_branch: str | None = None
        if isinstance(current, ServiceFailure):
            warnings.append(f"Could not read the current branch: {current.message}")
        else:
            current_branch = current.outcome

        workers = min(self._max_workers, len(tickets))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            evaluations = list(
                executor.map(
                    lambda ticket: self._evaluate(ticket, prefix, current_branch), tickets
                )
            )
        for evaluation in evaluations:
            warnings.extend(evaluation.warnings)
        for warning in warnings:
            log.warning(warning)
        return ReconcileOutcome(
            states=tuple(evaluation.state for evaluation in evaluations),
            warnings=tuple(warnings),
        )

    def _evaluate(
        self, ticket: Ticket, prefix: str, current_branch: str | None
    ) -> _TicketEvaluation:
        name = branch_name(prefix, ticket.key)
        exists = self._version_control.branch_exists(name)
        if isinstance(exists, ServiceFailure):
            return _TicketEvaluation(
                state=TicketWorkflowState(ticket=ticket, branch=BranchState(name, exists=False)),
                warnings=(f"Failed to check branch for {ticket.key}: {exists.message}",),
            )
        if not exists.outcome:
            return _TicketEvaluation(
                state=TicketWorkflowState(ticket=ticket, branch=BranchState(name, exists=False)),
                warnings=(),
            )

        branch = BranchState(name, exists=True, is_current=current_branch == name)
        pull_requests = self._code_review.list_open_pull_requests()
        if isinstance(pull_requests, ServiceFailure):
            return _TicketEvaluation(
                state=TicketWorkflowState(ticket=ticket, branch=branch, pr_lookup_failed=True),
                warnings=(f"Failed to check PR for {ticket.key}: {pull_requests.message}",),
            )
        return _TicketEvaluation(
            state=TicketWorkflowState(
                ticket=ticket,
                branch=branch,
                pr=find_pull_request_for_branch(pull_requests.outcome, name),
            ),
            warnings=(),
        )
