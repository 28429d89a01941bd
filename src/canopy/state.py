"""Merged per-ticket view of tracker, branch, and pull request state."""

from __future__ import annotations

from dataclasses import dataclass

from .prs import PullRequestRef
from .tickets import Ticket


@dataclass(frozen=True)
class BranchState:
    """Branch status for a ticket's derived branch name."""

    name: str
    exists: bool
    is_current: bool = False

    def __post_init__(self) -> None:
        if self.is_current and not self.exists:
            raise ValueError(f"branch {self.name!r} cannot be current without existing")


@dataclass(frozen=True)
class TicketWorkflowState:
    """Single source of truth for one ticket during one refresh cycle.

    Recomputed wholesale on every refresh; never patched in place.
    """

    ticket: Ticket
    branch: BranchState
    pr: PullRequestRef | None = None
    pr_lookup_failed: bool = False

    def __post_init__(self) -> None:
        if not self.branch.exists and (self.pr is not None or self.pr_lookup_failed):
            raise ValueError(
                f"ticket {self.ticket.key!r} has no branch; pull request state must be empty"
            )

    @property
    def has_pull_request(self) -> bool:
        return self.pr is not None
