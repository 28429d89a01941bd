"""Typed collaborator ports consumed by the reconciliation and workflow services.

Every method returns a ``ServiceResult`` instead of raising for expected
failures, so services can decide per call whether a failure is fatal or a
downgraded warning.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from .prs import PullRequestRef
from .services.result import ServiceResult
from .tickets import Ticket, TicketFilter


class IssueTracker(Protocol):
    """Ticket queries and comments on the issue tracker."""

    def query_assigned(self, ticket_filter: TicketFilter) -> ServiceResult[Sequence[Ticket]]: ...

    def add_comment(self, ticket_key: str, text: str) -> ServiceResult[None]: ...

    def browse_url(self, ticket_key: str) -> str: ...


class VersionControl(Protocol):
    """Branch operations on the shared working copy."""

    def branch_exists(self, name: str) -> ServiceResult[bool]: ...

    def current_branch_name(self) -> ServiceResult[str | None]: ...

    def checkout(self, name: str) -> ServiceResult[None]: ...

    def pull(self) -> ServiceResult[None]: ...

    def create_and_checkout(self, name: str) -> ServiceResult[None]: ...

    def diff(self, from_branch: str, to_branch: str) -> ServiceResult[str]: ...


class CodeReview(Protocol):
    """Pull request queries and creation on the code-review service."""

    def list_open_pull_requests(self) -> ServiceResult[Sequence[PullRequestRef]]: ...

    def create(
        self,
        source_branch: str,
        target_branch: str,
        title: str,
        description: str,
    ) -> ServiceResult[PullRequestRef]: ...


class DiffSummarizer(Protocol):
    """Optional diff summarization; ``None`` means no summary is available."""

    def summarize(self, diff_text: str) -> str | None: ...
