"""Create a pull request for a ticket branch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel

from .. import log
from ..prs import PullRequestRef
from ..tickets import Ticket, ticket_title
from .result import ServiceFailure, ServiceResult, service_failure, service_success

if TYPE_CHECKING:
    from ..ports import CodeReview, DiffSummarizer, IssueTracker, VersionControl

FOOTER = (
    "*This pull request was created automatically by "
    "[Canopy](https://plugins.jetbrains.com/plugin/28641-canopy)*"
)


class CreatePullRequestRequest(BaseModel):
    """Input contract for pull request creation.

    Attributes:
        ticket: Ticket the pull request implements.
        source_branch: Branch holding the changes.
        target_branch: Branch the changes merge into.
    """

    ticket: Ticket
    source_branch: str
    target_branch: str


@dataclass(frozen=True)
class CreatePullRequestOutcome:
    """Outcome payload for pull request creation.

    Args:
        pull_request: The created pull request.
        warnings: Best-effort steps that failed (e.g. the ticket comment).
    """

    pull_request: PullRequestRef
    warnings: tuple[str, ...] = ()


def pull_request_comment(pull_request: PullRequestRef) -> str:
    return f"Pull request #{pull_request.id} created: {pull_request.url}"


def render_description(ticket: Ticket, *, ticket_url: str, ai_summary: str | None) -> str:
    """Render the pull request description markdown.

    Example:
        >>> ticket = Ticket(key="PROJ-1", summary="Fix login", status_name="To Do")
        >>> print(render_description(ticket, ticket_url="https://jira/browse/PROJ-1",
        ...                          ai_summary=None).splitlines()[0])
        ## PROJ-1: Fix login
    """
    lines = [f"## {ticket.key}: {ticket.summary}", ""]
    if ai_summary:
        lines.extend(["### AI Summary", ai_summary, ""])
    lines.extend(
        [
            "### Links",
            f"[View in JIRA]({ticket_url})",
            "",
            "---",
            FOOTER,
        ]
    )
    return "\n".join(lines) + "\n"


class CreatePullRequestService:
    """Open a pull request for a ticket branch.

    The AI summary and the follow-up ticket comment are enrichments: their
    failures never fail the call. Only the code-review ``create`` failure is
    returned as the terminal error.
    """

    def __init__(
        self,
        *,
        tracker: IssueTracker,
        version_control: VersionControl,
        code_review: CodeReview,
        summarizer: DiffSummarizer | None = None,
    ) -> None:
        self._tracker = tracker
        self._version_control = version_control
        self._code_review = code_review
        self._summarizer = summarizer

    def run(
        self, request: CreatePullRequestRequest
    ) -> ServiceResult[CreatePullRequestOutcome]:
        ticket = request.ticket
        title = ticket_title(ticket)
        description = self.build_description(
            ticket, request.source_branch, request.target_branch
        )

        created = self._code_review.create(
            request.source_branch, request.target_branch, title, description
        )
        if isinstance(created, ServiceFailure):
            failure = service_failure(
                code=created.code,
                message=f"Failed to create pull request: {created.message}",
                recovery_hint=created.recovery_hint,
                cause=created.cause,
            )
            log.error(failure.message)
            return failure
        pull_request = created.outcome
        log.success(f"Successfully created pull request #{pull_request.id}")

        warnings: list[str] = []
        commented = self._tracker.add_comment(ticket.key, pull_request_comment(pull_request))
        if isinstance(commented, ServiceFailure):
            warning = f"Failed to comment on {ticket.key}: {commented.message}"
            log.warning(warning)
            warnings.append(warning)
        return service_success(
            CreatePullRequestOutcome(pull_request=pull_request, warnings=tuple(warnings))
        )

    def build_description(self, ticket: Ticket, source_branch: str, target_branch: str) -> str:
        return render_description(
            ticket,
            ticket_url=self._tracker.browse_url(ticket.key),
            ai_summary=self._summarize(source_branch, target_branch),
        )

    def _summarize(self, source_branch: str, target_branch: str) -> str | None:
        if self._summarizer is None:
            return None
        diff = self._version_control.diff(source_branch, target_branch)
        if isinstance(diff, ServiceFailure):
            log.debug(f"Skipping AI summary: {diff.message}")
            return None
        try:
            summary = self._summarizer.summarize(diff.outcome)
        except Exception as exc:  # noqa: BLE001 - summarizer errors omit the section
            log.debug(f"Skipping AI summary: {exc}")
            return None
        if not summary or not summary.strip():
            return None
        return summary.strip()
