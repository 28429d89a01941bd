"""Pull request records and branch matching."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .branching import heads_ref


@dataclass(frozen=True)
class PullRequestRef:
    """An open pull request known to the code-review service."""

    id: int
    source_ref_name: str
    url: str
    title: str = ""


def belongs_to_branch(pull_request: PullRequestRef, branch: str) -> bool:
    """Return whether a pull request was opened from ``branch``.

    Matching is an exact string comparison against ``refs/heads/<branch>``.

    Example:
        >>> pr = PullRequestRef(id=1, source_ref_name="refs/heads/feature/ABC-2", url="")
        >>> belongs_to_branch(pr, "feature/ABC-2")
        True
        >>> belongs_to_branch(pr, "feature/ABC-20")
        False
    """
    return pull_request.source_ref_name == heads_ref(branch)


def find_pull_request_for_branch(
    pull_requests: Iterable[PullRequestRef], branch: str
) -> PullRequestRef | None:
    """Return the first pull request whose source ref is ``branch``."""
    for pull_request in pull_requests:
        if belongs_to_branch(pull_request, branch):
            return pull_request
    return None
