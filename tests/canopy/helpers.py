# ruff: noqa: E402

from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import Sequence

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from canopy import exec as exec_util
from canopy.models import CanopyConfig
from canopy.prs import PullRequestRef
from canopy.services.errors import ServiceFailureCode
from canopy.services.result import (
    ServiceFailure,
    ServiceResult,
    service_failure,
    service_success,
)
from canopy.tickets import Ticket, TicketFilter

JIRA_BASE = "https://example.atlassian.net"


def make_ticket(key: str = "PROJ-123", summary: str = "Fix login", status: str = "To Do") -> Ticket:
    return Ticket(key=key, summary=summary, status_name=status)


def make_pr(pr_id: int, branch: str, url: str | None = None) -> PullRequestRef:
    return PullRequestRef(
        id=pr_id,
        source_ref_name=f"refs/heads/{branch}",
        url=url or f"https://dev.azure.com/org/proj/_git/repo/pullrequest/{pr_id}",
    )


def failure(message: str, code: ServiceFailureCode = "transport_failed") -> ServiceFailure:
    return service_failure(code=code, message=message)


def configured_config(**sections: dict) -> CanopyConfig:
    payload: dict = {
        "jira": {
            "base_url": JIRA_BASE,
            "username": "dev@example.com",
            "api_token": "jira-token",
        },
        "azure_devops": {
            "organization": "org",
            "project": "proj",
            "personal_access_token": "pat",
            "repository": "repo",
        },
    }
    for name, values in sections.items():
        payload.setdefault(name, {}).update(values)
    return CanopyConfig.model_validate(payload)


class FakeIssueTracker:
    def __init__(
        self,
        tickets: Sequence[Ticket] = (),
        *,
        query_failure: ServiceFailure | None = None,
        comment_failure: ServiceFailure | None = None,
    ) -> None:
        self.tickets = list(tickets)
        self.query_failure = query_failure
        self.comment_failure = comment_failure
        self.filters: list[TicketFilter] = []
        self.comments: list[tuple[str, str]] = []

    def query_assigned(self, ticket_filter: TicketFilter) -> ServiceResult[Sequence[Ticket]]:
        self.filters.append(ticket_filter)
        if self.query_failure is not None:
            return self.query_failure
        return service_success(list(self.tickets))

    def add_comment(self, ticket_key: str, text: str) -> ServiceResult[None]:
        self.comments.append((ticket_key, text))
        if self.comment_failure is not None:
            return self.comment_failure
        return service_success(None)

    def browse_url(self, ticket_key: str) -> str:
        return f"{JIRA_BASE}/browse/{ticket_key}"


class FakeVersionControl:
    """In-memory working copy that records every call in ``calls``."""

    def __init__(
        self,
        *,
        branches: Sequence[str] = ("main",),
        current: str | None = "main",
        failures: dict[str, ServiceFailure] | None = None,
        branch_failures: dict[str, ServiceFailure] | None = None,
        diff_text: str = "diff --git a/x b/x",
    ) -> None:
        self.branches = set(branches)
        self.current = current
        self.failures = dict(failures or {})
        self.branch_failures = dict(branch_failures or {})
        self.diff_text = diff_text
        self.calls: list[tuple[str, ...]] = []
        self._lock = threading.Lock()

    def _record(self, *call: str) -> ServiceFailure | None:
        with self._lock:
            self.calls.append(call)
        return self.failures.get(call[0])

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]

    def branch_exists(self, name: str) -> ServiceResult[bool]:
        failed = self._record("branch_exists", name) or self.branch_failures.get(name)
        if failed is not None:
            return failed
        return service_success(name in self.branches)

    def current_branch_name(self) -> ServiceResult[str | None]:
        failed = self._record("current_branch_name")
        if failed is not None:
            return failed
        return service_success(self.current)

    def checkout(self, name: str) -> ServiceResult[None]:
        failed = self._record("checkout", name)
        if failed is not None:
            return failed
        self.current = name
        return service_success(None)

    def pull(self) -> ServiceResult[None]:
        failed = self._record("pull")
        if failed is not None:
            return failed
        return service_success(None)

    def create_and_checkout(self, name: str) -> ServiceResult[None]:
        failed = self._record("create_and_checkout", name)
        if failed is not None:
            return failed
        self.branches.add(name)
        self.current = name
        return service_success(None)

    def diff(self, from_branch: str, to_branch: str) -> ServiceResult[str]:
        failed = self._record("diff", from_branch, to_branch)
        if failed is not None:
            return failed
        return service_success(self.diff_text)


class FakeCodeReview:
    def __init__(
        self,
        pull_requests: Sequence[PullRequestRef] = (),
        *,
        list_failure: ServiceFailure | None = None,
        create_failure: ServiceFailure | None = None,
        next_id: int = 42,
    ) -> None:
        self.pull_requests = list(pull_requests)
        self.list_failure = list_failure
        self.create_failure = create_failure
        self.next_id = next_id
        self.list_calls = 0
        self.created: list[dict[str, str]] = []
        self._lock = threading.Lock()

    def list_open_pull_requests(self) -> ServiceResult[Sequence[PullRequestRef]]:
        with self._lock:
            self.list_calls += 1
        if self.list_failure is not None:
            return self.list_failure
        return service_success(list(self.pull_requests))

    def create(
        self,
        source_branch: str,
        target_branch: str,
        title: str,
        description: str,
    ) -> ServiceResult[PullRequestRef]:
        self.created.append(
            {
                "source": source_branch,
                "target": target_branch,
                "title": title,
                "description": description,
            }
        )
        if self.create_failure is not None:
            return self.create_failure
        pull_request = make_pr(self.next_id, source_branch)
        self.pull_requests.append(pull_request)
        return service_success(pull_request)


class FakeSummarizer:
    def __init__(self, summary: str | None = "Adds a login fix.", *, error: Exception | None = None):
        self.summary = summary
        self.error = error
        self.diffs: list[str] = []

    def summarize(self, diff_text: str) -> str | None:
        self.diffs.append(diff_text)
        if self.error is not None:
            raise self.error
        return self.summary


class ScriptedRunner:
    """Command runner returning queued results keyed by git subcommand args."""

    def __init__(self, responses: dict[tuple[str, ...], exec_util.CommandResult | None]):
        self.responses = responses
        self.requests: list[exec_util.CommandRequest] = []

    def run(self, request: exec_util.CommandRequest) -> exec_util.CommandResult | None:
        self.requests.append(request)
        args = tuple(request.argv[3:])
        if args not in self.responses:
            raise AssertionError(f"unexpected command: {request.argv}")
        return self.responses[args]


def command_result(returncode: int = 0, stdout: str = "", stderr: str = "") -> exec_util.CommandResult:
    return exec_util.CommandResult(argv=(), returncode=returncode, stdout=stdout, stderr=stderr)


class FakeJsonClient:
    """Stand-in for ``JsonHttpClient`` recording ``(method, url, payload)`` calls."""

    def __init__(self, response: object = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str, object]] = []

    def get_json(self, url: str, *, context: str) -> object:
        return self._respond("GET", url, None)

    def post_json(self, url: str, payload: object, *, context: str) -> object:
        return self._respond("POST", url, payload)

    def _respond(self, method: str, url: str, payload: object) -> object:
        self.calls.append((method, url, payload))
        if self.error is not None:
            raise self.error
        return self.response
