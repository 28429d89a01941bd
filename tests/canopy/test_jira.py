from __future__ import annotations

import http.client
from unittest.mock import patch

import pytest

import canopy.jira as jira
from canopy.models import JiraSection
from canopy.services import ServiceFailure, ServiceSuccess, TransportError
from canopy.tickets import Ticket, TicketFilter
from tests.canopy.helpers import FakeJsonClient as FakeClient

SETTINGS = JiraSection(
    base_url="https://example.atlassian.net/",
    username="dev@example.com",
    api_token="token",
)


def _issue(key: str, summary: str = "Summary", status: str = "To Do") -> dict:
    return {"key": key, "fields": {"summary": summary, "status": {"name": status}}}


def test_jql_excludes_done_by_default() -> None:
    assert jira.build_assigned_jql(TicketFilter(show_completed=False)) == (
        "assignee = currentUser() AND type != Epic AND statusCategory != Done "
        "ORDER BY updated DESC"
    )


def test_jql_includes_done_when_requested() -> None:
    assert jira.build_assigned_jql(TicketFilter(show_completed=True)) == (
        "assignee = currentUser() AND type != Epic ORDER BY updated DESC"
    )


def test_query_assigned_posts_search_and_keeps_order() -> None:
    client = FakeClient({"issues": [_issue("B-2", "Second"), _issue("A-1", "First", "Done")]})
    tracker = jira.JiraIssueTracker(SETTINGS, client=client)  # type: ignore[arg-type]

    result = tracker.query_assigned(TicketFilter(max_results=25))

    assert isinstance(result, ServiceSuccess)
    assert result.outcome == [
        Ticket(key="B-2", summary="Second", status_name="To Do"),
        Ticket(key="A-1", summary="First", status_name="Done"),
    ]
    method, url, payload = client.calls[0]
    assert method == "POST"
    assert url == "https://example.atlassian.net/rest/api/3/search/jql"
    assert isinstance(payload, dict)
    assert payload["maxResults"] == 25
    assert "statusCategory != Done" in payload["jql"]
    assert "summary" in payload["fields"]


def test_query_assigned_skips_malformed_issues() -> None:
    client = FakeClient({"issues": [{"key": "A-1"}, "junk", _issue("B-2")]})
    tracker = jira.JiraIssueTracker(SETTINGS, client=client)  # type: ignore[arg-type]

    result = tracker.query_assigned(TicketFilter())

    assert isinstance(result, ServiceSuccess)
    assert [ticket.key for ticket in result.outcome] == ["B-2"]


def test_query_assigned_rejects_unexpected_payload() -> None:
    tracker = jira.JiraIssueTracker(SETTINGS, client=FakeClient({"errors": []}))  # type: ignore[arg-type]

    result = tracker.query_assigned(TicketFilter())

    assert isinstance(result, ServiceFailure)
    assert result.code == "unexpected_state"


def test_transport_errors_become_failures() -> None:
    error = TransportError("Authentication failed while searching tickets: HTTP 401 - Unauthorized")
    tracker = jira.JiraIssueTracker(SETTINGS, client=FakeClient(error=error))  # type: ignore[arg-type]

    result = tracker.query_assigned(TicketFilter())

    assert isinstance(result, ServiceFailure)
    assert result.code == "transport_failed"
    assert "HTTP 401" in result.message


def test_unconfigured_tracker_does_not_call_out() -> None:
    client = FakeClient({"issues": []})
    tracker = jira.JiraIssueTracker(JiraSection(), client=client)  # type: ignore[arg-type]

    result = tracker.query_assigned(TicketFilter())

    assert isinstance(result, ServiceFailure)
    assert result.code == "configuration_missing"
    assert client.calls == []


def test_add_comment_posts_document() -> None:
    client = FakeClient(None)
    tracker = jira.JiraIssueTracker(SETTINGS, client=client)  # type: ignore[arg-type]

    result = tracker.add_comment("A-1", "Pull request #7 created: https://x/pr/7")

    assert result == ServiceSuccess(outcome=None)
    method, url, payload = client.calls[0]
    assert url == "https://example.atlassian.net/rest/api/3/issue/A-1/comment"
    assert isinstance(payload, dict)
    assert payload["body"]["type"] == "doc"


def test_comment_document_marks_links() -> None:
    document = jira.comment_document("Pull request #7 created: https://x/pr/7")

    nodes = document["content"][0]["content"]  # type: ignore[index]
    assert nodes == [
        {"type": "text", "text": "Pull request #7 created: "},
        {
            "type": "text",
            "text": "https://x/pr/7",
            "marks": [{"type": "link", "attrs": {"href": "https://x/pr/7"}}],
        },
    ]


def test_browse_url_strips_trailing_slash() -> None:
    tracker = jira.JiraIssueTracker(SETTINGS, client=FakeClient())  # type: ignore[arg-type]

    assert tracker.browse_url("A-1") == "https://example.atlassian.net/browse/A-1"


@pytest.mark.parametrize(
    ("error", "ok"),
    [(None, True), (TransportError("Network error while checking: refused"), False)],
)
def test_connection_probe(error: Exception | None, ok: bool) -> None:
    client = FakeClient({"accountId": "1"}, error=error)
    tracker = jira.JiraIssueTracker(SETTINGS, client=client)  # type: ignore[arg-type]

    result = tracker.test_connection()

    assert result.ok is ok
    assert client.calls[0][1].endswith("/rest/api/3/myself")


def test_truncated_comment_response_is_a_failure_result() -> None:
    tracker = jira.JiraIssueTracker(SETTINGS)

    def fake_urlopen(request: object, timeout: float) -> object:
        raise http.client.IncompleteRead(b"partial")

    with patch("canopy.http.urllib.request.urlopen", fake_urlopen):
        result = tracker.add_comment("A-1", "Pull request #7 created: https://x/pr/7")

    assert isinstance(result, ServiceFailure)
    assert result.code == "transport_failed"


def test_scheme_less_base_url_is_a_configuration_failure() -> None:
    settings = JiraSection.model_construct(
        base_url="example.atlassian.net", username="dev@example.com", api_token="token"
    )
    tracker = jira.JiraIssueTracker(settings)

    result = tracker.query_assigned(TicketFilter())

    assert isinstance(result, ServiceFailure)
    assert result.code == "configuration_missing"
