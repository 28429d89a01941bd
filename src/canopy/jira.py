"""JIRA Cloud adapter for the issue-tracker port."""

from __future__ import annotations

import re
from typing import Sequence

from . import log
from .http import JsonHttpClient, basic_auth_header
from .models import JiraSection
from .services.errors import CanopyError, ConfigurationError, UnexpectedError
from .services.result import ServiceResult, failure_from_error, service_success
from .tickets import Ticket, TicketFilter

SEARCH_FIELDS = (
    "summary",
    "description",
    "status",
    "assignee",
    "reporter",
    "issuetype",
    "created",
    "updated",
)
_URL_RE = re.compile(r"https?://\S+")


def build_assigned_jql(ticket_filter: TicketFilter) -> str:
    """Return the JQL used to list the current user's tickets.

    Example:
        >>> build_assigned_jql(TicketFilter())
        'assignee = currentUser() AND type != Epic AND statusCategory != Done ORDER BY updated DESC'
    """
    clauses = ["assignee = currentUser()", "type != Epic"]
    if not ticket_filter.show_completed:
        clauses.append("statusCategory != Done")
    return " AND ".join(clauses) + " ORDER BY updated DESC"


def parse_ticket(entry: object) -> Ticket | None:
    """Parse one search result issue into a ``Ticket``."""
    if not isinstance(entry, dict):
        return None
    key = entry.get("key")
    fields = entry.get("fields")
    if not isinstance(key, str) or not key or not isinstance(fields, dict):
        return None
    summary = fields.get("summary")
    status = fields.get("status")
    status_name = status.get("name") if isinstance(status, dict) else None
    return Ticket(
        key=key,
        summary=summary if isinstance(summary, str) else "",
        status_name=status_name if isinstance(status_name, str) else "",
    )


def comment_document(text: str) -> dict[str, object]:
    """Return an Atlassian Document Format body for ``text``.

    URLs become link-marked text nodes so they render as links.
    """
    nodes: list[dict[str, object]] = []
    position = 0
    for match in _URL_RE.finditer(text):
        if match.start() > position:
            nodes.append({"type": "text", "text": text[position : match.start()]})
        url = match.group(0)
        nodes.append(
            {"type": "text", "text": url, "marks": [{"type": "link", "attrs": {"href": url}}]}
        )
        position = match.end()
    if position < len(text):
        nodes.append({"type": "text", "text": text[position:]})
    return {
        "type": "doc",
        "version": 1,
        "content": [{"type": "paragraph", "content": nodes}],
    }


class JiraIssueTracker:
    """Issue tracker backed by the JIRA Cloud REST API v3."""

    def __init__(self, settings: JiraSection, *, client: JsonHttpClient | None = None) -> None:
        self.settings = settings
        self.client = client or JsonHttpClient(
            basic_auth_header(settings.username, settings.api_token)
        )

    @property
    def base_url(self) -> str:
        return self.settings.base_url.rstrip("/")

    def browse_url(self, ticket_key: str) -> str:
        return f"{self.base_url}/browse/{ticket_key}"

    def query_assigned(self, ticket_filter: TicketFilter) -> ServiceResult[Sequence[Ticket]]:
        return self.search(build_assigned_jql(ticket_filter), max_results=ticket_filter.max_results)

    def search(self, jql: str, *, max_results: int = 50) -> ServiceResult[Sequence[Ticket]]:
        """Return tickets matching ``jql`` in tracker order."""
        try:
            self._require_configured()
            log.debug(f"Searching JIRA tickets with JQL: {jql}")
            payload = self.client.post_json(
                f"{self.base_url}/rest/api/3/search/jql",
                {
                    "jql": jql,
                    "maxResults": max_results,
                    "fields": list(SEARCH_FIELDS),
                },
                context="searching tickets",
            )
            if not isinstance(payload, dict) or not isinstance(payload.get("issues"), list):
                raise UnexpectedError("Unexpected JIRA search response")
        except CanopyError as exc:
            return failure_from_error(exc)
        tickets: list[Ticket] = []
        for entry in payload["issues"]:
            ticket = parse_ticket(entry)
            if ticket is None:
                log.warning("Skipping unparseable JIRA issue in search response")
                continue
            tickets.append(ticket)
        log.debug(f"Found {len(tickets)} tickets")
        return service_success(tickets)

    def add_comment(self, ticket_key: str, text: str) -> ServiceResult[None]:
        try:
            self._require_configured()
            self.client.post_json(
                f"{self.base_url}/rest/api/3/issue/{ticket_key}/comment",
                {"body": comment_document(text)},
                context=f"commenting on {ticket_key}",
            )
        except CanopyError as exc:
            return failure_from_error(exc)
        return service_success(None)

    def test_connection(self) -> ServiceResult[str]:
        try:
            self._require_configured()
            self.client.get_json(
                f"{self.base_url}/rest/api/3/myself", context="checking the JIRA connection"
            )
        except CanopyError as exc:
            return failure_from_error(exc)
        return service_success("Connection successful")

    def _require_configured(self) -> None:
        if not self.settings.configured:
            raise ConfigurationError("JIRA configuration is incomplete")
