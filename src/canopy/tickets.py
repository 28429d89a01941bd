"""Issue-tracker ticket records."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Ticket:
    """A tracker work item as fetched for one refresh cycle.

    Attributes:
        key: Unique, stable ticket identifier (e.g. ``PROJ-123``).
        summary: One-line ticket summary.
        status_name: Tracker status label (e.g. ``In Progress``).
    """

    key: str
    summary: str
    status_name: str


@dataclass(frozen=True)
class TicketFilter:
    """Query options for assigned-ticket lookups."""

    show_completed: bool = False
    max_results: int = 50


def ticket_title(ticket: Ticket) -> str:
    """Return the pull request title for a ticket.

    Example:
        >>> ticket_title(Ticket(key="PROJ-1", summary="Fix login", status_name="To Do"))
        '[PROJ-1]: Fix login'
    """
    return f"[{ticket.key}]: {ticket.summary}"
