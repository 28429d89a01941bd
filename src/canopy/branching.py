"""Helpers for ticket branch naming."""

from __future__ import annotations

HEADS_REF_PREFIX = "refs/heads/"
REMOTE_NAME = "origin"


def branch_name(prefix: str, ticket_key: str) -> str:
    """Return the branch name for a ticket.

    The prefix is applied verbatim; separators are not normalized.

    Example:
        >>> branch_name("feature/", "PROJ-123")
        'feature/PROJ-123'
        >>> branch_name("", "PROJ-123")
        'PROJ-123'
    """
    return prefix + ticket_key


def heads_ref(name: str) -> str:
    """Return the fully qualified ref for a branch name.

    Example:
        >>> heads_ref("feature/PROJ-123")
        'refs/heads/feature/PROJ-123'
    """
    return HEADS_REF_PREFIX + name


def remote_tracking_name(name: str) -> str:
    """Return the ``origin/<name>`` remote-tracking branch name."""
    return f"{REMOTE_NAME}/{name}"
