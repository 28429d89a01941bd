"""Legal ticket actions derived from workflow state."""

from __future__ import annotations

from enum import Enum

from .state import TicketWorkflowState


class TicketAction(str, Enum):
    """An operation a user may take on a ticket."""

    VIEW_IN_TRACKER = "view-in-tracker"
    CREATE_BRANCH = "create-branch"
    SWITCH_TO_BRANCH = "switch-to-branch"
    CREATE_PR = "create-pr"
    VIEW_PR = "view-pr"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    TicketAction.VIEW_IN_TRACKER: "View in JIRA",
    TicketAction.CREATE_BRANCH: "Create Branch",
    TicketAction.SWITCH_TO_BRANCH: "Switch to Branch",
    TicketAction.CREATE_PR: "Create Pull Request",
    TicketAction.VIEW_PR: "View Pull Request",
}


class WorkflowPhase(str, Enum):
    """Classification of a ticket's branch situation."""

    NO_BRANCH = "no-branch"
    BRANCH_ELSEWHERE = "branch-elsewhere"
    BRANCH_CURRENT = "branch-current"


def classify(state: TicketWorkflowState) -> WorkflowPhase:
    if not state.branch.exists:
        return WorkflowPhase.NO_BRANCH
    if state.branch.is_current:
        return WorkflowPhase.BRANCH_CURRENT
    return WorkflowPhase.BRANCH_ELSEWHERE


def resolve_actions(state: TicketWorkflowState) -> tuple[TicketAction, ...]:
    """Return the ordered legal actions for a ticket.

    ``VIEW_IN_TRACKER`` is always first. When a branch exists exactly one of
    ``CREATE_PR``/``VIEW_PR`` is present.
    """
    phase = classify(state)
    if phase is WorkflowPhase.NO_BRANCH:
        return (TicketAction.VIEW_IN_TRACKER, TicketAction.CREATE_BRANCH)
    pr_action = TicketAction.VIEW_PR if state.pr is not None else TicketAction.CREATE_PR
    if phase is WorkflowPhase.BRANCH_ELSEWHERE:
        return (TicketAction.VIEW_IN_TRACKER, TicketAction.SWITCH_TO_BRANCH, pr_action)
    return (TicketAction.VIEW_IN_TRACKER, pr_action)


def action_for_label(label: str) -> TicketAction | None:
    for action, action_label in _LABELS.items():
        if action_label == label:
            return action
    return None
