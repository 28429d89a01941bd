"""Canopy command-line interface."""

from __future__ import annotations

import json
from typing import NoReturn

import typer
from rich import box
from rich.table import Table

from . import __version__
from . import config as config_util
from . import log as canopy_log
from .actions import TicketAction, action_for_label, resolve_actions
from .branching import branch_name
from .context import CanopyContext, resolve_context
from .io import die, say, select
from .services import (
    CreateBranchRequest,
    CreatePullRequestRequest,
    ServiceFailure,
    SwitchBranchRequest,
)
from .services.errors import CanopyError
from .state import TicketWorkflowState
from .tickets import Ticket, TicketFilter

app = typer.Typer(
    help="Bridge JIRA tickets, git branches, and Azure DevOps pull requests.",
    no_args_is_help=True,
    add_completion=False,
)
config_app = typer.Typer(help="Show or edit Canopy configuration.", no_args_is_help=True)
app.add_typer(config_app, name="config")

_FORMATS = ("table", "json")


def _validate_log_level(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in canopy_log.LEVEL_NAMES:
        raise typer.BadParameter(f"expected one of: {', '.join(canopy_log.LEVEL_NAMES)}")
    return normalized


def _version_callback(value: bool) -> None:
    if value:
        say(f"canopy {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        callback=_validate_log_level,
        help="Log level: trace, debug, info, success, warning, error.",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colorized output."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version."
    ),
) -> None:
    """Canopy keeps ticket, branch, and pull request state in one place."""
    if log_level is not None:
        canopy_log.set_level(log_level)
    if no_color:
        canopy_log.set_no_color(True)


def _fail(failure: ServiceFailure) -> NoReturn:
    die(failure.describe())


def _context() -> CanopyContext:
    try:
        return resolve_context()
    except CanopyError as exc:
        message = exc.message
        if exc.recovery_hint:
            message = f"{message}\nhint: {exc.recovery_hint}"
        die(message)


def _print_warnings(warnings: tuple[str, ...]) -> None:
    for warning in warnings:
        canopy_log.warning(f"warning: {warning}")


def _load_ticket(ctx: CanopyContext, ticket_key: str) -> Ticket:
    fetched = ctx.tracker.query_assigned(
        TicketFilter(show_completed=True, max_results=ctx.config.ui.max_tickets_to_show)
    )
    if isinstance(fetched, ServiceFailure):
        _fail(fetched)
    for ticket in fetched.outcome:
        if ticket.key == ticket_key:
            return ticket
    die(f"ticket {ticket_key} is not assigned to you")


def _ticket_state(ctx: CanopyContext, ticket: Ticket) -> TicketWorkflowState:
    outcome = ctx.reconcile_service().reconcile([ticket], ctx.prefix)
    _print_warnings(outcome.warnings)
    return outcome.states[0]


def _status_style(status_name: str) -> str:
    lowered = status_name.lower()
    if "done" in lowered or "closed" in lowered:
        return ""
    if "progress" in lowered or "development" in lowered:
        return "cyan"
    if "open" in lowered or "to do" in lowered:
        return "yellow"
    return ""


def _branch_cell(state: TicketWorkflowState) -> str:
    if not state.branch.exists:
        return "-"
    if state.branch.is_current:
        return "✓ (current)"
    return "✓"


def _pr_cell(state: TicketWorkflowState) -> str:
    if state.pr_lookup_failed:
        return "?"
    if state.pr is None:
        return "-"
    return f"#{state.pr.id}"


def _state_payload(state: TicketWorkflowState) -> dict[str, object]:
    return {
        "key": state.ticket.key,
        "summary": state.ticket.summary,
        "status": state.ticket.status_name,
        "branch": {
            "name": state.branch.name,
            "exists": state.branch.exists,
            "is_current": state.branch.is_current,
        },
        "pr": (
            None
            if state.pr is None
            else {"id": state.pr.id, "url": state.pr.url, "source_ref": state.pr.source_ref_name}
        ),
        "pr_lookup_failed": state.pr_lookup_failed,
        "actions": [action.value for action in resolve_actions(state)],
    }


def _render_tickets(states: tuple[TicketWorkflowState, ...]) -> None:
    table = Table(box=box.SIMPLE_HEAVY)
    table.add_column("Key", no_wrap=True)
    table.add_column("Summary")
    table.add_column("Status")
    table.add_column("Branch")
    table.add_column("PR")
    for state in states:
        table.add_row(
            state.ticket.key,
            state.ticket.summary,
            f"[{style}]{state.ticket.status_name}[/]"
            if (style := _status_style(state.ticket.status_name))
            else state.ticket.status_name,
            _branch_cell(state),
            _pr_cell(state),
        )
    canopy_log.console().print(table)


@app.command("tickets")
def tickets_cmd(
    output_format: str = typer.Option("table", "--format", help="Output format: table or json."),
) -> None:
    """List assigned tickets with their branch and pull request state."""
    format_value = output_format.strip().lower()
    if format_value not in _FORMATS:
        die(f"unsupported format: {format_value}")
    ctx = _context()
    canopy_log.debug("Loading tickets...")
    result = ctx.reconcile_service().run(ctx.reconcile_request())
    if isinstance(result, ServiceFailure):
        _fail(result)
    outcome = result.outcome
    if format_value == "json":
        payload = {
            "tickets": [_state_payload(state) for state in outcome.states],
            "warnings": list(outcome.warnings),
        }
        say(json.dumps(payload, indent=2))
        return
    _render_tickets(outcome.states)
    _print_warnings(outcome.warnings)
    canopy_log.info(f"Loaded {len(outcome.states)} tickets")


@app.command("actions")
def actions_cmd(
    ticket_key: str = typer.Argument(..., help="Ticket key, e.g. PROJ-123."),
    choose: bool = typer.Option(False, "--choose", help="Pick an action and run it."),
) -> None:
    """Show the actions available for a ticket."""
    ctx = _context()
    ticket = _load_ticket(ctx, ticket_key)
    state = _ticket_state(ctx, ticket)
    actions = resolve_actions(state)
    if not choose:
        for action in actions:
            say(action.label)
        return
    label = select(
        f"Choose action for {ticket.key}:",
        [action.label for action in actions],
        default=actions[0].label,
    )
    chosen = action_for_label(label)
    if chosen is None:
        die(f"unknown action: {label}")
    _run_action(ctx, state, chosen)


def _run_action(ctx: CanopyContext, state: TicketWorkflowState, action: TicketAction) -> None:
    if action is TicketAction.VIEW_IN_TRACKER:
        typer.launch(ctx.tracker.browse_url(state.ticket.key))
    elif action is TicketAction.CREATE_BRANCH:
        _create_branch(ctx, state.ticket, ctx.target_branch)
    elif action is TicketAction.SWITCH_TO_BRANCH:
        _switch_branch(ctx, state.ticket.key)
    elif action is TicketAction.CREATE_PR:
        _create_pull_request(ctx, state.ticket, ctx.target_branch)
    elif action is TicketAction.VIEW_PR and state.pr is not None:
        typer.launch(state.pr.url)


def _create_branch(ctx: CanopyContext, ticket: Ticket, target_branch: str) -> None:
    result = ctx.create_branch_service().run(
        CreateBranchRequest(ticket_key=ticket.key, prefix=ctx.prefix, target_branch=target_branch)
    )
    if isinstance(result, ServiceFailure):
        _fail(result)
    _print_warnings(result.outcome.warnings)
    say(f"Successfully created and checked out branch: {result.outcome.branch_name}")
    _print_next_actions(ctx, ticket)


def _switch_branch(ctx: CanopyContext, ticket_key: str) -> None:
    result = ctx.switch_branch_service().run(
        SwitchBranchRequest(ticket_key=ticket_key, prefix=ctx.prefix)
    )
    if isinstance(result, ServiceFailure):
        _fail(result)
    say(f"Switched to branch: {result.outcome.branch_name}")


def _create_pull_request(ctx: CanopyContext, ticket: Ticket, target_branch: str) -> None:
    result = ctx.create_pull_request_service().run(
        CreatePullRequestRequest(
            ticket=ticket,
            source_branch=branch_name(ctx.prefix, ticket.key),
            target_branch=target_branch,
        )
    )
    if isinstance(result, ServiceFailure):
        _fail(result)
    _print_warnings(result.outcome.warnings)
    pull_request = result.outcome.pull_request
    say(f"Successfully created pull request #{pull_request.id}: {pull_request.url}")
    _print_next_actions(ctx, ticket)


def _print_next_actions(ctx: CanopyContext, ticket: Ticket) -> None:
    state = _ticket_state(ctx, ticket)
    labels = ", ".join(action.label for action in resolve_actions(state))
    say(f"Available actions for {ticket.key}: {labels}")


@app.command("branch")
def branch_cmd(
    ticket_key: str = typer.Argument(..., help="Ticket key, e.g. PROJ-123."),
    target: str | None = typer.Option(None, "--target", help="Base branch override."),
) -> None:
    """Create and check out the branch for a ticket."""
    ctx = _context()
    ticket = _load_ticket(ctx, ticket_key)
    _create_branch(ctx, ticket, target or ctx.target_branch)


@app.command("switch")
def switch_cmd(
    ticket_key: str = typer.Argument(..., help="Ticket key, e.g. PROJ-123."),
) -> None:
    """Check out an existing ticket branch."""
    _switch_branch(_context(), ticket_key)


@app.command("pr")
def pr_cmd(
    ticket_key: str = typer.Argument(..., help="Ticket key, e.g. PROJ-123."),
    target: str | None = typer.Option(None, "--target", help="Target branch override."),
) -> None:
    """Create a pull request for a ticket branch."""
    ctx = _context()
    ticket = _load_ticket(ctx, ticket_key)
    _create_pull_request(ctx, ticket, target or ctx.target_branch)


@app.command("open")
def open_cmd(
    ticket_key: str = typer.Argument(..., help="Ticket key, e.g. PROJ-123."),
    pr: bool = typer.Option(False, "--pr", help="Open the ticket's pull request instead."),
) -> None:
    """Open a ticket (or its pull request) in the browser."""
    ctx = _context()
    if not pr:
        typer.launch(ctx.tracker.browse_url(ticket_key))
        return
    state = _ticket_state(ctx, _load_ticket(ctx, ticket_key))
    if state.pr is None:
        die(f"no open pull request for {state.branch.name}")
    typer.launch(state.pr.url)


@app.command("check")
def check_cmd() -> None:
    """Test the JIRA and Azure DevOps connections."""
    ctx = _context()
    result = ctx.check_connections_service().run()
    if isinstance(result, ServiceFailure):
        _fail(result)
    for check in result.outcome.checks:
        if check.ok:
            canopy_log.success(f"{check.name}: {check.message}")
        else:
            canopy_log.error(f"{check.name}: {check.message}")
    if not result.outcome.all_ok:
        raise typer.Exit(code=1)


@config_app.command("show")
def config_show_cmd() -> None:
    """Print the effective configuration with secrets masked."""
    try:
        config = config_util.load_config()
    except CanopyError as exc:
        die(exc.message)
    say(json.dumps(config_util.redacted_dump(config), indent=2))
    missing = config_util.missing_settings(config)
    if missing:
        canopy_log.warning(f"missing settings: {', '.join(missing)}")


@config_app.command("set")
def config_set_cmd(
    key: str = typer.Argument(..., help="Dotted key, e.g. git.branch_prefix."),
    value: str = typer.Argument(..., help="New value."),
) -> None:
    """Set one configuration value."""
    try:
        updated = config_util.set_value(config_util.load_config(env={}), key, value)
        path = config_util.write_config(updated)
    except CanopyError as exc:
        die(exc.message)
    say(f"Updated {key} in {path}")


if __name__ == "__main__":  # pragma: no cover
    app()
