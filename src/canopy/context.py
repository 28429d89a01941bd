"""Composition root wiring adapters into the workflow services."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from . import config as config_util
from .ai import OpenAIDiffSummarizer, ai_enabled
from .azure_devops import AzureDevOpsCodeReview
from .git import GitVersionControl, discover_repo_root
from .jira import JiraIssueTracker
from .models import CanopyConfig
from .services import (
    CreateBranchService,
    CreatePullRequestService,
    ReconcileTicketsRequest,
    ReconcileTicketsService,
    SwitchBranchService,
)
from .services.check_connections import CheckConnectionsService, ConnectionProbe
from .services.errors import NotFoundError

if TYPE_CHECKING:
    from .ports import CodeReview, DiffSummarizer, IssueTracker, VersionControl


@dataclass(frozen=True)
class CanopyContext:
    """Adapters built once per process and shared by reference."""

    config: CanopyConfig
    repo_root: Path
    tracker: IssueTracker
    version_control: VersionControl
    code_review: CodeReview
    summarizer: DiffSummarizer | None = None
    connection_probes: tuple[tuple[str, ConnectionProbe], ...] = field(default_factory=tuple)

    @property
    def prefix(self) -> str:
        return self.config.git.branch_prefix

    @property
    def target_branch(self) -> str:
        return self.config.git.default_target_branch

    def reconcile_service(self) -> ReconcileTicketsService:
        return ReconcileTicketsService(
            tracker=self.tracker,
            version_control=self.version_control,
            code_review=self.code_review,
        )

    def reconcile_request(self) -> ReconcileTicketsRequest:
        return ReconcileTicketsRequest(
            prefix=self.prefix,
            show_completed=self.config.ui.show_completed_tickets,
            max_results=self.config.ui.max_tickets_to_show,
        )

    def create_branch_service(self) -> CreateBranchService:
        return CreateBranchService(version_control=self.version_control)

    def switch_branch_service(self) -> SwitchBranchService:
        return SwitchBranchService(version_control=self.version_control)

    def create_pull_request_service(self) -> CreatePullRequestService:
        return CreatePullRequestService(
            tracker=self.tracker,
            version_control=self.version_control,
            code_review=self.code_review,
            summarizer=self.summarizer,
        )

    def check_connections_service(self) -> CheckConnectionsService:
        return CheckConnectionsService(probes=self.connection_probes)


def build_context(config: CanopyConfig, repo_root: Path) -> CanopyContext:
    """Construct the real adapters for ``repo_root``."""
    version_control = GitVersionControl(repo_root, git_path=config.git.path)
    tracker = JiraIssueTracker(config.jira)
    code_review = AzureDevOpsCodeReview(
        config.azure_devops, repository=version_control.repository_name()
    )
    summarizer = OpenAIDiffSummarizer(config.ai) if ai_enabled(config.ai) else None
    return CanopyContext(
        config=config,
        repo_root=repo_root,
        tracker=tracker,
        version_control=version_control,
        code_review=code_review,
        summarizer=summarizer,
        connection_probes=(
            ("JIRA", tracker.test_connection),
            ("Azure DevOps", code_review.test_connection),
        ),
    )


def resolve_context(
    start: Path | None = None,
    *,
    config_path: Path | None = None,
    require_configured: bool = True,
) -> CanopyContext:
    """Load config, locate the repository, and build the context.

    Raises:
        ConfigurationError: Required settings are missing.
        NotFoundError: ``start`` is not inside a git repository.
    """
    config = config_util.load_config(config_path)
    if require_configured:
        config_util.require_configured(config)
    origin = (start or Path.cwd()).resolve()
    repo_root = discover_repo_root(origin, git_path=config.git.path)
    if repo_root is None:
        raise NotFoundError(f"No Git repository found at {origin}")
    return build_context(config, repo_root)
