"""Pydantic models for Canopy configuration data."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

AI_PROVIDER_VALUES = ("none", "openai")
AIProvider = Literal["none", "openai"]


def _strip_or_default(value: object, default: str = "") -> object:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip()
    return value


class JiraSection(BaseModel):
    """JIRA connection settings.

    Attributes:
        base_url: Site URL, e.g. ``https://example.atlassian.net``.
        username: Account email used for basic auth.
        api_token: API token paired with ``username``.

    Example:
        >>> JiraSection(base_url=" https://example.atlassian.net/ ").base_url
        'https://example.atlassian.net/'
    """

    model_config = ConfigDict(extra="allow")

    base_url: str = ""
    username: str = ""
    api_token: str = ""

    @field_validator("base_url", "username", "api_token", mode="before")
    @classmethod
    def normalize_strings(cls, value: object) -> object:
        return _strip_or_default(value)

    @field_validator("base_url")
    @classmethod
    def require_http_scheme(cls, value: str) -> str:
        if value and not value.lower().startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return value

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.username and self.api_token)


class AzureDevOpsSection(BaseModel):
    """Azure DevOps connection settings.

    Attributes:
        organization: Organization slug under ``dev.azure.com``.
        project: Project name.
        personal_access_token: PAT with code read/write scope.
        repository: Repository name; derived from the git origin when empty.
    """

    model_config = ConfigDict(extra="allow")

    organization: str = ""
    project: str = ""
    personal_access_token: str = ""
    repository: str = ""

    @field_validator(
        "organization", "project", "personal_access_token", "repository", mode="before"
    )
    @classmethod
    def normalize_strings(cls, value: object) -> object:
        return _strip_or_default(value)

    @property
    def configured(self) -> bool:
        return bool(self.organization and self.project and self.personal_access_token)


class GitSection(BaseModel):
    """Git configuration.

    Attributes:
        path: Git executable path (default ``git``).
        default_target_branch: Base branch for new ticket branches and PRs.
        branch_prefix: Prefix applied verbatim to ticket keys.

    Example:
        >>> GitSection().branch_prefix
        'feature/'
    """

    model_config = ConfigDict(extra="allow")

    path: str = "git"
    default_target_branch: str = "main"
    branch_prefix: str = "feature/"

    @field_validator("path", mode="before")
    @classmethod
    def normalize_path(cls, value: object) -> object:
        normalized = _strip_or_default(value, "git")
        return normalized or "git"

    @field_validator("default_target_branch", mode="before")
    @classmethod
    def normalize_target(cls, value: object) -> object:
        normalized = _strip_or_default(value, "main")
        return normalized or "main"

    @field_validator("branch_prefix", mode="before")
    @classmethod
    def normalize_prefix(cls, value: object) -> object:
        return _strip_or_default(value)


class AIConfig(BaseModel):
    """Optional AI helper settings for pull request summaries.

    Attributes:
        provider: ``none`` disables summaries; ``openai`` enables them.
        model: Chat completion model name.
        api_key: API key; ``OPENAI_API_KEY`` is used when empty.
    """

    model_config = ConfigDict(extra="allow")

    provider: AIProvider = "none"
    model: str = "gpt-5"
    api_key: str = ""

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, value: object) -> object:
        if value is None:
            return "none"
        if isinstance(value, str):
            return value.strip().lower() or "none"
        return value

    @field_validator("model", "api_key", mode="before")
    @classmethod
    def normalize_strings(cls, value: object) -> object:
        return _strip_or_default(value)


class UISection(BaseModel):
    """Ticket list settings.

    Attributes:
        auto_refresh_interval_minutes: Refresh cadence for long-running hosts.
            The CLI refreshes once per command and never reads it; it is kept
            so settings files written by other Canopy hosts load unchanged.
        show_completed_tickets: Include tickets in the Done status category.
        max_tickets_to_show: Upper bound on tickets fetched per refresh.
    """

    model_config = ConfigDict(extra="allow")

    auto_refresh_interval_minutes: int = Field(default=15, ge=1)
    show_completed_tickets: bool = False
    max_tickets_to_show: int = Field(default=50, ge=1, le=1000)


class CanopyConfig(BaseModel):
    """Full Canopy configuration.

    Example:
        >>> CanopyConfig().git.default_target_branch
        'main'
    """

    model_config = ConfigDict(extra="allow")

    jira: JiraSection = Field(default_factory=JiraSection)
    azure_devops: AzureDevOpsSection = Field(default_factory=AzureDevOpsSection)
    git: GitSection = Field(default_factory=GitSection)
    ai: AIConfig = Field(default_factory=AIConfig)
    ui: UISection = Field(default_factory=UISection)
