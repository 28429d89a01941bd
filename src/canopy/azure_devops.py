"""Azure DevOps adapter for the code-review port."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import quote

from . import log
from .branching import heads_ref
from .http import JsonHttpClient, basic_auth_header
from .models import AzureDevOpsSection
from .prs import PullRequestRef
from .services.errors import CanopyError, ConfigurationError, NotFoundError, UnexpectedError
from .services.result import ServiceResult, failure_from_error, service_success

AZURE_DEVOPS_URL = "https://dev.azure.com"
API_VERSION = "7.0"
OPEN_STATUS = "active"


def _segment(value: str) -> str:
    return quote(value, safe="")


class AzureDevOpsCodeReview:
    """Code review backed by Azure Repos pull requests.

    Args:
        settings: Organization, project, and PAT settings.
        repository: Repository name used when ``settings.repository`` is empty.
        client: JSON client; defaults to PAT basic auth.
    """

    def __init__(
        self,
        settings: AzureDevOpsSection,
        *,
        repository: str | None = None,
        client: JsonHttpClient | None = None,
    ) -> None:
        self.settings = settings
        self.repository = settings.repository or repository or None
        self.client = client or JsonHttpClient(
            basic_auth_header("", settings.personal_access_token)
        )

    def pull_requests_url(self) -> str:
        repository = self._require_repository()
        return (
            f"{AZURE_DEVOPS_URL}/{_segment(self.settings.organization)}"
            f"/{_segment(self.settings.project)}/_apis/git/repositories"
            f"/{_segment(repository)}/pullrequests?api-version={API_VERSION}"
        )

    def pull_request_web_url(self, pull_request_id: int) -> str:
        repository = self.repository or ""
        return (
            f"{AZURE_DEVOPS_URL}/{_segment(self.settings.organization)}"
            f"/{_segment(self.settings.project)}/_git/{_segment(repository)}"
            f"/pullrequest/{pull_request_id}"
        )

    def list_open_pull_requests(self) -> ServiceResult[Sequence[PullRequestRef]]:
        try:
            self._require_configured()
            url = f"{self.pull_requests_url()}&searchCriteria.status={OPEN_STATUS}"
            payload = self.client.get_json(url, context="getting pull requests")
            values = payload.get("value") if isinstance(payload, dict) else None
            if not isinstance(values, list):
                raise UnexpectedError("Unexpected Azure DevOps pull request list response")
        except CanopyError as exc:
            return failure_from_error(exc)
        pull_requests: list[PullRequestRef] = []
        for entry in values:
            pull_request = self._parse_pull_request(entry)
            if pull_request is None:
                log.warning("Failed to parse pull request in Azure DevOps response")
                continue
            pull_requests.append(pull_request)
        return service_success(pull_requests)

    def create(
        self,
        source_branch: str,
        target_branch: str,
        title: str,
        description: str,
    ) -> ServiceResult[PullRequestRef]:
        try:
            self._require_configured()
            log.info(f"Creating pull request: {source_branch} -> {target_branch}")
            payload = self.client.post_json(
                self.pull_requests_url(),
                {
                    "sourceRefName": heads_ref(source_branch),
                    "targetRefName": heads_ref(target_branch),
                    "title": title,
                    "description": description,
                },
                context="creating pull request",
            )
            pull_request = self._parse_pull_request(payload)
            if pull_request is None:
                raise UnexpectedError("Unexpected Azure DevOps pull request response")
        except CanopyError as exc:
            return failure_from_error(exc)
        log.debug(f"Created pull request #{pull_request.id}")
        return service_success(pull_request)

    def test_connection(self) -> ServiceResult[str]:
        try:
            self._require_configured()
            self.client.get_json(
                f"{AZURE_DEVOPS_URL}/{_segment(self.settings.organization)}/_apis/projects"
                f"/{_segment(self.settings.project)}?api-version={API_VERSION}",
                context="checking the Azure DevOps connection",
            )
        except CanopyError as exc:
            return failure_from_error(exc)
        return service_success("Connection successful")

    def _parse_pull_request(self, entry: object) -> PullRequestRef | None:
        if not isinstance(entry, dict):
            return None
        pull_request_id = entry.get("pullRequestId")
        source_ref_name = entry.get("sourceRefName")
        if not isinstance(pull_request_id, int) or not isinstance(source_ref_name, str):
            return None
        title = entry.get("title")
        return PullRequestRef(
            id=pull_request_id,
            source_ref_name=source_ref_name,
            url=self.pull_request_web_url(pull_request_id),
            title=title if isinstance(title, str) else "",
        )

    def _require_configured(self) -> None:
        if not self.settings.configured:
            raise ConfigurationError("Azure DevOps configuration is incomplete")

    def _require_repository(self) -> str:
        if not self.repository:
            raise NotFoundError(
                "No repository found",
                recovery_hint="Set azure_devops.repository or run inside a git checkout.",
            )
        return self.repository
