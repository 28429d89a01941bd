"""Git adapter for the version-control port, backed by the git CLI."""

from __future__ import annotations

from pathlib import Path

from . import exec as exec_util
from . import log
from .branching import REMOTE_NAME, remote_tracking_name
from .services.errors import CanopyError, NotFoundError, TransportError
from .services.result import ServiceResult, failure_from_error, service_success

_GIT_TIMEOUT_SECONDS = 120.0


def git_command(args: list[str], *, git_path: str | None = None) -> list[str]:
    """Build a git command using an optional executable path.

    Example:
        >>> git_command(["status"], git_path=" ")
        ['git', 'status']
    """
    resolved = git_path.strip() if isinstance(git_path, str) else ""
    if not resolved:
        resolved = "git"
    return [resolved, *args]


def strip_git_suffix(path: str) -> str:
    """Remove a trailing ``.git`` suffix from a path string.

    Example:
        >>> strip_git_suffix("example/repo.git")
        'example/repo'
    """
    normalized = path.strip().rstrip("/")
    if normalized.lower().endswith(".git"):
        return normalized[: -len(".git")]
    return normalized


def repository_name_from_url(url: str) -> str | None:
    """Return the repository name from an origin URL.

    Works for HTTPS and SSH Azure DevOps, GitHub, and local-path remotes.

    Example:
        >>> repository_name_from_url("https://org@dev.azure.com/org/proj/_git/widgets")
        'widgets'
        >>> repository_name_from_url("git@ssh.dev.azure.com:v3/org/proj/widgets")
        'widgets'
    """
    stripped = strip_git_suffix(url)
    if not stripped:
        return None
    tail = stripped.replace(":", "/").rsplit("/", 1)[-1]
    return tail or None


def discover_repo_root(
    start: Path,
    *,
    git_path: str | None = None,
    runner: exec_util.CommandRunner | None = None,
) -> Path | None:
    """Return the git repository root for a starting path, if any."""
    argv = git_command(["-C", str(start), "rev-parse", "--show-toplevel"], git_path=git_path)
    result = exec_util.run_with_runner(exec_util.CommandRequest(argv=tuple(argv)), runner=runner)
    if result is None or not result.ok:
        return None
    resolved = result.stdout.strip()
    return Path(resolved) if resolved else None


class GitVersionControl:
    """Branch operations on one working copy.

    Args:
        repo_root: Repository root the commands run in.
        git_path: Git executable path.
        runner: Command runner; defaults to subprocess.
    """

    def __init__(
        self,
        repo_root: Path,
        *,
        git_path: str | None = None,
        runner: exec_util.CommandRunner | None = None,
    ) -> None:
        self.repo_root = repo_root
        self.git_path = git_path
        self.runner = runner

    def branch_exists(self, name: str) -> ServiceResult[bool]:
        try:
            return service_success(self._local_exists(name) or self._remote_exists(name))
        except CanopyError as exc:
            return failure_from_error(exc)

    def current_branch_name(self) -> ServiceResult[str | None]:
        try:
            result = self._run(["symbolic-ref", "--quiet", "--short", "HEAD"])
        except CanopyError as exc:
            return failure_from_error(exc)
        if result.returncode == 1:
            return service_success(None)
        if not result.ok:
            return failure_from_error(self._failure(result, "reading the current branch"))
        return service_success(result.stdout.strip() or None)

    def checkout(self, name: str) -> ServiceResult[None]:
        try:
            if self._local_exists(name):
                self._run_checked(["checkout", name], f"checking out {name}")
            elif self._remote_exists(name):
                self._run_checked(
                    ["checkout", "-b", name, "--track", remote_tracking_name(name)],
                    f"checking out {name} from {REMOTE_NAME}",
                )
            else:
                raise NotFoundError(f"Failed to checkout branch: {name}")
        except CanopyError as exc:
            return failure_from_error(exc)
        log.debug(f"Checked out {name}")
        return service_success(None)

    def pull(self) -> ServiceResult[None]:
        try:
            self._run_checked(["pull"], "pulling latest changes")
        except CanopyError as exc:
            return failure_from_error(exc)
        return service_success(None)

    def create_and_checkout(self, name: str) -> ServiceResult[None]:
        try:
            self._run_checked(["checkout", "-b", name], f"creating branch {name}")
        except CanopyError as exc:
            return failure_from_error(exc)
        log.debug(f"Created and checked out {name}")
        return service_success(None)

    def diff(self, from_branch: str, to_branch: str) -> ServiceResult[str]:
        """Return the changes on ``from_branch`` since it diverged from ``to_branch``."""
        try:
            result = self._run_checked(
                ["diff", "--no-color", f"{to_branch}...{from_branch}"],
                f"diffing {from_branch} against {to_branch}",
            )
        except CanopyError as exc:
            return failure_from_error(exc)
        return service_success(result.stdout)

    def repository_name(self) -> str | None:
        """Return the repository name from ``origin``, else the repo directory name."""
        try:
            result = self._run(["remote", "get-url", REMOTE_NAME])
        except CanopyError:
            result = None
        if result is not None and result.ok:
            name = repository_name_from_url(result.stdout.strip())
            if name:
                return name
        return self.repo_root.name or None

    def _local_exists(self, name: str) -> bool:
        return self._ref_exists(f"refs/heads/{name}")

    def _remote_exists(self, name: str) -> bool:
        return self._ref_exists(f"refs/remotes/{remote_tracking_name(name)}")

    def _ref_exists(self, ref: str) -> bool:
        result = self._run(["show-ref", "--verify", "--quiet", ref])
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False
        raise self._failure(result, f"looking up {ref}")

    def _run(self, args: list[str]) -> exec_util.CommandResult:
        request = exec_util.CommandRequest(
            argv=tuple(git_command(["-C", str(self.repo_root), *args], git_path=self.git_path)),
            timeout_seconds=_GIT_TIMEOUT_SECONDS,
        )
        log.trace(f"$ {' '.join(request.argv)}")
        result = exec_util.run_with_runner(request, runner=self.runner)
        if result is None:
            raise TransportError(exec_util.missing_command_detail(request))
        return result

    def _run_checked(self, args: list[str], context: str) -> exec_util.CommandResult:
        result = self._run(args)
        if not result.ok:
            raise self._failure(result, context)
        return result

    @staticmethod
    def _failure(result: exec_util.CommandResult, context: str) -> TransportError:
        output = result.output()
        message = f"git failed while {context}"
        if result.timed_out:
            message = f"git timed out while {context}"
        if output:
            message = f"{message}: {output}"
        return TransportError(message)
