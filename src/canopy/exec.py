"""Typed subprocess execution for the git adapter."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

TIMEOUT_RETURNCODE = 124


@dataclass(frozen=True)
class CommandRequest:
    """One external command; output is always captured as text."""

    argv: tuple[str, ...]
    cwd: Path | None = None
    timeout_seconds: float | None = None


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    def output(self) -> str:
        """Return stderr, falling back to stdout, stripped."""
        return (self.stderr or self.stdout or "").strip()


class CommandRunner(Protocol):
    """Executes a request; ``None`` means the executable was not found."""

    def run(self, request: CommandRequest) -> CommandResult | None: ...


def _as_text(value: object) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value if isinstance(value, str) else ""


class SubprocessCommandRunner:
    def run(self, request: CommandRequest) -> CommandResult | None:
        try:
            completed = subprocess.run(
                list(request.argv),
                cwd=request.cwd,
                capture_output=True,
                text=True,
                timeout=request.timeout_seconds,
                check=False,
            )
        except FileNotFoundError:
            return None
        except subprocess.TimeoutExpired as exc:
            # exc.stdout can be bytes even in text mode
            return CommandResult(
                argv=request.argv,
                returncode=TIMEOUT_RETURNCODE,
                stdout=_as_text(exc.stdout),
                stderr=_as_text(exc.stderr),
                timed_out=True,
            )
        return CommandResult(
            argv=request.argv,
            returncode=completed.returncode,
            stdout=_as_text(completed.stdout),
            stderr=_as_text(completed.stderr),
        )


_DEFAULT_COMMAND_RUNNER: CommandRunner = SubprocessCommandRunner()


def run_with_runner(
    request: CommandRequest, *, runner: CommandRunner | None = None
) -> CommandResult | None:
    """Execute ``request`` with ``runner`` or the subprocess default."""
    return (runner or _DEFAULT_COMMAND_RUNNER).run(request)


def missing_command_detail(request: CommandRequest) -> str:
    if not request.argv:
        return "missing required command"
    return f"missing required command: {request.argv[0]}"
