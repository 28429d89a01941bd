# ruff: noqa: E402

import builtins
import sys
from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import canopy.io as io
import canopy.log as canopy_log

DOCTEST_MODULES = {
    ROOT / "src" / "canopy" / "__init__.py",
    ROOT / "src" / "canopy" / "ai.py",
    ROOT / "src" / "canopy" / "branching.py",
    ROOT / "src" / "canopy" / "config.py",
    ROOT / "src" / "canopy" / "git.py",
    ROOT / "src" / "canopy" / "http.py",
    ROOT / "src" / "canopy" / "io.py",
    ROOT / "src" / "canopy" / "jira.py",
    ROOT / "src" / "canopy" / "log.py",
    ROOT / "src" / "canopy" / "models.py",
    ROOT / "src" / "canopy" / "paths.py",
    ROOT / "src" / "canopy" / "prs.py",
    ROOT / "src" / "canopy" / "tickets.py",
    ROOT / "src" / "canopy" / "services" / "create_pull_request.py",
    ROOT / "src" / "canopy" / "services" / "result.py",
}


@pytest.fixture(autouse=True)
def _default_runtime_patches(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(io, "_use_questionary", lambda: False)
    monkeypatch.setattr(canopy_log, "_configured_level", None)
    monkeypatch.setattr(canopy_log, "_no_color_override", None)
    monkeypatch.delenv("CANOPY_LOG_LEVEL", raising=False)

    def fail_input(prompt: str = "") -> str:
        raise AssertionError("prompted unexpectedly")

    monkeypatch.setattr(builtins, "input", fail_input)


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
