"""Leveled terminal logging for Canopy.

Messages at WARNING and above go to stderr, everything else to stdout.
The threshold is read from ``CANOPY_LOG_LEVEL`` until ``set_level`` is called.
"""

from __future__ import annotations

import os
import sys
from enum import IntEnum

from rich.console import Console
from rich.text import Text

LOG_LEVEL_ENV = "CANOPY_LOG_LEVEL"
NO_COLOR_ENVS = ("NO_COLOR", "CANOPY_NO_COLOR")


class LogLevel(IntEnum):
    TRACE = 10
    DEBUG = 20
    INFO = 30
    SUCCESS = 35
    WARNING = 40
    ERROR = 50

    @property
    def style(self) -> str:
        return _STYLES.get(self, "")


_STYLES = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "cyan",
    LogLevel.SUCCESS: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}
LEVEL_NAMES = tuple(level.name.lower() for level in LogLevel)
_ALIASES = {"warn": LogLevel.WARNING}

_configured_level: LogLevel | None = None
_no_color_override: bool | None = None


def parse_level(value: str | None) -> LogLevel:
    """Return the level named by ``value``; blank or unknown names mean INFO.

    Example:
        >>> parse_level(" Debug ").name
        'DEBUG'
        >>> parse_level("warn").name
        'WARNING'
        >>> parse_level("loud").name
        'INFO'
    """
    name = (value or "").strip().lower()
    if name in _ALIASES:
        return _ALIASES[name]
    return LogLevel.__members__.get(name.upper(), LogLevel.INFO)


def configured_level() -> LogLevel:
    global _configured_level
    if _configured_level is None:
        _configured_level = parse_level(os.environ.get(LOG_LEVEL_ENV))
    return _configured_level


def set_level(value: str | None) -> None:
    global _configured_level
    _configured_level = parse_level(value)


def set_no_color(value: bool) -> None:
    """Override the ``NO_COLOR`` environment for the rest of the process."""
    global _no_color_override
    _no_color_override = value


def no_color() -> bool:
    if _no_color_override is not None:
        return _no_color_override
    return any(os.environ.get(name) for name in NO_COLOR_ENVS)


def console(*, stderr: bool = False) -> Console:
    # built per call so redirected streams (capsys, CliRunner) are honored
    return Console(
        file=sys.stderr if stderr else sys.stdout,
        soft_wrap=True,
        highlight=False,
        no_color=no_color(),
    )


def emit(level: LogLevel, message: str, *, style: str | None = None) -> None:
    if level < configured_level():
        return
    text = Text(message, style=style or level.style)
    console(stderr=level >= LogLevel.WARNING).print(text)


def trace(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.TRACE, message, style=style)


def debug(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.DEBUG, message, style=style)


def info(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.INFO, message, style=style)


def success(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.SUCCESS, message, style=style)


def warning(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.WARNING, message, style=style)


def error(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.ERROR, message, style=style)
