"""Plain console output and interactive choice prompts for the CLI."""

from __future__ import annotations

import sys
from typing import NoReturn, Sequence

import questionary


def _use_questionary() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def say(message: str) -> None:
    """Write a line to stdout.

    Example:
        >>> say("Switched to branch: feature/PROJ-1")
        Switched to branch: feature/PROJ-1
    """
    print(message)


def die(message: str, code: int = 1) -> NoReturn:
    print(f"error: {message}", file=sys.stderr)
    sys.exit(code)


def _numbered_choice(text: str, choices: Sequence[str], fallback: str) -> str:
    for index, choice in enumerate(choices, start=1):
        print(f"  {index}) {choice}")
    while True:
        try:
            raw = input(f"{text} [{fallback}]: ").strip()
        except EOFError:
            die("aborted")
        if not raw:
            return fallback
        if raw in choices:
            return raw
        if raw.isdigit() and 1 <= int(raw) <= len(choices):
            return choices[int(raw) - 1]


def select(text: str, choices: Sequence[str], default: str | None = None) -> str:
    """Ask the user to pick one of ``choices``.

    On a terminal this is a questionary list; otherwise a numbered prompt
    that accepts either the option text or its number. Cancelling exits.
    """
    if not choices:
        die("nothing to choose from")
    fallback = default if default in choices else choices[0]
    if not _use_questionary():
        return _numbered_choice(text, choices, fallback)
    value = questionary.select(text, choices=list(choices), default=fallback).ask()
    if value is None:
        die("aborted")
    return str(value)
