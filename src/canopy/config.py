"""Configuration helpers for Canopy.

This module reads and writes the user ``config.json``, validates it with
Pydantic models, applies environment overrides for credentials, and checks
that required settings are present before any external call.

Example:
    >>> from canopy.config import parse_config
    >>> parse_config({"git": {"branch_prefix": "bugfix/"}}).git.branch_prefix
    'bugfix/'
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, ValidationError

from . import paths
from .models import CanopyConfig
from .services.errors import ConfigurationError

ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "CANOPY_JIRA_API_TOKEN": ("jira", "api_token"),
    "CANOPY_AZURE_DEVOPS_PAT": ("azure_devops", "personal_access_token"),
    "OPENAI_API_KEY": ("ai", "api_key"),
}
SECRET_FIELDS = {
    ("jira", "api_token"),
    ("azure_devops", "personal_access_token"),
    ("ai", "api_key"),
}


def load_json(path: Path) -> dict | None:
    """Load a JSON file if it exists.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed payload as a dict, or ``None`` if the file does not exist.

    Example:
        >>> from pathlib import Path
        >>> load_json(Path("missing.json")) is None
        True
    """
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def write_json(path: Path, payload: dict | BaseModel) -> None:
    """Write a JSON payload to disk.

    Args:
        path: Path to the JSON file to write.
        payload: Dict or Pydantic model to serialize.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
        fh.write("\n")


def parse_config(payload: dict, source: Path | str | None = None) -> CanopyConfig:
    """Validate a config payload."""
    try:
        return CanopyConfig.model_validate(payload)
    except ValidationError as exc:
        location = f" at {source}" if source else ""
        raise ConfigurationError(f"invalid canopy config{location}:\n{exc}") from exc


def apply_env_overrides(
    config: CanopyConfig, env: Mapping[str, str] | None = None
) -> CanopyConfig:
    """Return ``config`` with credential values taken from the environment.

    Only non-empty environment values override file values.
    """
    source = os.environ if env is None else env
    payload = config.model_dump()
    changed = False
    for variable, (section, key) in ENV_OVERRIDES.items():
        value = (source.get(variable) or "").strip()
        if not value:
            continue
        payload[section][key] = value
        changed = True
    if not changed:
        return config
    return parse_config(payload)


def load_config(
    path: Path | None = None, *, env: Mapping[str, str] | None = None
) -> CanopyConfig:
    """Load the user config, falling back to defaults when it is missing."""
    resolved = path or paths.config_path()
    try:
        payload = load_json(resolved)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"invalid JSON in {resolved}: {exc}") from exc
    config = parse_config(payload, resolved) if payload else CanopyConfig()
    return apply_env_overrides(config, env)


def write_config(config: CanopyConfig, path: Path | None = None) -> Path:
    """Persist ``config`` and return the written path."""
    resolved = path or paths.config_path()
    paths.ensure_dir(resolved.parent)
    write_json(resolved, config)
    return resolved


def is_jira_configured(config: CanopyConfig) -> bool:
    return config.jira.configured


def is_azure_devops_configured(config: CanopyConfig) -> bool:
    return config.azure_devops.configured


def missing_settings(config: CanopyConfig) -> list[str]:
    """Return dotted names of required settings that are empty."""
    missing: list[str] = []
    for key in ("base_url", "username", "api_token"):
        if not getattr(config.jira, key):
            missing.append(f"jira.{key}")
    for key in ("organization", "project", "personal_access_token"):
        if not getattr(config.azure_devops, key):
            missing.append(f"azure_devops.{key}")
    return missing


def require_configured(config: CanopyConfig) -> None:
    """Raise ``ConfigurationError`` when tracker or code-review settings are missing."""
    missing = missing_settings(config)
    if missing:
        raise ConfigurationError(
            "Please configure JIRA and Azure DevOps settings first "
            f"(missing: {', '.join(missing)})",
            recovery_hint="Run `canopy config set <section.key> <value>`.",
        )


def set_value(config: CanopyConfig, dotted_key: str, raw_value: str) -> CanopyConfig:
    """Return a copy of ``config`` with ``section.key`` set to ``raw_value``.

    Values are validated (and coerced) by the section model.

    Example:
        >>> set_value(CanopyConfig(), "ui.max_tickets_to_show", "20").ui.max_tickets_to_show
        20
    """
    section, sep, key = dotted_key.strip().partition(".")
    payload = config.model_dump()
    if not sep or section not in payload or not isinstance(payload[section], dict):
        raise ConfigurationError(f"unknown config section in {dotted_key!r}")
    if key not in payload[section]:
        raise ConfigurationError(f"unknown config key {dotted_key!r}")
    payload[section][key] = raw_value
    return parse_config(payload)


def redacted_dump(config: CanopyConfig) -> dict:
    """Return the config payload with secrets masked."""
    payload = config.model_dump()
    for section, key in SECRET_FIELDS:
        if payload.get(section, {}).get(key):
            payload[section][key] = "********"
    return payload
