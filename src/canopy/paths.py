"""Path helpers for locating Canopy configuration files."""

from pathlib import Path

from platformdirs import user_config_dir

CANOPY_APP_NAME = "canopy"
CONFIG_FILENAME = "config.json"


def canopy_config_dir() -> Path:
    """Return the base Canopy configuration directory.

    Returns:
        Path to the user configuration directory for Canopy.

    Example:
        >>> isinstance(canopy_config_dir(), Path)
        True
    """
    return Path(user_config_dir(CANOPY_APP_NAME))


def config_path() -> Path:
    """Return the path to the user configuration file.

    Example:
        >>> config_path().name == CONFIG_FILENAME
        True
    """
    return canopy_config_dir() / CONFIG_FILENAME


def ensure_dir(path: Path) -> None:
    """Create a directory (and parents) if it does not exist."""
    path.mkdir(parents=True, exist_ok=True)
