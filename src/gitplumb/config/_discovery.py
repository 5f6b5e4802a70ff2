"""Config path discovery utilities.

This module determines the platform-specific user configuration file path
and the per-project configuration file path.
"""

from pathlib import Path

import platformdirs

PROJECT_CONFIG_NAME = ".gitplumb.toml"


def get_user_config_path() -> Path:
    r"""Get platform-specific user config file path.

    - Linux: ``~/.config/gitplumb/config.toml``
    - macOS: ``~/Library/Application Support/gitplumb/config.toml``
    - Windows: ``%APPDATA%\gitplumb\config.toml``

    The path is returned regardless of whether the file exists.

    Returns:
        Path to the user config file for the current platform.
    """
    return platformdirs.user_config_path("gitplumb") / "config.toml"


def get_project_config_path(project_root: Path) -> Path:
    """Get the project config file path for a repository directory."""
    return project_root / PROJECT_CONFIG_NAME


def _file_exists(path: Path) -> bool:
    """Check if a file exists, handling permission errors gracefully."""
    try:
        return path.is_file()
    except OSError:
        return False


def discover_config_files(project_root: Path | None = None) -> list[Path]:
    """List existing config files in merge order (lowest precedence first).

    Args:
        project_root: Directory holding an optional project config file.

    Returns:
        Paths of config files that exist.
    """
    candidates = [get_user_config_path()]
    if project_root is not None:
        candidates.append(get_project_config_path(project_root))
    return [path for path in candidates if _file_exists(path)]
