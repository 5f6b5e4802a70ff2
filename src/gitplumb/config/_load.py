from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ._discovery import discover_config_files
from ._loader import deep_merge, parse_env_vars, read_toml_file
from ._models import Config


def load_config(
    project_root: Path | None = None,
    *,
    include_env: bool = True,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> Config:
    """Load configuration from all sources.

    Sources are merged from lowest to highest precedence: built-in defaults,
    the user config file, the project config file, GITPLUMB_* environment
    variables, then explicit overrides.

    Args:
        project_root: Directory holding an optional `.gitplumb.toml`.
        include_env: Whether to read GITPLUMB_* environment variables.
        environ: Environment to read instead of os.environ.
        overrides: Highest-precedence values, nested like the TOML file.

    Returns:
        The merged, validated Config.

    Raises:
        ConfigLoadError: If a config file cannot be parsed.
        ConfigError: If a merged value fails validation.
    """
    merged: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for path in discover_config_files(project_root):
        merged = deep_merge(merged, read_toml_file(path))

    if include_env:
        merged = deep_merge(merged, parse_env_vars(environ=environ))

    if overrides:
        merged = deep_merge(merged, overrides)

    return Config.from_dict(merged)
