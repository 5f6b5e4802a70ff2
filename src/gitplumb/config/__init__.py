"""Configuration for gitplumb.

Settings are read from TOML files and GITPLUMB_* environment variables and
validated into frozen Pydantic models.

Example:
    >>> from gitplumb.config import load_config
    >>> config = load_config()
    >>> config.git.executable
    'git'
"""

from ._discovery import (
    PROJECT_CONFIG_NAME,
    discover_config_files,
    get_project_config_path,
    get_user_config_path,
)
from ._load import load_config
from ._loader import deep_merge, parse_env_vars, read_toml_file, set_nested_key
from ._models import (
    Config,
    GitConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    PolicyConfig,
)

__all__ = [
    "PROJECT_CONFIG_NAME",
    "Config",
    "GitConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "PolicyConfig",
    "deep_merge",
    "discover_config_files",
    "get_project_config_path",
    "get_user_config_path",
    "load_config",
    "parse_env_vars",
    "read_toml_file",
    "set_nested_key",
]
