# pyright: reportAny=false, reportExplicitAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Raw configuration sources: TOML files and GITPLUMB_* variables.

Everything here works on plain nested dicts. Validation happens once, on the
merged result, in Config.from_dict.
"""

import copy
import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from gitplumb.exceptions import ConfigLoadError

ENV_PREFIX = "GITPLUMB_"

# Nested keys are separated by a double underscore: GITPLUMB_GIT__EXECUTABLE
ENV_NESTING = "__"

_TRUE_WORDS = frozenset({"true", "1"})
_FALSE_WORDS = frozenset({"false", "0"})


def read_toml_file(path: Path) -> dict[str, Any]:
    """Parse a TOML configuration file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file is not valid TOML. The error carries the
            path and the line and column of the syntax error.
    """
    raw = path.read_bytes()
    try:
        return tomllib.loads(raw.decode())
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigLoadError(msg, path=path, line=e.lineno, column=e.colno) from e


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return base with override layered on top; inputs are left untouched.

    Tables merge key by key. Any other value in override, lists included,
    replaces the base value outright.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def set_nested_key(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    """Store value under a dotted path such as "policy.allow_unstage".

    Missing tables are created; a non-table value on the path is overwritten.
    """
    *tables, leaf = dotted_key.split(".")
    node = data
    for name in tables:
        if not isinstance(node.get(name), dict):
            node[name] = {}
        node = node[name]
    node[leaf] = value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Collect prefixed environment variables into a nested config dict.

    GITPLUMB_POLICY__ALLOW_UNSTAGE=true becomes
    {"policy": {"allow_unstage": True}}. Variables without the prefix, and the
    bare prefix itself, are ignored.
    """
    environ = os.environ if environ is None else environ
    collected: dict[str, Any] = {}

    for name, raw in environ.items():
        key = name.removeprefix(prefix)
        if key == name or not key:
            continue
        dotted = key.lower().replace(ENV_NESTING, ".")
        set_nested_key(collected, dotted, _parse_env_value(raw))

    return collected


def _parse_env_value(raw: str) -> Any:
    """Coerce an environment string to bool, int, JSON container, or str."""
    word = raw.lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False

    try:
        return int(raw)
    except ValueError:
        pass

    if raw[:1] + raw[-1:] in ("[]", "{}"):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return raw

    return raw
