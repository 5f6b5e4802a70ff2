# pyright: reportAny=false, reportUnknownArgumentType=false
import copy
from pathlib import Path

import pytest
from pyfakefs.fake_filesystem import FakeFilesystem

from gitplumb.config._loader import (
    _parse_env_value,
    deep_merge,
    parse_env_vars,
    read_toml_file,
    set_nested_key,
)
from gitplumb.exceptions import ConfigLoadError


class TestReadTomlFile:
    def test_parses_valid_toml(self, fs: FakeFilesystem) -> None:
        content = """
debug = true

[git]
executable = "/opt/git/bin/git"
"""
        path = Path("/test/config.toml")
        fs.create_file(path, contents=content)

        result = read_toml_file(path)

        assert result == {"debug": True, "git": {"executable": "/opt/git/bin/git"}}

    def test_raises_file_not_found_for_missing_file(self, fs: FakeFilesystem) -> None:
        with pytest.raises(FileNotFoundError):
            read_toml_file(Path("/test/missing.toml"))

    def test_raises_config_load_error_for_invalid_toml(
        self, fs: FakeFilesystem
    ) -> None:
        content = """
[git
executable = "unclosed bracket"
"""
        path = Path("/test/invalid.toml")
        fs.create_file(path, contents=content)

        with pytest.raises(ConfigLoadError) as exc_info:
            read_toml_file(path)

        error = exc_info.value
        assert error.path == path
        assert error.line is not None
        assert error.column is not None


class TestDeepMerge:
    def test_override_wins_for_scalars(self) -> None:
        assert deep_merge({"debug": False}, {"debug": True}) == {"debug": True}

    def test_nested_dicts_are_merged(self) -> None:
        base = {"git": {"executable": "git", "metadata_dir": ".git"}}
        override = {"git": {"executable": "/usr/local/bin/git"}}

        result = deep_merge(base, override)

        assert result == {
            "git": {"executable": "/usr/local/bin/git", "metadata_dir": ".git"}
        }

    def test_lists_are_replaced(self) -> None:
        assert deep_merge({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}

    def test_inputs_are_not_modified(self) -> None:
        base = {"policy": {"allow_unstage": False}}
        override = {"policy": {"allow_bare_init": True}}
        base_copy = copy.deepcopy(base)
        override_copy = copy.deepcopy(override)

        _ = deep_merge(base, override)

        assert base == base_copy
        assert override == override_copy


class TestSetNestedKey:
    def test_creates_intermediate_dicts(self) -> None:
        data: dict[str, object] = {}
        set_nested_key(data, "logging.level", "debug")
        assert data == {"logging": {"level": "debug"}}

    def test_replaces_scalar_in_the_way(self) -> None:
        data: dict[str, object] = {"git": "oops"}
        set_nested_key(data, "git.executable", "git")
        assert data == {"git": {"executable": "git"}}


class TestParseEnvVars:
    def test_maps_double_underscore_to_nesting(self) -> None:
        environ = {"GITPLUMB_GIT__EXECUTABLE": "/opt/git", "HOME": "/root"}
        assert parse_env_vars(environ=environ) == {"git": {"executable": "/opt/git"}}

    def test_top_level_boolean(self) -> None:
        assert parse_env_vars(environ={"GITPLUMB_DEBUG": "1"}) == {"debug": True}

    def test_ignores_bare_prefix(self) -> None:
        assert parse_env_vars(environ={"GITPLUMB_": "x"}) == {}

    def test_reads_os_environ_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITPLUMB_POLICY__ALLOW_UNSTAGE", "true")
        result = parse_env_vars()
        assert result["policy"] == {"allow_unstage": True}


class TestParseEnvValue:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("FALSE", False),
            ("0", False),
            ("42", 42),
            ('["a", "b"]', ["a", "b"]),
            ('{"k": 1}', {"k": 1}),
            ("[not json", "[not json"),
            ("git", "git"),
        ],
    )
    def test_type_inference(self, raw: str, expected: object) -> None:
        assert _parse_env_value(raw) == expected
