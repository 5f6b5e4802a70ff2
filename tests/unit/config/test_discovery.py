from pathlib import Path

from pyfakefs.fake_filesystem import FakeFilesystem
from pytest_mock import MockerFixture

from gitplumb.config._discovery import (
    PROJECT_CONFIG_NAME,
    _file_exists,
    discover_config_files,
    get_project_config_path,
    get_user_config_path,
)


class TestGetUserConfigPath:
    def test_ends_with_gitplumb_config_toml(self) -> None:
        path = get_user_config_path()
        assert path.name == "config.toml"
        assert path.parent.name == "gitplumb"


class TestGetProjectConfigPath:
    def test_inside_project_root(self) -> None:
        assert get_project_config_path(Path("/srv/store")) == Path(
            "/srv/store", PROJECT_CONFIG_NAME
        )


class TestFileExists:
    def test_true_for_file(self, fs: FakeFilesystem) -> None:
        fs.create_file("/a/file.toml")
        assert _file_exists(Path("/a/file.toml")) is True

    def test_false_for_directory(self, fs: FakeFilesystem) -> None:
        fs.create_dir("/a/dir.toml")
        assert _file_exists(Path("/a/dir.toml")) is False

    def test_false_on_os_error(self, mocker: MockerFixture) -> None:
        mocker.patch.object(Path, "is_file", side_effect=PermissionError("denied"))
        assert _file_exists(Path("/locked/config.toml")) is False


class TestDiscoverConfigFiles:
    def test_user_then_project(self, fs: FakeFilesystem, mocker: MockerFixture) -> None:
        mocker.patch(
            "gitplumb.config._discovery.get_user_config_path",
            return_value=Path("/home/u/.config/gitplumb/config.toml"),
        )
        fs.create_file("/home/u/.config/gitplumb/config.toml")
        fs.create_file(f"/srv/store/{PROJECT_CONFIG_NAME}")

        result = discover_config_files(Path("/srv/store"))

        assert result == [
            Path("/home/u/.config/gitplumb/config.toml"),
            Path("/srv/store", PROJECT_CONFIG_NAME),
        ]

    def test_skips_missing_files(self, fs: FakeFilesystem, mocker: MockerFixture) -> None:
        mocker.patch(
            "gitplumb.config._discovery.get_user_config_path",
            return_value=Path("/home/u/.config/gitplumb/config.toml"),
        )
        fs.create_dir("/srv/store")

        assert discover_config_files(Path("/srv/store")) == []
