import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest
from structlog.typing import FilteringBoundLogger

from gitplumb.repository import RepositoryHandle

GIT = shutil.which("git")

GitRunner = Callable[..., str]


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    skip_git = pytest.mark.skip(reason="git executable not available")
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)
            if GIT is None:
                item.add_marker(skip_git)


def _run_git(cwd: Path, *args: str) -> str:
    """Run a git command outside gitplumb and return its stripped stdout."""
    assert GIT is not None
    result = subprocess.run(  # noqa: S603 - Safe: running git with controlled args
        [GIT, *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        msg = f"git {' '.join(args)} failed: {result.stderr}"
        raise RuntimeError(msg)
    return result.stdout.strip()


@pytest.fixture
def git() -> GitRunner:
    """Run git directly, bypassing gitplumb, to check results independently."""
    return _run_git


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    """An initialized repository with a committer identity and no commits."""
    path = tmp_path / "repo"
    path.mkdir()
    _run_git(path, "init", "-q")
    _run_git(path, "config", "user.name", "Test User")
    _run_git(path, "config", "user.email", "test@example.com")
    _run_git(path, "config", "commit.gpgsign", "false")
    _run_git(path, "config", "tag.gpgsign", "false")
    return path


@pytest.fixture
def handle(repo_dir: Path, quiet_logger: FilteringBoundLogger) -> RepositoryHandle:
    return RepositoryHandle(repo_dir, logger=quiet_logger)
