"""Common git helper functions.

Repository discovery and byte/string conversion shared by the repository
handle.
"""

from pathlib import Path

from dulwich.errors import NotGitRepository
from dulwich.repo import Repo


def decode_bytes(value: bytes | str) -> str:
    """Decode bytes to str if needed.

    Args:
        value: A bytes or str value.

    Returns:
        The value as a string.
    """
    if isinstance(value, bytes):
        return value.decode()
    return value


def discover_worktree(start: Path | str | None = None) -> Path | None:
    """Discover the worktree root of the repository enclosing a directory.

    Args:
        start: Directory to start search from. If None, uses current directory.

    Returns:
        Resolved worktree root if a repository is found, None otherwise.
    """
    try:
        repo = Repo.discover(str(start) if start is not None else ".")
    except NotGitRepository:
        return None

    try:
        path = Path(decode_bytes(repo.path))
    finally:
        repo.close()

    # Repo.path is the .git directory for some layouts
    if path.name == ".git":
        path = path.parent
    return path.resolve()
