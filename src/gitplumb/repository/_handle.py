"""Repository handle and transaction guard.

A RepositoryHandle binds a resolved working directory, a store executable
located once on the search path, and a snapshot of the process environment.
Every invocation against the handle runs inside a transaction: the handle's
lock is held for the whole sequence of operations, so multi-step sequences
never interleave with other callers of the same handle.
"""

import os
import shutil
import sys
import threading
import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from types import MappingProxyType
from typing import Final, Self, TextIO

from structlog.typing import FilteringBoundLogger

from gitplumb.config import Config, PolicyConfig
from gitplumb.exceptions import (
    InvariantViolationError,
    PathResolutionError,
    ToolNotFoundError,
)
from gitplumb.repository._transaction import Transaction
from gitplumb.utils import create_logger, discover_worktree

type Operation = Callable[[Transaction], object]


class RepositoryHandle:
    """Serialized access to one repository through the store tool.

    The handle is immutable after construction. The environment is captured
    verbatim at construction and never refreshed; the executable is resolved
    once and never re-resolved.

    Attributes:
        directory: Absolute, resolved working directory.
        executable: Absolute path of the store executable.
        environment: Read-only snapshot of the inherited environment.
        debug: Whether command lines are echoed to the debug stream.
        metadata_dir: Path of the store metadata directory.
        policy: Operation policy applied to transactions.
    """

    __slots__: Final = (
        "_debug",
        "_debug_stream",
        "_directory",
        "_environment",
        "_executable",
        "_lock",
        "_logger",
        "_metadata_dir",
        "_policy",
    )

    _directory: Path
    _executable: str
    _environment: Mapping[str, str]
    _debug: bool
    _debug_stream: TextIO | None
    _metadata_dir: Path
    _policy: PolicyConfig
    _logger: FilteringBoundLogger
    _lock: threading.Lock

    def __init__(
        self,
        directory: Path | str,
        *,
        config: Config | None = None,
        executable: str | None = None,
        debug: bool | None = None,
        debug_stream: TextIO | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Create a handle for the given directory.

        Args:
            directory: Working directory of the repository. Need not exist yet.
            config: Settings to use. Defaults to built-in defaults.
            executable: Overrides config.git.executable.
            debug: Overrides config.debug.
            debug_stream: Stream receiving command lines in debug mode.
                Defaults to sys.stderr at the time of each write.
            logger: Logger to use instead of one built from config.logging.

        Raises:
            PathResolutionError: If the directory cannot be resolved.
            ToolNotFoundError: If the executable is not on the search path.
        """
        config = config if config is not None else Config()

        try:
            self._directory = Path(directory).expanduser().resolve()
        except (OSError, RuntimeError) as e:
            msg = f"Cannot resolve repository directory {directory!s}: {e}"
            raise PathResolutionError(msg, path=directory) from e

        tool = executable if executable is not None else config.git.executable
        found = shutil.which(tool)
        if found is None:
            msg = f"Executable not found on PATH: {tool}"
            raise ToolNotFoundError(msg, executable=tool)
        self._executable = str(Path(found).resolve())

        self._environment = MappingProxyType(dict(os.environ))
        self._debug = debug if debug is not None else config.debug
        self._debug_stream = debug_stream
        self._metadata_dir = self._directory / config.git.metadata_dir
        self._policy = config.policy
        self._logger = (
            logger
            if logger is not None
            else create_logger(
                level=config.logging.level,
                log_format=config.logging.format,
                log_file=config.logging.file,
            )
        )
        self._lock = threading.Lock()

        self._logger.info(
            "handle_created",
            directory=str(self._directory),
            executable=self._executable,
        )

    @classmethod
    def discover(
        cls,
        start: Path | str | None = None,
        **kwargs: object,
    ) -> Self:
        """Create a handle for the repository enclosing a directory.

        Args:
            start: Directory to search upward from. Defaults to the current
                working directory.
            **kwargs: Passed to the RepositoryHandle constructor.

        Returns:
            A handle rooted at the enclosing worktree.

        Raises:
            PathResolutionError: If no repository encloses the directory.
        """
        root = discover_worktree(start)
        if root is None:
            msg = f"No repository found at or above {start or Path.cwd()}"
            raise PathResolutionError(msg, path=start)
        return cls(root, **kwargs)  # pyright: ignore[reportArgumentType]

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def executable(self) -> str:
        return self._executable

    @property
    def environment(self) -> Mapping[str, str]:
        return self._environment

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def debug_stream(self) -> TextIO:
        return self._debug_stream if self._debug_stream is not None else sys.stderr

    @property
    def metadata_dir(self) -> Path:
        return self._metadata_dir

    @property
    def policy(self) -> PolicyConfig:
        return self._policy

    @property
    def logger(self) -> FilteringBoundLogger:
        return self._logger

    def __repr__(self) -> str:
        return f"RepositoryHandle({str(self._directory)!r})"

    # =========================================================================
    # Status
    # =========================================================================

    def is_initialized(self) -> bool:
        """Check whether the store metadata directory exists.

        Returns:
            True if the metadata directory exists, False if nothing exists
            at that path.

        Raises:
            InvariantViolationError: If the metadata path exists but is not a
                directory, or cannot be inspected.
        """
        try:
            exists = self._metadata_dir.exists()
            is_dir = self._metadata_dir.is_dir()
        except OSError as e:
            msg = f"Cannot inspect {self._metadata_dir}: {e}"
            raise InvariantViolationError(msg) from e

        if not exists:
            return False
        if not is_dir:
            msg = f"{self._metadata_dir} is not a directory"
            raise InvariantViolationError(msg)
        return True

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextmanager
    def session(self) -> Iterator[Transaction]:
        """Hold the handle's lock and yield a transaction bound to it.

        The transaction is invalidated when the block exits, whether normally
        or by an exception. Other callers of this handle block until then.

        Yields:
            A Transaction valid only inside the block.

        Example:
            >>> with handle.session() as tx:
            ...     blob = tx.write_object(b"hello")
            ...     tx.add_stage_entry(blob, "hello.txt")
            ...     tree = tx.build_tree_from_index()
        """
        with self._lock:
            transaction = Transaction(self)
            started = time.perf_counter()
            self._logger.debug("transaction_started")
            try:
                yield transaction
            finally:
                transaction.close()
                self._logger.debug(
                    "transaction_finished",
                    invocations=transaction.invocation_count,
                    duration_ms=round((time.perf_counter() - started) * 1000, 3),
                )

    def transaction(self, *operations: Operation) -> None:
        """Run operations in order under the handle's lock.

        Each operation receives the same transaction. The first exception
        raised by an operation stops the sequence and propagates unchanged;
        later operations never run. Effects of earlier operations are not
        rolled back.

        Args:
            *operations: Callables taking a Transaction. Return values are
                ignored.
        """
        with self.session() as transaction:
            for operation in operations:
                _ = operation(transaction)
