"""gitplumb exceptions."""

from collections.abc import Sequence
from pathlib import Path


class GitplumbError(Exception):
    """Base exception for recoverable gitplumb errors."""


# =============================================================================
# Repository Handle Exceptions
# =============================================================================


class RepositoryHandleError(GitplumbError):
    """Base exception for repository handle construction errors."""


class PathResolutionError(RepositoryHandleError):
    """Raised when a repository directory cannot be resolved.

    Attributes:
        path: The path that could not be resolved.
    """

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The path that could not be resolved.
        """
        super().__init__(message)
        self.path: str | Path | None = path


class ToolNotFoundError(RepositoryHandleError):
    """Raised when the store executable cannot be found on the search path.

    Attributes:
        executable: The executable name that was looked up.
    """

    def __init__(self, message: str, *, executable: str) -> None:
        """Initialize with error message and executable context.

        Args:
            message: Human-readable error message.
            executable: The executable name that was looked up.
        """
        super().__init__(message)
        self.executable: str = executable


# =============================================================================
# Operation Exceptions
# =============================================================================


class OperationError(GitplumbError):
    """Raised when a store invocation exits with a non-zero status.

    The message is the standard-error text of the invocation, verbatim, so
    callers can match on the store tool's own diagnostics.

    Attributes:
        command: The argument vector passed to the executable.
        exit_code: The process exit status.
        stderr: The captured standard-error text.
    """

    def __init__(
        self,
        stderr: str,
        *,
        args: Sequence[str] = (),
        exit_code: int | None = None,
    ) -> None:
        """Initialize with the captured diagnostic text.

        Args:
            stderr: Captured standard-error text of the invocation.
            args: The argument vector passed to the executable.
            exit_code: The process exit status.
        """
        super().__init__(stderr)
        self.stderr: str = stderr
        self.command: tuple[str, ...] = tuple(args)
        self.exit_code: int | None = exit_code

    def __str__(self) -> str:
        return self.stderr


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(GitplumbError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


# =============================================================================
# Invariant Violations
# =============================================================================


class InvariantViolationError(RuntimeError):
    """Raised on unrecoverable misuse of a repository handle.

    Not a GitplumbError: handlers for recoverable errors must not catch it.
    """


class ForbiddenOperationError(InvariantViolationError):
    """Raised when an operation disabled by policy is called.

    Attributes:
        operation: Name of the forbidden operation.
    """

    def __init__(self, message: str, *, operation: str) -> None:
        """Initialize with error message and operation context.

        Args:
            message: Human-readable error message.
            operation: Name of the forbidden operation.
        """
        super().__init__(message)
        self.operation: str = operation


class StaleTransactionError(InvariantViolationError):
    """Raised when a transaction is used after its guarding call returned."""
