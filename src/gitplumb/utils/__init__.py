"""Utilities for gitplumb.

This package provides the invocation runner, logger factory, and git
discovery helpers used by the repository handle.
"""

from gitplumb.utils._exec import (
    STREAM_CHUNK_BYTES,
    Content,
    Invocation,
    InvocationResult,
    Stdin,
    as_stdin,
    run_invocation,
)
from gitplumb.utils._git import decode_bytes, discover_worktree
from gitplumb.utils._logging import LogFormatType, create_logger

__all__ = [
    "STREAM_CHUNK_BYTES",
    "Content",
    "Invocation",
    "InvocationResult",
    "LogFormatType",
    "Stdin",
    "as_stdin",
    "create_logger",
    "decode_bytes",
    "discover_worktree",
    "run_invocation",
]
