"""Execution utilities for store tool invocations.

This module runs one external process per invocation with a fixed argument
vector, optional standard input, and standard error always captured apart
from standard output. Results are returned as values rather than written into
shared buffers.
"""

import io
import shutil
import subprocess
import tempfile
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from gitplumb.exceptions import OperationError

# Chunk size used when streaming to standard input or from standard output
STREAM_CHUNK_BYTES: int = 65536

type Content = bytes | str | BinaryIO

type Stdin = bytes | BinaryIO


@dataclass(frozen=True, slots=True)
class Invocation:
    """A single external command to execute.

    Attributes:
        executable: Absolute path of the executable.
        args: Arguments passed after the executable, never shell-interpreted.
        cwd: Working directory of the child process.
        env: Complete environment of the child process.
        stdin: Bytes or a binary stream fed to standard input, or None to
            attach /dev/null. Streams are copied in chunks while the child
            runs and are never read fully into memory.
    """

    executable: str
    args: tuple[str, ...]
    cwd: Path
    env: Mapping[str, str] = field(default_factory=dict)
    stdin: Stdin | None = None

    @property
    def argv(self) -> list[str]:
        """Full argument vector including the executable."""
        return [self.executable, *self.args]

    def command_line(self) -> str:
        """Render the invocation as a single line for diagnostics."""
        return " ".join(self.argv)


@dataclass(frozen=True, slots=True)
class InvocationResult:
    """Result of an invocation.

    Attributes:
        args: Arguments that were passed after the executable.
        exit_code: Process exit status.
        stdout: Captured standard output (empty when streamed to a sink).
        stderr: Captured standard error.
    """

    args: tuple[str, ...]
    exit_code: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def text(self) -> str:
        """Return standard output decoded and stripped of trailing whitespace."""
        return self.stdout.decode("utf-8", errors="replace").rstrip()

    def error_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")

    def raise_for_status(self) -> None:
        """Raise OperationError carrying the captured stderr on failure.

        Raises:
            OperationError: If the invocation exited non-zero.
        """
        if not self.ok:
            raise OperationError(
                self.error_text(),
                args=self.args,
                exit_code=self.exit_code,
            )


def as_stdin(content: Content) -> Stdin:
    """Normalize caller-supplied content for standard input.

    Strings are UTF-8 encoded. Bytes and streams pass through unchanged, so a
    stream is consumed by the child process rather than buffered here.
    """
    if isinstance(content, str):
        return content.encode("utf-8")
    return content


def _feed(source: BinaryIO, pipe: BinaryIO) -> None:
    """Copy source to the child's standard input, then close it.

    Text streams are encoded as UTF-8. A child that exits before reading
    everything closes the pipe; its exit status reports the failure.
    """
    try:
        while chunk := source.read(STREAM_CHUNK_BYTES):
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            _ = pipe.write(chunk)
    except BrokenPipeError:
        pass
    finally:
        try:
            pipe.close()
        except BrokenPipeError:
            pass


def run_invocation(
    invocation: Invocation, *, sink: BinaryIO | None = None
) -> InvocationResult:
    """Execute an invocation and capture its output.

    Standard input is fed from a separate thread while standard output is
    copied incrementally, either into the result or into the sink. Standard
    error goes to a temporary file. No pipe can fill up and block the child.

    There is no timeout: a hung child blocks the caller indefinitely.

    Args:
        invocation: The command to execute.
        sink: Optional binary stream receiving standard output. When given,
            InvocationResult.stdout is empty.

    Returns:
        InvocationResult with exit status and captured streams.
    """
    source = invocation.stdin
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    captured = io.BytesIO()
    out = sink if sink is not None else captured

    with tempfile.TemporaryFile() as err_file:
        with subprocess.Popen(  # noqa: S603
            invocation.argv,
            cwd=str(invocation.cwd),
            env=dict(invocation.env),
            stdin=subprocess.DEVNULL if source is None else subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=err_file,
        ) as process:
            feeder = None
            if source is not None:
                assert process.stdin is not None  # noqa: S101
                feeder = threading.Thread(
                    target=_feed, args=(source, process.stdin), daemon=True
                )
                feeder.start()

            assert process.stdout is not None  # noqa: S101
            shutil.copyfileobj(process.stdout, out, STREAM_CHUNK_BYTES)
            if feeder is not None:
                feeder.join()
            exit_code = process.wait()

        _ = err_file.seek(0, io.SEEK_SET)
        stderr = err_file.read()

    return InvocationResult(
        args=invocation.args,
        exit_code=exit_code,
        stdout=captured.getvalue(),
        stderr=stderr,
    )
