"""Plumbing operations available inside a transaction.

Every operation maps to exactly one invocation of the store tool with a fixed
argument template. Caller strings are inserted verbatim into the argument
vector; nothing is shell-interpreted. Standard error is always captured
separately and becomes the message of the OperationError raised when the
invocation fails.
"""

from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from gitplumb.exceptions import ForbiddenOperationError, StaleTransactionError
from gitplumb.repository._models import (
    HEADS_PREFIX,
    TAGS_PREFIX,
    FileMode,
    ObjectKind,
)
from gitplumb.utils import (
    Content,
    Invocation,
    InvocationResult,
    Stdin,
    as_stdin,
    run_invocation,
)

if TYPE_CHECKING:
    from gitplumb.repository._handle import RepositoryHandle


def _split_lines(output: str) -> list[str]:
    """Split command output into lines, mapping empty output to no lines."""
    if not output:
        return []
    return output.split("\n")


def _split_paths(output: bytes) -> list[str]:
    """Split NUL-terminated path output. Names are kept exactly as stored."""
    return [
        entry.decode("utf-8", errors="surrogateescape")
        for entry in output.split(b"\0")
        if entry
    ]


class Transaction:
    """Capability to run plumbing operations against a locked handle.

    Instances are created by RepositoryHandle.session() and are valid only
    while the handle's lock is held. Any use after the guarding call returns
    raises StaleTransactionError.
    """

    __slots__ = ("_closed", "_handle", "_invocations")

    def __init__(self, handle: "RepositoryHandle") -> None:
        self._handle = handle
        self._closed = False
        self._invocations = 0

    @property
    def handle(self) -> "RepositoryHandle":
        return self._handle

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def invocation_count(self) -> int:
        """Number of invocations started through this transaction."""
        return self._invocations

    def close(self) -> None:
        """Invalidate the transaction. Called by the guard on exit."""
        self._closed = True

    # =========================================================================
    # Invocation plumbing
    # =========================================================================

    def _ensure_open(self) -> None:
        if self._closed:
            msg = "Transaction used after its guarding call returned"
            raise StaleTransactionError(msg)

    def _invoke(
        self,
        *args: str,
        stdin: Stdin | None = None,
        sink: BinaryIO | None = None,
    ) -> InvocationResult:
        self._ensure_open()

        handle = self._handle
        invocation = Invocation(
            executable=handle.executable,
            args=args,
            cwd=handle.directory,
            env=handle.environment,
            stdin=stdin,
        )
        if handle.debug:
            stream = handle.debug_stream
            _ = stream.write(f"\n{invocation.command_line()}\n")
            stream.flush()
        handle.logger.debug("git_invocation", argv=invocation.argv)

        self._invocations += 1
        result = run_invocation(invocation, sink=sink)
        if not result.ok:
            handle.logger.info(
                "git_invocation_failed",
                argv=invocation.argv,
                exit_code=result.exit_code,
                stderr=result.error_text(),
            )
        return result

    def run(self, *args: str, stdin: Stdin | None = None) -> None:
        """Run a command, discarding its standard output.

        Raises:
            OperationError: If the command exits non-zero.
        """
        self._invoke(*args, stdin=stdin).raise_for_status()

    def output(self, *args: str, stdin: Stdin | None = None) -> bytes:
        """Run a command and return its raw standard output.

        Raises:
            OperationError: If the command exits non-zero.
        """
        result = self._invoke(*args, stdin=stdin)
        result.raise_for_status()
        return result.stdout

    def _text(self, *args: str, stdin: Stdin | None = None) -> str:
        result = self._invoke(*args, stdin=stdin)
        result.raise_for_status()
        return result.text()

    def _stream(self, sink: BinaryIO, *args: str) -> None:
        self._invoke(*args, sink=sink).raise_for_status()

    def _check_policy(self, operation: str, *, allowed: bool) -> None:
        self._ensure_open()
        if allowed:
            return
        self._handle.logger.error("forbidden_operation", operation=operation)
        msg = f"{operation} is disabled by repository policy"
        raise ForbiddenOperationError(msg, operation=operation)

    # =========================================================================
    # Repository creation
    # =========================================================================

    def init(self) -> None:
        """Create store metadata in the working directory."""
        self.run("init")

    def init_bare(self) -> None:
        """Create a bare store in the working directory.

        Raises:
            ForbiddenOperationError: Unless policy.allow_bare_init is set.
        """
        self._check_policy("init_bare", allowed=self._handle.policy.allow_bare_init)
        self.run("init", "--bare")

    # =========================================================================
    # Objects
    # =========================================================================

    def write_object(self, content: Content) -> str:
        """Store content as a blob and return its identifier.

        Args:
            content: Bytes, a string (UTF-8 encoded), or a binary stream,
                which is copied to the store tool in chunks.

        Returns:
            The object identifier of the blob.
        """
        return self._text("hash-object", "-w", "--stdin", stdin=as_stdin(content))

    def write_object_from_path(self, path: Path | str) -> str:
        """Store the content of a file as a blob and return its identifier.

        Relative paths are resolved against the handle's directory.
        """
        return self._text("hash-object", "-w", str(path))

    def read_object(self, object_id: str, sink: BinaryIO) -> None:
        """Stream the pretty-printed content of an object to a sink."""
        self._stream(sink, "cat-file", "-p", object_id)

    def read_object_at_ref(self, path: str, sink: BinaryIO, ref: str = "HEAD") -> None:
        """Stream the content of a path as of a ref to a sink.

        Args:
            path: Repository-relative path.
            sink: Binary stream receiving the content.
            ref: Ref or commit to read from.
        """
        self._stream(sink, "cat-file", "-p", f"{ref}:{path}")

    def object_kind(self, object_id: str) -> ObjectKind:
        """Return the type tag of an object."""
        return ObjectKind(self._text("cat-file", "-t", object_id))

    def read_tree_at_ref(self, ref: str, sink: BinaryIO) -> None:
        """Stream the top-level tree listing of the commit a ref points to."""
        self._stream(sink, "cat-file", "-p", f"{ref}^{{tree}}")

    # =========================================================================
    # Tracked paths
    # =========================================================================

    def list_tracked_paths(self, pattern: str) -> list[str]:
        """Return tracked paths matching a pattern, in index order.

        Paths are listed NUL-terminated, so names with non-ASCII characters,
        quotes or surrounding whitespace come back unquoted and intact. No
        match yields an empty list.
        """
        return _split_paths(self.output("ls-files", "-z", pattern))

    def is_path_known(self, path: str) -> bool:
        """Return True iff exactly one tracked path matches and equals path."""
        paths = self.list_tracked_paths(path)
        return len(paths) == 1 and paths[0] == path

    # =========================================================================
    # Index
    # =========================================================================

    def stage_entry(
        self, object_id: str, path: str, mode: FileMode = FileMode.REGULAR
    ) -> None:
        """Point an already-staged path at an object."""
        self.run("update-index", "--cacheinfo", str(mode), object_id, path)

    def add_stage_entry(
        self, object_id: str, path: str, mode: FileMode = FileMode.REGULAR
    ) -> None:
        """Insert or update an index entry for a path."""
        self.run("update-index", "--add", "--cacheinfo", str(mode), object_id, path)

    def remove_stage_entry(self, path: str) -> None:
        """Drop an index entry even if the file still exists on disk."""
        self.run("update-index", "--force-remove", path)

    def unstage_entry(self, path: str) -> None:
        """Remove a path from the index, leaving stored content untouched.

        Raises:
            ForbiddenOperationError: Unless policy.allow_unstage is set.
        """
        self._check_policy("unstage_entry", allowed=self._handle.policy.allow_unstage)
        self.run("rm", "--cached", path)

    def reset_to_head(self, path: str) -> None:
        """Revert index entries under a path to match HEAD."""
        self.run("reset", "HEAD", "--", path)

    def reset_to_head_all(self) -> None:
        self.reset_to_head(".")

    def build_tree_from_index(self) -> str:
        """Write the index as a tree object and return its identifier."""
        return self._text("write-tree")

    def graft_tree(self, prefix: str, tree_id: str) -> None:
        """Read a tree into the index under a path prefix."""
        self.run("read-tree", f"--prefix={prefix}", tree_id)

    # =========================================================================
    # Commits
    # =========================================================================

    def create_commit(self, tree_id: str, parent_id: str, message: Content) -> str:
        """Create a commit object over a tree.

        Args:
            tree_id: Tree the commit records.
            parent_id: Parent commit, or "" for a root commit.
            message: Commit message as bytes, string, or binary stream.

        Returns:
            The identifier of the new commit.
        """
        args = ["commit-tree", tree_id]
        if parent_id:
            args += ["-p", parent_id]
        return self._text(*args, stdin=as_stdin(message))

    def commit_staged(self, message: str) -> None:
        """Commit the index on the current branch."""
        self.run("commit", "-m", message)

    # =========================================================================
    # Refs
    # =========================================================================

    def resolve_branch_id(self, branch: str) -> str:
        """Return the identifier a branch points to.

        Raises:
            OperationError: If the branch does not exist. show-ref prints
                nothing on stderr in that case, so the message is empty.
        """
        return self._text("show-ref", "--hash", "--heads", HEADS_PREFIX + branch)

    def set_branch_id(self, branch: str, object_id: str) -> None:
        self.run("update-ref", HEADS_PREFIX + branch, object_id)

    def set_tag_ref_id(self, tag: str, object_id: str) -> None:
        self.run("update-ref", TAGS_PREFIX + tag, object_id)

    def resolve_symbolic_ref(self, name: str) -> str:
        """Return the full ref name a symbolic ref points to."""
        return self._text("symbolic-ref", name)

    def set_symbolic_branch_ref(self, name: str, branch: str) -> None:
        self.run("symbolic-ref", name, HEADS_PREFIX + branch)

    def set_symbolic_tag_ref(self, name: str, tag: str) -> None:
        self.run("symbolic-ref", name, TAGS_PREFIX + tag)

    # =========================================================================
    # Tags
    # =========================================================================

    def create_tag(self, name: str, object_id: str, message: str = "") -> None:
        """Create a tag; annotated when a message is given."""
        args = ["tag"]
        if message:
            args += ["-a", "-m", message]
        self.run(*args, name, object_id)

    def list_tags(self) -> list[str]:
        """Return tag names. A store without tags yields an empty list."""
        return _split_lines(self._text("tag"))

    # =========================================================================
    # Remotes
    # =========================================================================

    def push_tags(self) -> None:
        self.run("push", "--tags", "-q")

    def push_all(self) -> None:
        self.run("push", "--all", "-q")

    # =========================================================================
    # Maintenance
    # =========================================================================

    def compact_store(self) -> None:
        """Ask the store to compact itself if it deems it worthwhile."""
        self.run("gc", "--auto")

    def verify_integrity(self) -> None:
        self.run("fsck")

    def verify_integrity_full(self, sink: BinaryIO) -> None:
        """Run a full consistency check, streaming findings to a sink."""
        self._stream(sink, "fsck", "--full")
