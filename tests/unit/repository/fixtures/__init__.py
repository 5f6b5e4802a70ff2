"""Test doubles for repository unit tests."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import BinaryIO

from gitplumb.repository import RepositoryHandle
from gitplumb.utils import Invocation, InvocationResult


@dataclass(slots=True)
class ScriptedRunner:
    """Stand-in for run_invocation that records calls and replays results.

    Results are matched by the first argument (the git subcommand); anything
    unscripted succeeds with empty output.
    """

    invocations: list[Invocation] = field(default_factory=list)
    stdout: dict[str, bytes] = field(default_factory=dict)
    failures: dict[str, tuple[int, bytes]] = field(default_factory=dict)
    streamed: dict[str, bytes] = field(default_factory=dict)
    on_call: Callable[[Invocation], None] | None = None

    def __call__(
        self, invocation: Invocation, *, sink: BinaryIO | None = None
    ) -> InvocationResult:
        self.invocations.append(invocation)
        if self.on_call is not None:
            self.on_call(invocation)

        command = invocation.args[0] if invocation.args else ""
        if command in self.failures:
            exit_code, stderr = self.failures[command]
            return InvocationResult(
                args=invocation.args, exit_code=exit_code, stderr=stderr
            )
        if sink is not None:
            _ = sink.write(self.streamed.get(command, b""))
            return InvocationResult(args=invocation.args, exit_code=0)
        return InvocationResult(
            args=invocation.args,
            exit_code=0,
            stdout=self.stdout.get(command, b""),
        )

    @property
    def calls(self) -> list[tuple[str, ...]]:
        return [invocation.args for invocation in self.invocations]


type HandleFactory = Callable[..., RepositoryHandle]
