"""Shared test fixtures for gitplumb tests."""

import logging
import sys
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog
from structlog.typing import FilteringBoundLogger

from gitplumb.config import Config, PolicyConfig
from gitplumb.repository import RepositoryHandle


@pytest.fixture
def quiet_logger() -> FilteringBoundLogger:
    """A logger that drops every event."""
    return structlog.wrap_logger(
        structlog.ReturnLogger(),
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
    )


@pytest.fixture
def make_handle(
    tmp_path: Path, quiet_logger: FilteringBoundLogger
) -> Callable[..., RepositoryHandle]:
    """Return a factory for handles that never need a real git executable.

    The Python interpreter stands in as the executable so construction always
    succeeds; unit tests patch run_invocation before anything is spawned.
    """

    def _make(
        directory: Path | None = None,
        *,
        policy: PolicyConfig | None = None,
        **kwargs: object,
    ) -> RepositoryHandle:
        config = Config(policy=policy or PolicyConfig())
        options: dict[str, object] = {
            "config": config,
            "executable": sys.executable,
            "logger": quiet_logger,
        }
        options.update(kwargs)
        return RepositoryHandle(directory or tmp_path, **options)  # pyright: ignore[reportArgumentType]

    return _make
