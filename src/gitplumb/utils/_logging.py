"""Logger factory for repository handles.

Loggers are built with structlog.wrap_logger and never touch the global
structlog configuration, so embedding applications keep their own setup.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Literal, TextIO, cast

import structlog
from structlog.typing import FilteringBoundLogger, Processor

LogFormatType = Literal["json", "text"]

DEBUG_ENV_VAR = "GITPLUMB_DEBUG"


def _log_level_from_string(level: str, *, respect_env: bool = True) -> int:
    """Map a level name to its numeric value, defaulting to WARNING.

    A non-empty GITPLUMB_DEBUG forces DEBUG unless respect_env is False.
    """
    if respect_env and os.environ.get(DEBUG_ENV_VAR):
        return logging.DEBUG
    return logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)


def _open_sink(log_file: str) -> TextIO:
    if not log_file:
        return sys.stderr
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path.open("a", encoding="utf-8")


def _processors(log_format: LogFormatType) -> list[Processor]:
    chain: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_format == "json":
        chain += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=False))
    return chain


def create_logger(
    *,
    level: str = "warning",
    log_format: LogFormatType = "text",
    log_file: str = "",
) -> FilteringBoundLogger:
    """Create a standalone structlog logger.

    Args:
        level: Threshold name (debug, info, warning, error). Overridden by
            GITPLUMB_DEBUG.
        log_format: "json" for one JSON object per line, "text" for
            human-readable key=value lines.
        log_file: File to append to. Standard error when empty.

    Returns:
        A FilteringBoundLogger that drops events below the threshold.
    """
    sink = _open_sink(log_file)
    logger = structlog.wrap_logger(
        structlog.WriteLoggerFactory(file=sink)(),
        processors=_processors(log_format),
        wrapper_class=structlog.make_filtering_bound_logger(
            _log_level_from_string(level)
        ),
        context_class=dict,
    )
    return cast("FilteringBoundLogger", logger)
