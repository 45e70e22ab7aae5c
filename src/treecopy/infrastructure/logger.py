"""Logging for treecopy.

Events go through structlog to stderr. ``LOG_LEVEL`` sets the threshold:
per-entry events are debug, the copy summary is info and each failed entry
is a warning. Source and destination of the running copy are bound as
context variables by ``treecopy.api``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from typing import TextIO

DEFAULT_LEVEL = "INFO"


def parse_level(name: str | None) -> int:
    """Map a level name such as ``"debug"`` to its number. Unknown names mean INFO."""
    levels = logging.getLevelNamesMapping()
    return levels.get((name or DEFAULT_LEVEL).upper(), logging.INFO)


def configure_logging(level: str | None = None, *, stream: TextIO | None = None) -> None:
    """(Re)configure structlog. ``level`` defaults to ``LOG_LEVEL``, ``stream`` to stderr."""
    stream = stream if stream is not None else sys.stderr
    threshold = parse_level(level if level is not None else os.environ.get("LOG_LEVEL"))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=stream.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        # Loggers pick up a later reconfiguration, e.g. from --log-level.
        cache_logger_on_first_use=False,
    )


configure_logging()
logger: structlog.typing.FilteringBoundLogger = structlog.get_logger("treecopy")


def install_exception_hooks() -> None:
    """Log an uncaught exception from the CLI as a critical event."""

    def handle_exception(exc_type, exc_value, exc_traceback):  # type: ignore[no-untyped-def]
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical("treecopy aborted", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception
