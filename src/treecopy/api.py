"""Public copy entry points."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Callable

import structlog

from treecopy.engine.walker import TreeWalker
from treecopy.infrastructure.logger import logger
from treecopy.options import CopyOptions, CopyRequest
from treecopy.types import CopyResult


async def copy(
    source: str | os.PathLike[str],
    destination: str | os.PathLike[str],
    options: CopyOptions | None = None,
    *,
    on_complete: Callable[[CopyResult], None] | None = None,
) -> CopyResult:
    """Recursively copy ``source`` to ``destination``.

    Filesystem failures never raise out of here: each one is attributed to the
    entry that caused it and returned in ``CopyResult.errors``. An empty list
    means the whole (filtered) tree was copied. ``on_complete``, if given, is
    called exactly once with the same result before it is returned.
    """
    request = CopyRequest(
        source=Path(os.path.abspath(source)),
        destination=Path(os.path.abspath(destination)),
        options=options if options is not None else CopyOptions(),
    )

    with structlog.contextvars.bound_contextvars(source=str(request.source), destination=str(request.destination)):
        logger.info("Copy started")
        result = await TreeWalker(request).run()
        if result.success:
            logger.info("Copy finished")
        else:
            logger.warning("Copy finished with failures", failures=len(result.errors))

    if on_complete is not None:
        on_complete(result)
    return result


def copy_sync(
    source: str | os.PathLike[str],
    destination: str | os.PathLike[str],
    options: CopyOptions | None = None,
) -> CopyResult:
    """Blocking wrapper around ``copy`` for callers without an event loop."""
    return asyncio.run(copy(source, destination, options))
