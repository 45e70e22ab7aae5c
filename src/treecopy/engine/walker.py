"""Tree walker: drives filter, classifier, resolver and executor over a tree.

Siblings are copied concurrently in one ``asyncio.TaskGroup`` per directory.
A directory is created before any of its children start, and each child task
returns its own failure list which is merged when the group joins.
"""

from __future__ import annotations

import asyncio
import errno
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from treecopy.engine.classifier import classify
from treecopy.engine.executor import apply_directory_mode, copy_file, copy_symlink, make_directory
from treecopy.engine.resolver import Action, destination_for, resolve_action
from treecopy.infrastructure.logger import logger
from treecopy.types import CopyFailure, CopyResult, EntryKind

if TYPE_CHECKING:
    from treecopy.options import CopyRequest
    from treecopy.types import TraversalItem

T = TypeVar("T")


class TreeWalker:
    """Copies one source tree for one request. Not reusable across requests."""

    def __init__(self, request: CopyRequest) -> None:
        self._request = request
        self._options = request.options
        self._slots = asyncio.Semaphore(self._options.limit)
        self._halted = False
        # Final destinations of files and links written so far.
        self._claimed: set[str] = set()

    async def run(self) -> CopyResult:
        source = self._request.source
        errors = await self._visit(source, Path(), self._request.destination, frozenset(), root=True)
        return CopyResult(errors=errors)

    async def _io(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        async with self._slots:
            return await asyncio.to_thread(fn, *args, **kwargs)

    async def _write(self, fn: Callable[..., Any], *args: Any) -> bool:
        """Run a destination write unless a failure has halted the copy meanwhile."""
        async with self._slots:
            if self._halted:
                return False
            await asyncio.to_thread(fn, *args)
            return True

    def _fail(self, path: Path, exc: BaseException) -> CopyFailure:
        failure = CopyFailure.from_exception(path, exc)
        logger.warning("Entry failed", path=failure.path, code=failure.code, error=failure.message)
        if self._options.stop_on_error:
            self._halted = True
        return failure

    async def _visit(
        self,
        source: Path,
        relative: Path,
        naive: Path,
        ancestors: frozenset[tuple[int, int]],
        *,
        root: bool = False,
    ) -> list[CopyFailure]:
        if self._halted:
            return []
        try:
            return await self._dispatch(source, relative, naive, ancestors, root)
        except Exception as exc:
            return [self._fail(source, exc)]

    async def _dispatch(
        self,
        source: Path,
        relative: Path,
        naive: Path,
        ancestors: frozenset[tuple[int, int]],
        root: bool,
    ) -> list[CopyFailure]:
        options = self._options
        if not root and source == self._request.destination:
            logger.debug("Skipping destination nested in source", path=str(source))
            return []
        if not options.filter.include(str(source)):
            logger.debug("Filtered out", path=str(source))
            return []

        item = await self._io(classify, source, relative, dereference=options.dereference)

        if item.kind is EntryKind.OTHER:
            logger.debug("Skipping special file", path=str(source), mode=oct(item.stats.mode))
            return []

        destination = destination_for(naive, options.rename)
        if item.kind is EntryKind.DIRECTORY:
            return await self._copy_directory(item, destination, ancestors, root)
        return await self._copy_leaf(item, destination)

    async def _copy_leaf(self, item: TraversalItem, destination: Path) -> list[CopyFailure]:
        key = os.path.abspath(destination)
        if key in self._claimed:
            raise FileExistsError(errno.EEXIST, "Destination already written by another entry", str(destination))
        self._claimed.add(key)

        action = await self._io(resolve_action, item, destination, self._options)
        if action is Action.KEEP:
            logger.debug("Destination kept", path=str(item.source), destination=str(destination))
            return []

        if item.kind is EntryKind.SYMLINK:
            written = await self._write(copy_symlink, item, destination, action)
        else:
            written = await self._write(copy_file, item, destination, action, self._options)
        if written:
            logger.debug("Copied", path=str(item.source), destination=str(destination), action=action.value)
        return []

    async def _copy_directory(
        self,
        item: TraversalItem,
        destination: Path,
        ancestors: frozenset[tuple[int, int]],
        root: bool,
    ) -> list[CopyFailure]:
        identity = (item.stats.dev, item.stats.ino)
        if identity in ancestors:
            raise OSError(errno.ELOOP, "Directory cycle through symlink", str(item.source))

        action = await self._io(resolve_action, item, destination, self._options)
        if self._halted:
            return []
        created = await self._io(make_directory, destination, item.stats, action, parents=root)
        names = await self._io(_sorted_listing, item.source)

        # Rename applies to the directory's own path; children land under the renamed one.
        inner = ancestors | {identity}
        async with asyncio.TaskGroup() as group:
            tasks = [
                group.create_task(
                    self._visit(
                        item.source / name,
                        item.relative / name,
                        destination / name,
                        inner,
                    )
                )
                for name in names
            ]

        errors = [failure for task in tasks for failure in task.result()]

        if created:
            try:
                await self._io(apply_directory_mode, destination, item.stats)
            except Exception as exc:
                errors.append(self._fail(item.source, exc))
        return errors


def _sorted_listing(path: Path) -> list[str]:
    return sorted(os.listdir(path))
