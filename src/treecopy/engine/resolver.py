"""Destination resolution: rename and overwrite policy."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from treecopy.types import EntryKind, KeepName, Renamer

if TYPE_CHECKING:
    from treecopy.options import CopyOptions
    from treecopy.types import TraversalItem


class Action(str, Enum):
    CREATE = "create"
    REPLACE = "replace"
    KEEP = "keep"


class CallableRename:
    """Adapt a plain ``path -> path`` function to the Renamer protocol."""

    def __init__(self, fn: Callable[[Path], Any]) -> None:
        self.fn = fn

    def rename(self, path: Path) -> Path:
        return Path(self.fn(path))


def as_renamer(value: object) -> Renamer:
    if value is None:
        return KeepName()
    if isinstance(value, Renamer):
        return value
    if callable(value):
        return CallableRename(value)
    raise ValueError(f"rename must be a callable or a Renamer, got {type(value).__name__}")


def destination_for(naive: Path, renamer: Renamer) -> Path:
    """Final destination of an entry: its naive destination passed through the renamer."""
    return Path(renamer.rename(naive))


def _is_stale(item: TraversalItem, destination: Path, dereference: bool) -> bool:
    try:
        dest_stat = os.stat(destination, follow_symlinks=dereference)
    except FileNotFoundError:
        # Dangling link at the destination: nothing current to keep.
        return True
    return item.stats.mtime_ns > dest_stat.st_mtime_ns


def resolve_action(item: TraversalItem, destination: Path, options: CopyOptions) -> Action:
    """Decide what to do with an entry whose final destination is known.

    A missing destination is always created. Directories that already exist are
    kept and descended into. For other kinds, ``modified`` replaces only a stale
    destination, otherwise ``clobber`` decides between replacing and keeping.
    A symlink whose destination already points at the same target is kept.
    """
    if not os.path.lexists(destination):
        return Action.CREATE

    if item.kind is EntryKind.DIRECTORY:
        return Action.KEEP

    if item.kind is EntryKind.SYMLINK and os.path.islink(destination):
        if os.readlink(destination) == item.link_target:
            return Action.KEEP

    if options.modified:
        return Action.REPLACE if _is_stale(item, destination, options.dereference) else Action.KEEP

    return Action.REPLACE if options.clobber else Action.KEEP
