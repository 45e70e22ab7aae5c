"""Entry classification from a non-following stat."""

from __future__ import annotations

import os
import stat
from typing import TYPE_CHECKING

from treecopy.types import EntryKind, EntryStats, TraversalItem

if TYPE_CHECKING:
    from pathlib import Path


def kind_of(mode: int) -> EntryKind:
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    return EntryKind.OTHER


def classify(source: Path, relative: Path, *, dereference: bool = False) -> TraversalItem:
    """Inspect a source entry and return it as a TraversalItem.

    Symlinks are reported as such unless ``dereference`` is set, in which case
    the link target's kind and stats are used. A link whose target is missing
    raises FileNotFoundError in that mode rather than being skipped.
    """
    st = os.stat(source, follow_symlinks=dereference)
    kind = kind_of(st.st_mode)
    link_target = os.readlink(source) if kind is EntryKind.SYMLINK else None
    return TraversalItem(
        source=source,
        relative=relative,
        kind=kind,
        stats=EntryStats.from_stat_result(st),
        link_target=link_target,
    )
