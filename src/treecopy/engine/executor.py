"""Single-entry copy operations: directories, files and symlinks.

Each function here is blocking and handles exactly one entry. The walker runs
them on worker threads and attributes any exception to the entry.
"""

from __future__ import annotations

import errno
import os
import stat
import tempfile
import uuid
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Callable

from treecopy.engine.resolver import Action
from treecopy.types import FileMeta, StreamCopy, Transformer

if TYPE_CHECKING:
    from treecopy.options import CopyOptions
    from treecopy.types import EntryStats, TraversalItem


class CallableTransform:
    """Adapt a plain ``(reader, writer, meta)`` function to the Transformer protocol."""

    def __init__(self, fn: Callable[[BinaryIO, BinaryIO, FileMeta], Any]) -> None:
        self.fn = fn

    def transform(self, reader: BinaryIO, writer: BinaryIO, meta: FileMeta) -> None:
        self.fn(reader, writer, meta)


def as_transformer(value: object) -> Transformer:
    if value is None:
        return StreamCopy()
    if isinstance(value, Transformer):
        return value
    if callable(value):
        return CallableTransform(value)
    raise ValueError(f"transform must be a callable or a Transformer, got {type(value).__name__}")


def make_directory(destination: Path, stats: EntryStats, action: Action, *, parents: bool = False) -> bool:
    """Ensure the destination directory exists. Returns True if it was created here.

    New directories stay owner-writable until ``apply_directory_mode`` runs
    after their children are copied.
    """
    if action is Action.CREATE:
        try:
            if parents:
                destination.parent.mkdir(parents=True, exist_ok=True)
            destination.mkdir(mode=stats.permissions | stat.S_IRWXU)
            return True
        except FileExistsError:
            pass

    if not destination.is_dir():
        raise FileExistsError(errno.EEXIST, "Destination exists and is not a directory", str(destination))
    return False


def apply_directory_mode(destination: Path, stats: EntryStats) -> None:
    os.chmod(destination, stats.permissions)


def _link_staging_name(destination: Path) -> Path:
    return destination.with_name(f".{destination.name}.{uuid.uuid4().hex[:8]}.partial")


def copy_file(item: TraversalItem, destination: Path, action: Action, options: CopyOptions) -> None:
    """Stream one file through the configured transform.

    Both handles are closed before returning, on success or failure, so a late
    write error is still raised here and attributed to this entry. A replacement
    is written beside the destination and moved over it only once complete; a
    failed write leaves no partial file behind.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    meta = FileMeta(
        name=str(item.source),
        target=str(destination),
        mode=item.stats.mode,
        size=item.stats.size,
        mtime_ns=item.stats.mtime_ns,
    )
    with open(item.source, "rb") as reader:
        if action is Action.REPLACE:
            fd, staged = tempfile.mkstemp(prefix=f".{destination.name}.", suffix=".partial", dir=destination.parent)
            written = Path(staged)
            writer = os.fdopen(fd, "wb")
        else:
            written = destination
            writer = open(destination, "xb")
        try:
            with writer:
                options.transform.transform(reader, writer, meta)
            os.chmod(written, item.stats.permissions)
            if options.modified:
                os.utime(written, ns=(item.stats.atime_ns, item.stats.mtime_ns))
            if written != destination:
                os.replace(written, destination)
        except BaseException:
            written.unlink(missing_ok=True)
            raise


def copy_symlink(item: TraversalItem, destination: Path, action: Action) -> None:
    """Recreate a link with the same target string, dangling or not."""
    if item.link_target is None:
        raise ValueError(f"{item.source} was not classified as a symlink")
    destination.parent.mkdir(parents=True, exist_ok=True)
    if action is not Action.REPLACE:
        os.symlink(item.link_target, destination)
        return

    staged = _link_staging_name(destination)
    os.symlink(item.link_target, staged)
    try:
        os.replace(staged, destination)
    except BaseException:
        staged.unlink(missing_ok=True)
        raise
