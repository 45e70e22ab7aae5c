"""Copy engine domain types and capability protocols."""

from __future__ import annotations

import errno
import os
import shutil
import stat
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


class EntryStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: int
    size: int
    mtime_ns: int
    atime_ns: int
    dev: int = 0
    ino: int = 0

    @classmethod
    def from_stat_result(cls, st: os.stat_result) -> EntryStats:
        return cls(
            mode=st.st_mode,
            size=st.st_size,
            mtime_ns=st.st_mtime_ns,
            atime_ns=st.st_atime_ns,
            dev=st.st_dev,
            ino=st.st_ino,
        )

    @property
    def permissions(self) -> int:
        return stat.S_IMODE(self.mode)


class TraversalItem(BaseModel):
    """One source entry on its way through filter, classifier, resolver and executor."""

    model_config = ConfigDict(frozen=True)

    source: Path
    relative: Path
    kind: EntryKind
    stats: EntryStats
    link_target: str | None = None


class FileMeta(BaseModel):
    """Metadata handed to a transform alongside the open source and destination."""

    model_config = ConfigDict(frozen=True)

    name: str
    target: str
    mode: int
    size: int
    mtime_ns: int


class CopyFailure(BaseModel):
    path: str
    code: str
    message: str

    @classmethod
    def from_exception(cls, path: Path | str, exc: BaseException) -> CopyFailure:
        """Attribute an exception to a source path.

        OSErrors carry their errno symbol (ENOENT, EACCES, ...); anything else
        raised by caller-supplied code is reported under its class name.
        """
        if isinstance(exc, OSError) and exc.errno is not None:
            code = errno.errorcode.get(exc.errno, str(exc.errno))
        else:
            code = type(exc).__name__
        return cls(path=str(path), code=code, message=str(exc))


class CopyResult(BaseModel):
    errors: list[CopyFailure] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


@runtime_checkable
class PathFilter(Protocol):
    def include(self, path: str) -> bool: ...


@runtime_checkable
class Transformer(Protocol):
    def transform(self, reader: BinaryIO, writer: BinaryIO, meta: FileMeta) -> None: ...


@runtime_checkable
class Renamer(Protocol):
    def rename(self, path: Path) -> Path: ...


class AcceptAll:
    """Default filter: every entry takes part in the copy."""

    def include(self, path: str) -> bool:
        return True


class StreamCopy:
    """Default transform: raw byte-for-byte copy."""

    def transform(self, reader: BinaryIO, writer: BinaryIO, meta: FileMeta) -> None:
        shutil.copyfileobj(reader, writer)


class KeepName:
    """Default rename: destination path unchanged."""

    def rename(self, path: Path) -> Path:
        return path
