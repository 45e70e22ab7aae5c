"""Recursive filesystem tree copy with filter, transform, rename and overwrite policy."""

from __future__ import annotations

from .api import copy, copy_sync
from .engine.filter import PatternFilter, PredicateFilter
from .infrastructure.config import OptionsError, read_options_file
from .options import CopyOptions, CopyRequest
from .types import (
    AcceptAll,
    CopyFailure,
    CopyResult,
    EntryKind,
    EntryStats,
    FileMeta,
    KeepName,
    PathFilter,
    Renamer,
    StreamCopy,
    TraversalItem,
    Transformer,
)

__all__ = [
    # api
    "copy",
    "copy_sync",
    # config
    "OptionsError",
    "read_options_file",
    # filter
    "PatternFilter",
    "PredicateFilter",
    # options
    "CopyOptions",
    "CopyRequest",
    # types
    "AcceptAll",
    "CopyFailure",
    "CopyResult",
    "EntryKind",
    "EntryStats",
    "FileMeta",
    "KeepName",
    "PathFilter",
    "Renamer",
    "StreamCopy",
    "TraversalItem",
    "Transformer",
]
