"""Copy options and the per-invocation request."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from treecopy.engine.executor import as_transformer
from treecopy.engine.filter import as_path_filter
from treecopy.engine.resolver import as_renamer
from treecopy.infrastructure.config import DEFAULT_LIMIT, MAX_LIMIT
from treecopy.types import AcceptAll, KeepName, PathFilter, Renamer, StreamCopy, Transformer


class CopyOptions(BaseModel):
    """Policy for one copy. Every field is optional.

    ``filter``, ``transform`` and ``rename`` take either the capability object
    or a plain callable; ``filter`` also takes a regular expression.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    filter: PathFilter = Field(default_factory=AcceptAll)
    transform: Transformer = Field(default_factory=StreamCopy)
    rename: Renamer = Field(default_factory=KeepName)
    clobber: bool = True
    dereference: bool = False
    modified: bool = False
    stop_on_error: bool = False
    limit: int = DEFAULT_LIMIT

    @field_validator("filter", mode="before")
    @classmethod
    def _coerce_filter(cls, value: object) -> PathFilter:
        return as_path_filter(value)

    @field_validator("transform", mode="before")
    @classmethod
    def _coerce_transform(cls, value: object) -> Transformer:
        return as_transformer(value)

    @field_validator("rename", mode="before")
    @classmethod
    def _coerce_rename(cls, value: object) -> Renamer:
        return as_renamer(value)

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: int) -> int:
        return min(max(value, 1), MAX_LIMIT)


class CopyRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: Path
    destination: Path
    options: CopyOptions = Field(default_factory=CopyOptions)
