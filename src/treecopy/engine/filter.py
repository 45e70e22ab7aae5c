"""Path filtering: decides whether an entry takes part in a copy."""

from __future__ import annotations

import re
from typing import Any, Callable

from treecopy.types import AcceptAll, PathFilter


class PatternFilter:
    """Include paths in which the regular expression finds a match."""

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def include(self, path: str) -> bool:
        return self.pattern.search(path) is not None

    def __repr__(self) -> str:
        return f"PatternFilter({self.pattern.pattern!r})"


class PredicateFilter:
    """Include paths for which a plain predicate returns a truthy value."""

    def __init__(self, predicate: Callable[[str], Any]) -> None:
        self.predicate = predicate

    def include(self, path: str) -> bool:
        return bool(self.predicate(path))


def as_path_filter(value: object) -> PathFilter:
    """Coerce a filter option into a PathFilter.

    Accepts None (everything included), a PathFilter, a regex string or
    compiled pattern, or a predicate callable taking the source path.
    """
    if value is None:
        return AcceptAll()
    if isinstance(value, PathFilter):
        return value
    if isinstance(value, (str, re.Pattern)):
        try:
            return PatternFilter(value)
        except re.error as err:
            raise ValueError(f"invalid filter pattern {value!r}: {err}") from err
    if callable(value):
        return PredicateFilter(value)
    raise ValueError(f"filter must be a pattern, a predicate or a PathFilter, got {type(value).__name__}")
