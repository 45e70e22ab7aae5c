"""Configuration constants and options-file parsing."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

# Blocking filesystem calls allowed in flight at once for one copy.
DEFAULT_LIMIT: int = max(1, int(os.environ.get("TREECOPY_LIMIT", "16")))
MAX_LIMIT: int = 512

# Keys an options file may set. Callables (transform, rename) only come from code.
OPTION_FILE_KEYS: frozenset[str] = frozenset(
    {"filter", "clobber", "dereference", "modified", "stop_on_error", "limit"}
)


class OptionsError(ValueError):
    """An options file could not be read or does not describe copy options."""


def read_options_file(path: Path) -> dict[str, Any]:
    """Parse a YAML options file and return its raw mapping.

    Validation of the values is left to ``CopyOptions`` so that command-line
    overrides can be merged in first.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as err:
        raise OptionsError(f"Cannot read options file {path}: {err}") from err

    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as err:
        raise OptionsError(f"Error parsing YAML options file {path}: {err}") from err

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise OptionsError(f"Options file {path} must contain a mapping, got {type(raw).__name__}")

    unknown = sorted(str(key) for key in raw if key not in OPTION_FILE_KEYS)
    if unknown:
        raise OptionsError(f"Unknown keys in options file {path}: {', '.join(unknown)}")

    return raw
