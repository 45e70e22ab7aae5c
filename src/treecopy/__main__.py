"""Entry point: python -m treecopy SOURCE DESTINATION"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from treecopy.api import copy_sync
from treecopy.infrastructure.config import OptionsError, read_options_file
from treecopy.infrastructure.logger import configure_logging, install_exception_hooks, logger
from treecopy.options import CopyOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="treecopy", description="Recursively copy a directory tree.")
    parser.add_argument("source", help="file or directory to copy")
    parser.add_argument("destination", help="path to copy to")
    parser.add_argument("--options", type=Path, help="YAML file with copy options")
    parser.add_argument("--filter", dest="filter", help="regular expression a source path must match to be copied")
    parser.add_argument("--no-clobber", dest="clobber", action="store_false", default=None,
                        help="leave existing destination files untouched")
    parser.add_argument("--dereference", action="store_true", default=None, help="copy what symlinks point to")
    parser.add_argument("--modified", action="store_true", default=None,
                        help="only overwrite destination files older than the source")
    parser.add_argument("--stop-on-error", dest="stop_on_error", action="store_true", default=None,
                        help="stop dispatching new entries after the first failure")
    parser.add_argument("--limit", type=int, help="maximum concurrent filesystem operations")
    parser.add_argument("--log-level", dest="log_level", help="log threshold, overriding LOG_LEVEL (e.g. debug)")
    return parser


def _collect_options(args: argparse.Namespace) -> dict[str, Any]:
    raw: dict[str, Any] = {}
    if args.options is not None:
        raw.update(read_options_file(args.options))
    for key in ("filter", "clobber", "dereference", "modified", "stop_on_error", "limit"):
        value = getattr(args, key)
        if value is not None:
            raw[key] = value
    return raw


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level is not None:
        configure_logging(args.log_level)

    try:
        options = CopyOptions.model_validate(_collect_options(args))
    except (OptionsError, ValidationError) as err:
        print(f"treecopy: {err}", file=sys.stderr)
        return 2

    result = copy_sync(args.source, args.destination, options)
    print(json.dumps(result.model_dump(), indent=2))

    if not result.success:
        logger.error("Copy incomplete", failures=len(result.errors))
        return 1
    return 0


def run() -> None:
    install_exception_hooks()
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    run()
