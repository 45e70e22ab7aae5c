"""Shared fixtures for treecopy tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Callable, Iterator

import pytest

from treecopy.infrastructure.logger import configure_logging

# Layout used by most end-to-end copies: plain files at the top and one level down.
REGULAR_LAYOUT: dict[str, Any] = {
    "a": "Hello world",
    "b": "Hello there",
    "c": "",
    "d": "",
    "e": "",
    "f": "",
    "sub": {
        "a": "Hello nodejitsu",
        "b": "",
    },
}


def write_layout(root: Path, layout: dict[str, Any]) -> Path:
    """Create files (str values) and directories (dict values) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        path = root / name
        if isinstance(value, dict):
            write_layout(path, value)
        else:
            path.write_text(value, encoding="utf-8")
    return root


def read_layout(root: Path) -> dict[str, Any]:
    """Inverse of write_layout. Symlinks are read as ``("->", target)``."""
    result: dict[str, Any] = {}
    for name in sorted(os.listdir(root)):
        path = root / name
        if path.is_symlink():
            result[name] = ("->", os.readlink(path))
        elif path.is_dir():
            result[name] = read_layout(path)
        else:
            result[name] = path.read_text(encoding="utf-8")
    return result


@pytest.fixture()
def write_tree() -> Callable[[Path, dict[str, Any]], Path]:
    return write_layout


@pytest.fixture()
def read_tree() -> Callable[[Path], dict[str, Any]]:
    return read_layout


@pytest.fixture()
def src_tree(tmp_path: Path) -> Path:
    """A regular tree of files and directories at tmp_path/src."""
    return write_layout(tmp_path / "src", REGULAR_LAYOUT)


@pytest.fixture()
def symlink_tree(tmp_path: Path) -> Path:
    """Source tree with a link to a file and a link to a directory."""
    src = write_layout(tmp_path / "symlink-src", {"foo": "foo contents", "dir": {"bar": "bar contents"}})
    (src / "file-symlink").symlink_to("foo")
    (src / "dir-symlink").symlink_to("dir")
    return src


@pytest.fixture()
def broken_symlink_tree(tmp_path: Path) -> Path:
    """Source tree holding one dangling symlink next to a regular file."""
    src = write_layout(tmp_path / "broken-src", {"ok": "fine"})
    (src / "broken-symlink").symlink_to("does-not-exist")
    return src


@pytest.fixture()
def out_dir(tmp_path: Path) -> Path:
    """Destination root; not created up front."""
    return tmp_path / "out"


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo any logging reconfiguration made by a test."""
    stream = sys.stderr
    yield
    configure_logging(stream=stream)
