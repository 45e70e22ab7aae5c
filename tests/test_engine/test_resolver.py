"""Tests for destination resolution (rename and overwrite policy)."""

import os
from pathlib import Path

import pytest

from treecopy.engine.classifier import classify
from treecopy.engine.resolver import Action, CallableRename, as_renamer, destination_for, resolve_action
from treecopy.options import CopyOptions
from treecopy.types import KeepName

OLD_NS = 1_000_000_000 * 1_000_000_000  # 2001-09-09
NEW_NS = 4_000_000_000 * 1_000_000_000  # 2096-10-02


def _set_mtime(path: Path, mtime_ns: int) -> None:
    os.utime(path, ns=(mtime_ns, mtime_ns), follow_symlinks=False)


class TestDestinationFor:
    def test_identity_by_default(self):
        assert destination_for(Path("/out/a"), KeepName()) == Path("/out/a")

    def test_plain_function_is_adapted(self):
        renamer = as_renamer(lambda p: str(p.with_name("z")) if p.name == "a" else p)
        assert isinstance(renamer, CallableRename)
        assert destination_for(Path("/out/a"), renamer) == Path("/out/z")
        assert destination_for(Path("/out/b"), renamer) == Path("/out/b")

    def test_rejects_non_callable(self):
        with pytest.raises(ValueError, match="rename must be"):
            as_renamer("z")


class TestResolveAction:
    @pytest.fixture(autouse=True)
    def _setup(self, tmp_path):
        self.src = tmp_path / "src"
        self.out = tmp_path / "out"
        self.src.mkdir()
        self.out.mkdir()
        (self.src / "file").write_text("source")
        (self.src / "dir").mkdir()
        (self.src / "link").symlink_to("file")

    def _item(self, name):
        return classify(self.src / name, Path(name))

    def test_missing_destination_is_created(self):
        assert resolve_action(self._item("file"), self.out / "file", CopyOptions()) is Action.CREATE

    def test_existing_file_replaced_by_default(self):
        (self.out / "file").write_text("old")
        assert resolve_action(self._item("file"), self.out / "file", CopyOptions()) is Action.REPLACE

    def test_existing_file_kept_without_clobber(self):
        (self.out / "file").write_text("old")
        options = CopyOptions(clobber=False)
        assert resolve_action(self._item("file"), self.out / "file", options) is Action.KEEP

    def test_no_clobber_ignores_timestamps(self):
        (self.out / "file").write_text("old")
        _set_mtime(self.out / "file", OLD_NS)
        _set_mtime(self.src / "file", NEW_NS)
        options = CopyOptions(clobber=False)
        assert resolve_action(self._item("file"), self.out / "file", options) is Action.KEEP

    def test_modified_replaces_stale_destination(self):
        (self.out / "file").write_text("old")
        _set_mtime(self.out / "file", OLD_NS)
        _set_mtime(self.src / "file", NEW_NS)
        options = CopyOptions(modified=True, clobber=False)
        assert resolve_action(self._item("file"), self.out / "file", options) is Action.REPLACE

    def test_modified_keeps_current_destination(self):
        (self.out / "file").write_text("newer")
        _set_mtime(self.src / "file", OLD_NS)
        _set_mtime(self.out / "file", NEW_NS)
        options = CopyOptions(modified=True)
        assert resolve_action(self._item("file"), self.out / "file", options) is Action.KEEP

    def test_modified_keeps_destination_with_equal_mtime(self):
        (self.out / "file").write_text("same age")
        _set_mtime(self.src / "file", OLD_NS)
        _set_mtime(self.out / "file", OLD_NS)
        options = CopyOptions(modified=True)
        assert resolve_action(self._item("file"), self.out / "file", options) is Action.KEEP

    def test_existing_directory_is_kept_even_with_clobber(self):
        (self.out / "dir").mkdir()
        assert resolve_action(self._item("dir"), self.out / "dir", CopyOptions()) is Action.KEEP

    def test_identical_symlink_is_kept(self):
        (self.out / "link").symlink_to("file")
        assert resolve_action(self._item("link"), self.out / "link", CopyOptions()) is Action.KEEP

    def test_different_symlink_is_replaced(self):
        (self.out / "link").symlink_to("elsewhere")
        assert resolve_action(self._item("link"), self.out / "link", CopyOptions()) is Action.REPLACE

    def test_dangling_destination_link_counts_as_existing(self):
        (self.out / "file").symlink_to("missing")
        assert resolve_action(self._item("file"), self.out / "file", CopyOptions()) is Action.REPLACE
