"""Tests for the top-level copy entry point."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from treecopy import copy_recursive
from treecopy.engine import CopyEngine
from treecopy.errors import (
    CopyIOError,
    DestinationNotDirectoryError,
    NotSupportedError,
    SourceNotFoundError,
    SymlinkLoopError,
)
from treecopy.filesystem import RealFileSystem
from treecopy.options import CopyOptions
from treecopy.protocols import TreeCopier
from treecopy.types import ErrorMode


class TestCreate:
    """Tests for engine construction."""

    def test_factory_uses_real_filesystem(self) -> None:
        engine = CopyEngine.create()
        assert isinstance(engine.fs, RealFileSystem)

    def test_satisfies_protocol(self) -> None:
        assert isinstance(CopyEngine.create(), TreeCopier)


class TestFileSource:
    """Tests for copying a single file."""

    def test_onto_existing_directory(self, tmp_path: Path, make_file) -> None:
        src = make_file(tmp_path / "f.txt", "file")
        d = tmp_path / "d"
        d.mkdir()

        outcome = copy_recursive(src, d)

        assert (d / "f.txt").read_text() == "file"
        assert outcome.files_copied == 1
        assert outcome.bytes_copied == 4

    def test_onto_new_path_renames(self, tmp_path: Path, make_file) -> None:
        src = make_file(tmp_path / "f.txt", "file")

        copy_recursive(src, tmp_path / "g.txt")

        assert (tmp_path / "g.txt").read_text() == "file"

    def test_existing_file_kept_without_overwrite(self, tmp_path: Path, make_file) -> None:
        src = make_file(tmp_path / "f.txt", "new")
        dst = make_file(tmp_path / "g.txt", "old")

        outcome = copy_recursive(src, dst)

        assert dst.read_text() == "old"
        assert outcome.files_copied == 0
        assert len(outcome.skipped) == 1

    def test_existing_file_replaced_with_overwrite(self, tmp_path: Path, make_file) -> None:
        src = make_file(tmp_path / "f.txt", "new")
        dst = make_file(tmp_path / "g.txt", "old")

        copy_recursive(src, dst, CopyOptions(overwrite=True))

        assert dst.read_text() == "new"

    def test_io_failure_wrapped(self, tmp_path: Path, make_file, failing_filesystem) -> None:
        src = make_file(tmp_path / "f.txt")
        engine = CopyEngine.create(failing_filesystem("open_read", "f.txt"))

        with pytest.raises(CopyIOError) as exc_info:
            engine.copy_recursive(src, tmp_path / "out.txt")

        assert exc_info.value.path == src


class TestDirectorySource:
    """Tests for copying a directory tree."""

    def test_nested_under_source_name(self, src_tree: Path, tmp_path: Path) -> None:
        dst = tmp_path / "dst"
        dst.mkdir()

        copy_recursive(src_tree, dst)

        assert (dst / "src" / "a.txt").read_text() == "alpha"
        assert (dst / "src" / "sub" / "b.txt").read_text() == "beta"

    def test_content_only(self, src_tree: Path, tmp_path: Path) -> None:
        dst = tmp_path / "dst"
        dst.mkdir()

        copy_recursive(src_tree, dst, CopyOptions(content_only=True))

        assert (dst / "a.txt").read_text() == "alpha"
        assert (dst / "sub" / "b.txt").read_text() == "beta"
        assert not (dst / "src").exists()

    def test_missing_destination_becomes_copy_root(self, src_tree: Path, tmp_path: Path) -> None:
        dst = tmp_path / "new" / "dst"

        outcome = copy_recursive(src_tree, dst)

        assert (dst / "a.txt").read_text() == "alpha"
        assert (dst / "sub" / "b.txt").read_text() == "beta"
        assert outcome.directories_created == 2

    def test_round_trip_matches_source(
        self, tmp_path: Path, make_file, snapshot
    ) -> None:
        src = tmp_path / "src"
        make_file(src / "bin" / "run.sh", "#!/bin/sh\n", mode=0o755)
        make_file(src / "etc" / "secret", "s3cret", mode=0o600)
        make_file(src / "docs" / "deep" / "readme.md", "# hi")
        (src / "empty").mkdir()
        (src / "etc").chmod(0o700)
        os.symlink("bin/run.sh", src / "run")
        dst = tmp_path / "dst"

        copy_recursive(src, dst, CopyOptions(overwrite=True))

        assert snapshot(dst) == snapshot(src)
        assert stat.S_IMODE(dst.stat().st_mode) == stat.S_IMODE(src.stat().st_mode)

    def test_second_run_is_identical(self, src_tree: Path, tmp_path: Path, snapshot) -> None:
        os.symlink("a.txt", src_tree / "to-a")
        dst = tmp_path / "dst"
        options = CopyOptions(overwrite=True)

        copy_recursive(src_tree, dst, options)
        first = snapshot(dst)
        outcome = copy_recursive(src_tree, dst, CopyOptions(overwrite=True, content_only=True))

        assert snapshot(dst) == first
        assert outcome.files_copied == 2
        assert outcome.symlinks_created == 1

    def test_no_overwrite_keeps_existing_and_adds_new(
        self, src_tree: Path, tmp_path: Path, make_file
    ) -> None:
        dst = tmp_path / "dst"
        make_file(dst / "src" / "a.txt", "local edit")

        outcome = copy_recursive(src_tree, dst)

        assert (dst / "src" / "a.txt").read_text() == "local edit"
        assert (dst / "src" / "sub" / "b.txt").read_text() == "beta"
        assert outcome.files_copied == 1

    def test_source_ending_in_parent_reference(self, tmp_path: Path, make_file) -> None:
        proj = tmp_path / "proj"
        make_file(proj / "a.txt", "alpha")
        (proj / "inner").mkdir()
        dst = tmp_path / "out" / "dst"
        dst.mkdir(parents=True)

        copy_recursive(proj / "inner" / "..", dst)

        assert (dst / "proj" / "a.txt").read_text() == "alpha"
        assert (dst / "proj" / "inner").is_dir()
        assert [p.name for p in (tmp_path / "out").iterdir()] == ["dst"]

    def test_read_only_content_root_refilled(
        self, src_tree: Path, tmp_path: Path, owner_permission_filesystem
    ) -> None:
        dst = tmp_path / "dst"
        options = CopyOptions(overwrite=True, content_only=True)
        copy_recursive(src_tree, dst, options)
        dst.chmod(0o555)
        (src_tree / "a.txt").write_text("changed")

        engine = CopyEngine.create(owner_permission_filesystem)
        outcome = engine.copy_recursive(src_tree, dst, options)

        assert (dst / "a.txt").read_text() == "changed"
        assert stat.S_IMODE(dst.stat().st_mode) == 0o555
        assert outcome.success

    def test_leftover_symlink_copy_root_not_written_through(
        self, src_tree: Path, tmp_path: Path
    ) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        dst = tmp_path / "dst"
        dst.mkdir()
        os.symlink(outside, dst / "src")

        with pytest.raises(CopyIOError) as exc_info:
            copy_recursive(src_tree, dst)

        assert exc_info.value.path == dst / "src"
        assert list(outside.iterdir()) == []

    def test_destination_is_file(self, src_tree: Path, tmp_path: Path, make_file) -> None:
        dst = make_file(tmp_path / "file.txt")

        with pytest.raises(DestinationNotDirectoryError) as exc_info:
            copy_recursive(src_tree, dst)

        assert exc_info.value.path == dst

    def test_loop_propagates(self, tmp_path: Path, make_file) -> None:
        a = tmp_path / "a"
        make_file(a / "f.txt")
        os.symlink(a, a / "link")

        with pytest.raises(SymlinkLoopError):
            copy_recursive(a, tmp_path / "dst", CopyOptions(follow_symlinks=True))

    def test_fresh_visited_set_per_call(self, tmp_path: Path, make_file) -> None:
        """Repeated calls on one engine do not see each other's directories."""
        src = tmp_path / "src"
        make_file(src / "f.txt")
        engine = CopyEngine.create()

        engine.copy_recursive(src, tmp_path / "one")
        engine.copy_recursive(src, tmp_path / "two")

        assert (tmp_path / "two" / "f.txt").exists()

    def test_resilient_outcome(self, src_tree: Path, tmp_path: Path, failing_filesystem) -> None:
        engine = CopyEngine.create(failing_filesystem("open_read", "b.txt"))

        outcome = engine.copy_recursive(
            src_tree, tmp_path / "dst", CopyOptions(error_mode=ErrorMode.RESILIENT)
        )

        assert outcome.error_count == 1
        assert (tmp_path / "dst" / "a.txt").read_text() == "alpha"


class TestSpecialSources:
    """Tests for missing, symlink and special top-level sources."""

    def test_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(SourceNotFoundError) as exc_info:
            copy_recursive(tmp_path / "nope", tmp_path / "dst")

        assert exc_info.value.path == tmp_path / "nope"
        assert exc_info.value.exit_code == 2

    def test_symlink_recreated_when_not_following(self, src_tree: Path, tmp_path: Path) -> None:
        link = tmp_path / "link"
        link.symlink_to(src_tree)
        dst = tmp_path / "copy"

        outcome = copy_recursive(link, dst)

        assert dst.is_symlink()
        assert os.readlink(dst) == str(src_tree)
        assert outcome.symlinks_created == 1

    def test_symlink_into_existing_directory(self, tmp_path: Path, make_file) -> None:
        make_file(tmp_path / "f.txt")
        link = tmp_path / "link"
        os.symlink("f.txt", link)
        d = tmp_path / "d"
        d.mkdir()

        copy_recursive(link, d)

        assert os.readlink(d / "link") == "f.txt"

    def test_symlink_to_directory_followed(self, src_tree: Path, tmp_path: Path) -> None:
        link = tmp_path / "link"
        link.symlink_to(src_tree)
        dst = tmp_path / "copy"

        copy_recursive(link, dst, CopyOptions(follow_symlinks=True))

        assert not dst.is_symlink()
        assert (dst / "sub" / "b.txt").read_text() == "beta"

    def test_symlink_to_file_followed(self, tmp_path: Path, make_file) -> None:
        make_file(tmp_path / "f.txt", "target")
        link = tmp_path / "link"
        link.symlink_to(tmp_path / "f.txt")

        copy_recursive(link, tmp_path / "out", CopyOptions(follow_symlinks=True))

        assert not (tmp_path / "out").is_symlink()
        assert (tmp_path / "out").read_text() == "target"

    def test_dangling_symlink_followed(self, tmp_path: Path) -> None:
        link = tmp_path / "link"
        link.symlink_to(tmp_path / "gone")

        with pytest.raises(SourceNotFoundError):
            copy_recursive(link, tmp_path / "out", CopyOptions(follow_symlinks=True))

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires mkfifo")
    def test_fifo_not_supported(self, tmp_path: Path) -> None:
        fifo = tmp_path / "pipe"
        os.mkfifo(fifo)

        with pytest.raises(NotSupportedError) as exc_info:
            copy_recursive(fifo, tmp_path / "out")

        assert exc_info.value.path == fifo
