"""Tests for dupfind.walker: iterative directory traversal."""

from dupfind.walker import ErrorEntry
from dupfind.walker import FileEntry
from dupfind.walker import Walker

import inspect
import os
import pathlib
import pytest
import sys


def _files(walker):
    return [e for e in walker if isinstance(e, FileEntry)]


class TestWalkerConstruction:
    """Test opening the root listing."""

    def test_nonexistent_root_raises(self, tmp_path: pathlib.Path):
        with pytest.raises(FileNotFoundError):
            Walker(tmp_path / "nope")

    def test_file_as_root_raises(self, tmp_path: pathlib.Path):
        f = tmp_path / "plain.txt"
        f.write_text("not a directory")
        with pytest.raises(NotADirectoryError):
            Walker(f)

    def test_accepts_str_root(self, tmp_source: pathlib.Path):
        (tmp_source / "a.txt").write_text("a")
        entries = list(Walker(str(tmp_source)))
        assert entries == [FileEntry(path=tmp_source / "a.txt", length=1)]


class TestWalkerTraversal:
    """Test depth-first discovery of regular files."""

    def test_empty_directory(self, tmp_source: pathlib.Path):
        assert list(Walker(tmp_source)) == []

    def test_reports_length(self, tmp_source: pathlib.Path):
        (tmp_source / "five.bin").write_bytes(b"12345")
        (entry,) = list(Walker(tmp_source))
        assert entry.path == tmp_source / "five.bin"
        assert entry.length == 5

    def test_empty_file_has_zero_length(self, tmp_source: pathlib.Path):
        (tmp_source / "empty").write_bytes(b"")
        (entry,) = list(Walker(tmp_source))
        assert entry.length == 0

    def test_directories_are_not_emitted(self, tmp_source: pathlib.Path):
        (tmp_source / "sub").mkdir()
        (tmp_source / "sub" / "inner").mkdir()
        assert list(Walker(tmp_source)) == []

    def test_finds_files_at_any_depth(self, deep_tree: pathlib.Path):
        bottom = deep_tree / "one" / "two" / "three"
        paths = {e.path for e in _files(Walker(deep_tree))}
        assert paths == {bottom / "first.bin", bottom / "second.bin"}

    def test_deep_tree_does_not_recurse(self, tmp_source: pathlib.Path):
        current = tmp_source
        for _ in range(200):
            current = current / "d"
            current.mkdir()
        (current / "leaf.txt").write_text("leaf")
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(len(inspect.stack()) + 100)
        try:
            (entry,) = _files(Walker(tmp_source))
        finally:
            sys.setrecursionlimit(limit)
        assert entry.path == current / "leaf.txt"

    def test_descends_before_siblings(self, tmp_source: pathlib.Path):
        sub = tmp_source / "sub"
        sub.mkdir()
        (sub / "inner.txt").write_text("in")
        (tmp_source / "outer.txt").write_text("out")
        paths = [e.path for e in Walker(tmp_source)]
        assert set(paths) == {sub / "inner.txt", tmp_source / "outer.txt"}
        # each subtree is emitted contiguously: nothing from the parent
        # interleaves with a directory's own files
        sub2 = tmp_source / "sub2"
        sub2.mkdir()
        for name in ("x", "y", "z"):
            (sub2 / name).write_text(name)
        paths = [e.path for e in Walker(tmp_source)]
        positions = [i for i, p in enumerate(paths) if p.parent == sub2]
        assert positions == list(range(positions[0], positions[0] + 3))

    def test_skips_symlinks(self, tmp_source: pathlib.Path):
        target = tmp_source / "real.txt"
        target.write_text("real")
        (tmp_source / "link.txt").symlink_to(target)
        linked_dir = tmp_source / "dir"
        linked_dir.mkdir()
        (linked_dir / "inside.txt").write_text("inside")
        (tmp_source / "dirlink").symlink_to(linked_dir, target_is_directory=True)

        paths = [e.path for e in Walker(tmp_source)]
        assert sorted(paths) == sorted([target, linked_dir / "inside.txt"])

    def test_skips_fifos(self, tmp_source: pathlib.Path):
        if not hasattr(os, "mkfifo"):
            pytest.skip("no FIFOs on this platform")
        os.mkfifo(tmp_source / "pipe")
        (tmp_source / "a.txt").write_text("a")
        assert [e.path.name for e in Walker(tmp_source)] == ["a.txt"]

    def test_iterator_is_consumed_once(self, tmp_source: pathlib.Path):
        (tmp_source / "a.txt").write_text("a")
        walker = Walker(tmp_source)
        assert iter(walker) is walker
        assert len(list(walker)) == 1
        assert list(walker) == []

    def test_close_releases_cursors(self, deep_tree: pathlib.Path):
        walker = Walker(deep_tree)
        next(walker)
        walker.close()
        assert list(walker) == []


class TestWalkerErrors:
    """Test per-entry errors during traversal."""

    def _deny(self, monkeypatch, denied: pathlib.Path):
        real_scandir = os.scandir

        def fake_scandir(path):
            if pathlib.Path(path) == denied:
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr("dupfind.walker.os.scandir", fake_scandir)

    def test_unlistable_directory_yields_one_error(self, tmp_source, monkeypatch):
        locked = tmp_source / "locked"
        locked.mkdir()
        (locked / "hidden.txt").write_text("secret")
        sibling = tmp_source / "open"
        sibling.mkdir()
        (sibling / "visible.txt").write_text("visible")
        self._deny(monkeypatch, locked)

        entries = list(Walker(tmp_source))
        errors = [e for e in entries if isinstance(e, ErrorEntry)]
        files = [e for e in entries if isinstance(e, FileEntry)]
        assert len(errors) == 1
        assert errors[0].path == locked
        assert isinstance(errors[0].error, PermissionError)
        assert [f.path for f in files] == [sibling / "visible.txt"]

    def test_unreadable_root_raises(self, tmp_source, monkeypatch):
        self._deny(monkeypatch, tmp_source)
        with pytest.raises(PermissionError):
            Walker(tmp_source)

    def test_failed_read_yields_error_without_path(self, tmp_source, monkeypatch):
        broken = tmp_source / "broken"
        broken.mkdir()
        (broken / "lost.txt").write_text("lost")
        (tmp_source / "kept.txt").write_text("kept")
        real_scandir = os.scandir

        class FailingCursor:
            def __iter__(self):
                return self

            def __next__(self):
                raise OSError(5, "Input/output error")

            def close(self):
                pass

        def fake_scandir(path):
            if pathlib.Path(path) == broken:
                return FailingCursor()
            return real_scandir(path)

        monkeypatch.setattr("dupfind.walker.os.scandir", fake_scandir)
        entries = list(Walker(tmp_source))
        errors = [e for e in entries if isinstance(e, ErrorEntry)]
        assert len(errors) == 1
        assert errors[0].path is None
        assert [e.path for e in entries if isinstance(e, FileEntry)] == [tmp_source / "kept.txt"]

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permission bits are not enforced for root",
    )
    def test_chmod_locked_directory(self, tmp_source: pathlib.Path):
        locked = tmp_source / "locked"
        locked.mkdir()
        (locked / "hidden.txt").write_text("secret")
        locked.chmod(0)
        try:
            entries = list(Walker(tmp_source))
        finally:
            locked.chmod(0o755)
        assert [type(e) for e in entries] == [ErrorEntry]
