"""Tests for pyscout.traversal.walker module."""

from __future__ import annotations

import builtins
import os
from pathlib import Path

import pytest

from pyscout.traversal.ignore import IgnoreFilter
from pyscout.traversal.walker import FileWalker, extension_matches, iter_files
from pyscout.utils.error_handling import ErrorCollector


def rels(root: Path, paths) -> set[str]:
    return {Path(p).relative_to(root).as_posix() for p in paths}


class TestExtensionMatches:
    """Tests for extension_matches."""

    def test_no_filter(self):
        assert extension_matches(Path("Makefile"), None)

    def test_match(self):
        assert extension_matches(Path("src/main.rs"), frozenset({"rs"}))

    def test_case_insensitive(self):
        assert extension_matches(Path("MAIN.RS"), frozenset({"rs"}))

    def test_no_extension(self):
        assert not extension_matches(Path("Makefile"), frozenset({"rs"}))

    def test_last_suffix_only(self):
        assert extension_matches(Path("archive.tar.gz"), frozenset({"gz"}))
        assert not extension_matches(Path("archive.tar.gz"), frozenset({"tar"}))


class TestFileWalker:
    """Tests for FileWalker.walk."""

    def test_default_walk(self, sample_tree):
        found = rels(sample_tree, FileWalker(sample_tree, ignore_filter=IgnoreFilter(sample_tree)).walk())
        assert found == {
            "notes.txt",
            "src/main.rs",
            "src/lib.py",
            "logs/important.log",
        }

    def test_without_filter_sees_everything(self, sample_tree):
        found = rels(sample_tree, FileWalker(sample_tree).walk())
        assert "target/build.rs" in found
        assert "logs/debug.log" in found
        assert ".hidden/secret.txt" in found
        assert ".gitignore" in found

    def test_extension_filter(self, sample_tree):
        walker = FileWalker(sample_tree, frozenset({"rs"}), IgnoreFilter(sample_tree))
        assert rels(sample_tree, walker.walk()) == {"src/main.rs"}

    def test_excluded_directory_is_pruned(self, sample_tree, monkeypatch):
        listed: list[str] = []
        real_scandir = os.scandir

        def tracking_scandir(path):
            listed.append(Path(path).name)
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", tracking_scandir)
        list(FileWalker(sample_tree, ignore_filter=IgnoreFilter(sample_tree)).walk())
        assert "target" not in listed
        assert ".hidden" not in listed
        assert "src" in listed

    def test_hidden_included(self, sample_tree):
        f = IgnoreFilter(sample_tree, include_hidden=True)
        found = rels(sample_tree, FileWalker(sample_tree, ignore_filter=f).walk())
        assert ".hidden/secret.txt" in found
        assert ".gitignore" in found
        assert "target/build.rs" not in found

    def test_vcs_directory_skipped(self, tmp_path, write_file):
        write_file(tmp_path / ".git" / "config", "TODO\n")
        write_file(tmp_path / "a.txt", "TODO\n")
        f = IgnoreFilter(tmp_path, include_hidden=True)
        assert rels(tmp_path, FileWalker(tmp_path, ignore_filter=f).walk()) == {"a.txt"}

    def test_walk_is_lazy(self, sample_tree):
        walker = FileWalker(sample_tree, ignore_filter=IgnoreFilter(sample_tree))
        it = walker.walk()
        assert walker.dirs_visited == 0
        next(it)
        assert walker.dirs_visited >= 1

    def test_symlinked_directory_not_followed(self, tmp_path, write_file):
        write_file(tmp_path / "real" / "a.txt", "TODO\n")
        try:
            os.symlink(tmp_path / "real", tmp_path / "link", target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")
        assert rels(tmp_path, FileWalker(tmp_path).walk()) == {"real/a.txt"}

    def test_symlink_cycle_terminates(self, tmp_path, write_file):
        write_file(tmp_path / "d" / "a.txt", "TODO\n")
        try:
            os.symlink(tmp_path, tmp_path / "d" / "loop", target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")
        assert rels(tmp_path, FileWalker(tmp_path).walk()) == {"d/a.txt"}

    def test_symlinked_file_yielded(self, tmp_path, write_file):
        write_file(tmp_path / "a.txt", "TODO\n")
        try:
            os.symlink(tmp_path / "a.txt", tmp_path / "b.txt")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")
        assert rels(tmp_path, FileWalker(tmp_path).walk()) == {"a.txt", "b.txt"}

    def test_dangling_symlink_dropped(self, tmp_path, write_file):
        write_file(tmp_path / "a.txt", "TODO\n")
        try:
            os.symlink(tmp_path / "missing.txt", tmp_path / "dangling.txt")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")
        assert rels(tmp_path, FileWalker(tmp_path).walk()) == {"a.txt"}

    def test_unlistable_directory_is_counted(self, tmp_path, write_file, monkeypatch):
        write_file(tmp_path / "ok" / "a.txt", "TODO\n")
        write_file(tmp_path / "locked" / "b.txt", "TODO\n")
        real_scandir = os.scandir

        def guarded_scandir(path):
            if Path(path).name == "locked":
                raise builtins.PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", guarded_scandir)
        collector = ErrorCollector()
        walker = FileWalker(tmp_path, error_collector=collector)
        assert rels(tmp_path, walker.walk()) == {"ok/a.txt"}
        assert walker.dirs_skipped == 1
        assert collector.get_summary()["total_errors"] == 1

    def test_stop_predicate(self, sample_tree):
        walker = FileWalker(sample_tree, stop=lambda: True)
        assert list(walker.walk()) == []

    def test_iter_files(self, sample_tree):
        found = rels(sample_tree, iter_files(sample_tree, frozenset({"py"}), IgnoreFilter(sample_tree)))
        assert found == {"src/lib.py"}
