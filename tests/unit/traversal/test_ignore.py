"""Tests for pyscout.traversal.ignore module."""

from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from pyscout.traversal.ignore import VCS_DIRS, IgnoreFilter, IgnoreRuleSet


def p(path: str) -> PurePosixPath:
    return PurePosixPath(path)


class TestIgnoreRuleSet:
    """Tests for IgnoreRuleSet.decide."""

    def test_glob_excludes(self):
        rules = IgnoreRuleSet.from_lines(".", ["*.log"])
        assert rules.decide(p("debug.log")) is True
        assert rules.decide(p("logs/debug.log")) is True

    def test_no_match_is_undecided(self):
        rules = IgnoreRuleSet.from_lines(".", ["*.log"])
        assert rules.decide(p("main.rs")) is None

    def test_negation_reincludes(self):
        rules = IgnoreRuleSet.from_lines(".", ["*.log", "!important.log"])
        assert rules.decide(p("debug.log")) is True
        assert rules.decide(p("important.log")) is False

    def test_last_match_wins(self):
        rules = IgnoreRuleSet.from_lines(".", ["!important.log", "*.log"])
        assert rules.decide(p("important.log")) is True

    def test_comments_and_blank_lines(self):
        rules = IgnoreRuleSet.from_lines(".", ["# comment", "", "   ", "*.tmp"])
        assert len(rules) == 1

    def test_invalid_line_skipped(self):
        rules = IgnoreRuleSet.from_lines(".", ["!", "*.log"])
        assert len(rules) == 1
        assert rules.decide(p("a.log")) is True

    def test_directory_only_pattern(self):
        rules = IgnoreRuleSet.from_lines(".", ["build/"])
        assert rules.decide(p("build"), is_dir=True) is True
        assert rules.decide(p("build"), is_dir=False) is None

    def test_anchored_pattern(self):
        rules = IgnoreRuleSet.from_lines(".", ["/top.txt"])
        assert rules.decide(p("top.txt")) is True
        assert rules.decide(p("sub/top.txt")) is None

    def test_double_star(self):
        rules = IgnoreRuleSet.from_lines(".", ["docs/**/*.md"])
        assert rules.decide(p("docs/a/b/readme.md")) is True
        assert rules.decide(p("readme.md")) is None

    def test_rules_scoped_to_base(self):
        rules = IgnoreRuleSet.from_lines("sub", ["*.txt", "/local.rs"])
        assert rules.decide(p("sub/a.txt")) is True
        assert rules.decide(p("other/a.txt")) is None
        assert rules.decide(p("sub/local.rs")) is True
        assert rules.decide(p("sub/deeper/local.rs")) is None


class TestIgnoreFilter:
    """Tests for IgnoreFilter.should_skip over real ignore files."""

    def test_root_rules(self, tmp_path, write_file):
        write_file(tmp_path / ".gitignore", "*.log\n!important.log\n")
        f = IgnoreFilter(tmp_path)
        assert f.should_skip("logs/debug.log")
        assert not f.should_skip("logs/important.log")
        assert not f.should_skip("main.rs")

    def test_nested_file_overrides_parent(self, tmp_path, write_file):
        write_file(tmp_path / ".gitignore", "*.log\n")
        write_file(tmp_path / "sub" / ".gitignore", "!keep.log\n")
        f = IgnoreFilter(tmp_path)
        assert not f.should_skip("sub/keep.log")
        assert f.should_skip("sub/other.log")
        assert f.should_skip("keep.log")

    def test_nested_rules_do_not_leak_to_siblings(self, tmp_path, write_file):
        write_file(tmp_path / "a" / ".gitignore", "*.txt\n")
        f = IgnoreFilter(tmp_path)
        assert f.should_skip("a/x.txt")
        assert not f.should_skip("b/x.txt")

    def test_dot_ignore_file(self, tmp_path, write_file):
        write_file(tmp_path / ".ignore", "vendor/\n")
        f = IgnoreFilter(tmp_path)
        assert f.should_skip("vendor", is_dir=True)

    def test_custom_ignore_file_names(self, tmp_path, write_file):
        write_file(tmp_path / ".gitignore", "*.log\n")
        write_file(tmp_path / ".scoutignore", "*.tmp\n")
        f = IgnoreFilter(tmp_path, ignore_files=[".scoutignore"])
        assert not f.should_skip("a.log")
        assert f.should_skip("a.tmp")

    def test_ignore_files_disabled(self, tmp_path, write_file):
        write_file(tmp_path / ".gitignore", "*.log\n")
        f = IgnoreFilter(tmp_path, use_ignore_files=False)
        assert not f.should_skip("a.log")

    def test_hidden_skipped_by_default(self, tmp_path):
        f = IgnoreFilter(tmp_path)
        assert f.should_skip(".env")
        assert f.should_skip(".cache", is_dir=True)

    def test_hidden_included_on_request(self, tmp_path):
        f = IgnoreFilter(tmp_path, include_hidden=True)
        assert not f.should_skip(".env")

    @pytest.mark.parametrize("name", sorted(VCS_DIRS))
    def test_vcs_dirs_always_skipped(self, tmp_path, name):
        f = IgnoreFilter(tmp_path, use_ignore_files=False, include_hidden=True)
        assert f.should_skip(name, is_dir=True)

    def test_rules_loaded_once(self, tmp_path, write_file):
        write_file(tmp_path / ".gitignore", "*.log\n")
        f = IgnoreFilter(tmp_path)
        first = f.rules_for_dir(p("."))
        (tmp_path / ".gitignore").write_text("*.rs\n", encoding="utf-8")
        assert f.rules_for_dir(p(".")) is first
        assert f.should_skip("a.log")

    def test_directory_without_rules(self, tmp_path):
        f = IgnoreFilter(tmp_path)
        assert f.rules_for_dir(p(".")) is None
        assert f.applicable_rules(p("a/b")) == []

    def test_applicable_rules_shallowest_first(self, tmp_path, write_file):
        write_file(tmp_path / ".gitignore", "*.log\n")
        write_file(tmp_path / "a" / "b" / ".gitignore", "*.tmp\n")
        f = IgnoreFilter(tmp_path)
        bases = [rs.base for rs in f.applicable_rules(p("a/b"))]
        assert bases == [p("."), p("a/b")]
