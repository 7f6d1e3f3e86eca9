"""Tests for version discovery, parsing, rewriting and sync."""

import pytest

from conftest import CHILD_INI, git, gitmodules, init_repo, version_rb

from submoduler_parent.config import Settings
from submoduler_parent.version.inspector import (
    SemVer,
    extract_version,
    find_version_file,
    highest,
    parse_version,
    read_version_string,
    write_version,
)
from submoduler_parent.version.sync import run_sync_version


class TestParseVersion:
    @pytest.mark.parametrize("text, expected", [
        ("1.2.3", SemVer(1, 2, 3)),
        ("0.0.0", SemVer(0, 0, 0)),
        ("10.20.30", SemVer(10, 20, 30)),
        (" 4.5.6 ", SemVer(4, 5, 6)),
    ])
    def test_valid(self, text, expected):
        assert parse_version(text) == expected

    @pytest.mark.parametrize("text", ["1.2", "1.x.0", "1.2.3.pre", "v1.2.3", "", "1..3", "-1.2.3"])
    def test_rejected(self, text):
        assert parse_version(text) is None

    def test_ordering_is_componentwise(self):
        assert SemVer(1, 10, 0) > SemVer(1, 9, 9)
        assert SemVer(2, 0, 0) > SemVer(1, 99, 99)
        assert SemVer(1, 2, 4) > SemVer(1, 2, 3)
        assert str(SemVer(1, 10, 0)) == "1.10.0"

    def test_highest(self):
        assert highest([SemVer(1, 2, 0), SemVer(1, 10, 0), SemVer(1, 9, 5)]) == SemVer(1, 10, 0)
        assert highest([]) is None


class TestVersionFile:
    def test_one_level_pattern_wins(self, tmp_path):
        (tmp_path / "lib" / "gem").mkdir(parents=True)
        (tmp_path / "lib" / "gem" / "version.rb").write_text(version_rb("Gem", "1.0.0"))
        (tmp_path / "lib" / "gem" / "deep").mkdir()
        (tmp_path / "lib" / "gem" / "deep" / "version.rb").write_text(version_rb("X", "9.9.9"))
        assert find_version_file(tmp_path) == tmp_path / "lib" / "gem" / "version.rb"

    def test_recursive_fallback(self, tmp_path):
        nested = tmp_path / "lib" / "org" / "gem"
        nested.mkdir(parents=True)
        (nested / "version.rb").write_text(version_rb("Gem", "0.1.0"))
        assert find_version_file(tmp_path) == nested / "version.rb"

    def test_absent(self, tmp_path):
        assert find_version_file(tmp_path) is None

    def test_custom_globs(self, tmp_path):
        (tmp_path / "pkg").mkdir()
        (tmp_path / "pkg" / "_version.py").write_text('VERSION = "3.1.4"\n')
        found = find_version_file(tmp_path, ["pkg/_version.py"])
        assert extract_version(found) == SemVer(3, 1, 4)

    def test_single_quotes(self, tmp_path):
        f = tmp_path / "version.rb"
        f.write_text(version_rb("Gem", "2.3.4", quote="'"))
        assert extract_version(f) == SemVer(2, 3, 4)

    def test_mismatched_quotes_not_matched(self, tmp_path):
        f = tmp_path / "version.rb"
        f.write_text("VERSION = \"1.2.3'\n")
        assert read_version_string(f) is None

    def test_no_assignment(self, tmp_path):
        f = tmp_path / "version.rb"
        f.write_text("module Gem\nend\n")
        assert extract_version(f) is None

    def test_lowercase_identifier_not_matched(self, tmp_path):
        f = tmp_path / "version.rb"
        f.write_text('version = "1.2.3"\n')
        assert extract_version(f) is None

    def test_suffixed_identifier_not_matched(self, tmp_path):
        f = tmp_path / "version.rb"
        f.write_text(
            "module Gem\n"
            "  MIN_RUBY_VERSION = \"3.0.0\"\n"
            "  VERSION = \"1.2.0\"\n"
            "end\n"
        )
        assert extract_version(f) == SemVer(1, 2, 0)

        assert write_version(f, "9.9.9")
        content = f.read_text()
        assert 'MIN_RUBY_VERSION = "3.0.0"' in content
        assert '  VERSION = "9.9.9"' in content

    def test_qualified_assignment_not_matched(self, tmp_path):
        f = tmp_path / "version.rb"
        f.write_text('Gem::REQUIRED_VERSION = "2.0.0"\n')
        assert extract_version(f) is None

    def test_invalid_utf8_has_no_version(self, tmp_path):
        f = tmp_path / "version.rb"
        f.write_bytes(b'# \xff\xfe\n  VERSION = "1.3.1"\n')
        assert read_version_string(f) is None
        assert extract_version(f) is None
        assert not write_version(f, SemVer(2, 0, 0))
        assert f.read_bytes() == b'# \xff\xfe\n  VERSION = "1.3.1"\n'

    def test_non_numeric_rejected(self, tmp_path):
        f = tmp_path / "version.rb"
        f.write_text(version_rb("Gem", "1.2.beta"))
        assert read_version_string(f) == "1.2.beta"
        assert extract_version(f) is None

    def test_write_replaces_only_first_value(self, tmp_path):
        f = tmp_path / "version.rb"
        original = (
            "# keep me\r\n"
            "module Gem\r\n"
            "  VERSION = '1.0.0'\r\n"
            "  OTHER_VERSION = \"1.0.0\"\r\n"
            "end\r\n"
        )
        f.write_bytes(original.encode())

        assert write_version(f, SemVer(1, 4, 2))
        assert f.read_bytes().decode() == original.replace("'1.0.0'", "'1.4.2'", 1)

    def test_write_without_assignment(self, tmp_path):
        f = tmp_path / "version.rb"
        f.write_text("nothing here\n")
        assert not write_version(f, SemVer(1, 0, 0))
        assert f.read_text() == "nothing here\n"


def _log_subjects(repo):
    return git(["log", "--format=%s"], repo).stdout.splitlines()


class TestSyncVersion:
    def test_scenario_two_children(self, parent_root):
        report, plan = run_sync_version(parent_root, Settings())

        assert plan.target == SemVer(1, 3, 1)
        assert report.ok
        assert report.aggregator.bucket("synced") == ["a"]
        assert report.aggregator.bucket("skipped") == ["b"]

        a_file = parent_root / "sub" / "a" / "lib" / "a" / "version.rb"
        assert extract_version(a_file) == SemVer(1, 3, 1)
        assert _log_subjects(parent_root / "sub" / "a")[0] == "Sync version to 1.3.1"
        assert _log_subjects(parent_root / "sub" / "b") == ["init"]

    def test_second_run_syncs_nothing(self, parent_root):
        run_sync_version(parent_root, Settings())
        report, plan = run_sync_version(parent_root, Settings())

        assert plan.target == SemVer(1, 3, 1)
        assert report.aggregator.bucket("synced") == []
        assert report.aggregator.bucket("skipped") == ["a", "b"]

    def test_dry_run_changes_nothing(self, parent_root):
        a_file = parent_root / "sub" / "a" / "lib" / "a" / "version.rb"
        before = a_file.read_bytes()

        report, _ = run_sync_version(parent_root, Settings(), dry_run=True)

        assert report.dry_run
        assert report.aggregator.bucket("synced") == ["a"]
        assert a_file.read_bytes() == before
        assert _log_subjects(parent_root / "sub" / "a") == ["init"]

    def test_bucket_sum_matches_children(self, parent_root):
        (parent_root / ".gitmodules").write_text(gitmodules([
            ("a", "sub/a"), ("b", "sub/b"), ("plain", "sub/plain"), ("noversion", "sub/nov"),
        ]))
        init_repo(parent_root / "sub" / "plain", {"lib/p/version.rb": version_rb("P", "5.0.0")})
        init_repo(parent_root / "sub" / "nov", {".submoduler.ini": CHILD_INI})

        report, plan = run_sync_version(parent_root, Settings())

        # plain has no .submoduler.ini, so its 5.0.0 is not a candidate
        assert plan.target == SemVer(1, 3, 1)
        counts = report.aggregator.counts()
        assert sum(counts.values()) == 4 == report.aggregator.total
        assert report.aggregator.bucket("skipped") == ["b", "plain", "noversion"]

    def test_tie_keeps_first_child(self, tmp_path):
        root = tmp_path / "p"
        init_repo(root, {".gitmodules": gitmodules([("x", "x"), ("y", "y")])})
        init_repo(root / "x", {".submoduler.ini": CHILD_INI, "lib/x/version.rb": version_rb("X", "2.0.0")})
        init_repo(root / "y", {".submoduler.ini": CHILD_INI, "lib/y/version.rb": version_rb("Y", "2.0.0")})

        report, plan = run_sync_version(root, Settings())
        assert plan.target == SemVer(2, 0, 0)
        assert report.aggregator.bucket("synced") == []

    def test_no_submodules(self, tmp_path):
        init_repo(tmp_path / "p")
        report, plan = run_sync_version(tmp_path / "p", Settings())
        assert report.ok
        assert plan.target is None
        assert report.aggregator.total == 0

    def test_no_versions_found_fails(self, tmp_path):
        root = tmp_path / "p"
        init_repo(root, {".gitmodules": gitmodules([("x", "x")])})
        init_repo(root / "x", {".submoduler.ini": CHILD_INI})

        report, plan = run_sync_version(root, Settings())
        assert not report.ok
        assert plan.target is None
        assert report.aggregator.bucket("skipped") == ["x"]
        assert "No versions found in submodules." in report.notes

    def test_commit_failure_is_recorded(self, parent_root, monkeypatch):
        from submoduler_parent.git.runner import CommandResult
        from submoduler_parent.version import sync

        monkeypatch.setattr(
            sync, "commit_version",
            lambda *a, **kw: CommandResult(ok=False, output="fatal: nope\n", returncode=128),
        )
        report, _ = run_sync_version(parent_root, Settings())
        assert not report.ok
        assert report.aggregator.bucket("failed") == ["a"]
        assert report.aggregator.bucket("skipped") == ["b"]

    def test_skip_reasons_come_from_collection(self, parent_root):
        (parent_root / ".gitmodules").write_text(gitmodules([
            ("a", "sub/a"), ("plain", "sub/plain"), ("noversion", "sub/nov"),
        ]))
        init_repo(parent_root / "sub" / "plain", {"README.md": "x\n"})
        init_repo(parent_root / "sub" / "nov", {".submoduler.ini": CHILD_INI})

        report, _ = run_sync_version(parent_root, Settings())

        reasons = {repo.name: outcome.reason for repo, outcome in report.entries}
        assert reasons["plain"] == "no .submoduler.ini"
        assert reasons["noversion"] == "no version file found"

    def test_unreadable_version_file_is_skipped(self, parent_root):
        b_file = parent_root / "sub" / "b" / "lib" / "b" / "version.rb"
        b_file.write_bytes(b'# \xff\xfe\n  VERSION = "1.3.1"\n')

        report, plan = run_sync_version(parent_root, Settings())

        assert report.ok
        assert plan.target == SemVer(1, 2, 0)
        assert report.aggregator.bucket("skipped") == ["a", "b"]
        assert report.aggregator.bucket("failed") == []

    def test_commit_leaves_other_staged_changes_alone(self, parent_root):
        a = parent_root / "sub" / "a"
        (a / "unrelated.txt").write_text("staged elsewhere\n")
        git(["add", "unrelated.txt"], a)

        report, _ = run_sync_version(parent_root, Settings())

        assert report.aggregator.bucket("synced") == ["a"]
        committed = git(["show", "--name-only", "--format=", "HEAD"], a).stdout.split()
        assert committed == ["lib/a/version.rb"]
        staged = git(["diff", "--cached", "--name-only"], a).stdout.split()
        assert staged == ["unrelated.txt"]

    def test_version_file_symlinked_outside_repo(self, parent_root, tmp_path):
        outside = tmp_path / "shared_version.rb"
        outside.write_text(version_rb("A", "1.0.0"))
        a_file = parent_root / "sub" / "a" / "lib" / "a" / "version.rb"
        a_file.unlink()
        a_file.symlink_to(outside)

        report, plan = run_sync_version(parent_root, Settings())

        assert plan.target == SemVer(1, 3, 1)
        assert report.aggregator.total == 2
        assert report.aggregator.outcome_for(plan.collection[0][0]) is not None
