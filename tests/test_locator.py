"""Tests for repository discovery."""

from pathlib import Path

from conftest import gitmodules, init_repo

from submoduler_parent.config import Settings
from submoduler_parent.repos.locator import (
    RepoKind,
    discover,
    find_children,
    find_vendor_repos,
    parse_gitmodules,
)


class TestParseGitmodules:
    def test_preserves_file_order(self, tmp_path):
        names = ["zeta", "alpha", "mid", "beta"]
        manifest = tmp_path / ".gitmodules"
        manifest.write_text(gitmodules([(n, f"gems/{n}") for n in names]))

        entries = parse_gitmodules(manifest)
        assert [name for name, _ in entries] == names
        assert entries[0] == ("zeta", "gems/zeta")

    def test_tolerates_unrelated_lines(self, tmp_path):
        manifest = tmp_path / ".gitmodules"
        manifest.write_text(
            "# comment\n"
            '[submodule "a"]\n'
            "\turl = git@example.com:a.git\n"
            "\tbranch = main\n"
            "\tpath = sub/a\n"
            "\n"
            "[core]\n"
            '[submodule "b"]\n'
            "\tpath = sub/b   \n"
        )
        assert parse_gitmodules(manifest) == [("a", "sub/a"), ("b", "sub/b")]

    def test_section_without_path_is_dropped(self, tmp_path):
        manifest = tmp_path / ".gitmodules"
        manifest.write_text(
            '[submodule "nopath"]\n'
            "\turl = git@example.com:x.git\n"
            '[submodule "ok"]\n'
            "\tpath = ok\n"
        )
        assert parse_gitmodules(manifest) == [("ok", "ok")]

    def test_missing_file_is_empty(self, tmp_path):
        assert parse_gitmodules(tmp_path / ".gitmodules") == []

    def test_unreadable_file_is_empty(self, tmp_path):
        manifest = tmp_path / ".gitmodules"
        manifest.mkdir()
        assert parse_gitmodules(manifest) == []


class TestDiscovery:
    def test_children_resolved_against_root(self, parent_root):
        children = find_children(parent_root)
        assert [c.name for c in children] == ["a", "b"]
        assert children[0].path == parent_root / "sub" / "a"
        assert all(c.kind is RepoKind.CHILD for c in children)

    def test_vendor_repos_sorted_and_require_git(self, tmp_path):
        vendor = tmp_path / "vendor"
        init_repo(vendor / "zed")
        init_repo(vendor / "alpha")
        (vendor / "plain-dir").mkdir()
        (vendor / "file.txt").write_text("x")

        repos = find_vendor_repos(tmp_path)
        assert [r.name for r in repos] == ["alpha", "zed"]
        assert all(r.kind is RepoKind.VENDOR for r in repos)

    def test_custom_vendor_dir(self, tmp_path):
        init_repo(tmp_path / "third_party" / "lib1")
        assert [r.name for r in find_vendor_repos(tmp_path, "third_party")] == ["lib1"]

    def test_missing_vendor_dir_is_empty(self, tmp_path):
        assert find_vendor_repos(tmp_path) == []

    def test_order_children_vendors_parent(self, parent_root):
        init_repo(parent_root / "vendor" / "tool")
        repos = discover(parent_root, Settings())
        assert [(r.kind, r.name) for r in repos] == [
            (RepoKind.CHILD, "a"),
            (RepoKind.CHILD, "b"),
            (RepoKind.VENDOR, "tool"),
            (RepoKind.PARENT, "parent"),
        ]

    def test_parent_only_when_nothing_declared(self, tmp_path):
        repos = discover(tmp_path)
        assert len(repos) == 1
        assert repos[0].is_parent
        assert repos[0].path == Path(tmp_path)

    def test_identity_is_kind_and_path(self, parent_root):
        a1 = find_children(parent_root)[0]
        a2 = find_children(parent_root)[0]
        assert a1.identity == a2.identity == (RepoKind.CHILD, parent_root / "sub" / "a")
