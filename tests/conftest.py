"""Shared test fixtures for submoduler-parent.

Every test gets an isolated HOME with a git identity, so real git repos can
be created and committed to under tmp_path.
"""

import subprocess
from pathlib import Path

import pytest

PARENT_INI = "[default]\nmaster = true\n"
CHILD_INI = "[default]\nparent = ../..\n"


def git(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(["git"] + args, cwd=cwd, capture_output=True, text=True)


def init_repo(path: Path, files: dict[str, str] | None = None) -> Path:
    """Create a git repo at *path* with one commit containing *files*."""
    path.mkdir(parents=True, exist_ok=True)
    git(["init", "-b", "main"], path)
    for rel, content in (files or {"README.md": "init\n"}).items():
        target = path / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    git(["add", "."], path)
    git(["commit", "-m", "init"], path)
    return path


def init_with_remote(path: Path, remote: Path, files: dict[str, str] | None = None) -> Path:
    """Create a repo at *path* whose main branch tracks a bare repo at *remote*."""
    remote.mkdir(parents=True, exist_ok=True)
    git(["init", "--bare", "-b", "main"], remote)
    init_repo(path, files)
    git(["remote", "add", "origin", str(remote)], path)
    git(["push", "-u", "origin", "HEAD"], path)
    return path


def commit_file(repo: Path, rel: str, content: str, message: str = "change") -> None:
    target = repo / rel
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    git(["add", rel], repo)
    git(["commit", "-m", message], repo)


def version_rb(module: str, version: str, quote: str = '"') -> str:
    return (
        "# frozen_string_literal: true\n\n"
        f"module {module}\n"
        f"  VERSION = {quote}{version}{quote}\n"
        "end\n"
    )


def gitmodules(entries: list[tuple[str, str]]) -> str:
    lines = []
    for name, path in entries:
        lines.append(f'[submodule "{name}"]')
        lines.append(f"\tpath = {path}")
        lines.append(f"\turl = git@example.com:org/{name}.git")
    return "\n".join(lines) + "\n"


@pytest.fixture(autouse=True)
def git_identity(tmp_path, monkeypatch):
    """Point HOME at a temp dir holding a minimal .gitconfig."""
    home = tmp_path / "home"
    home.mkdir()
    (home / ".gitconfig").write_text(
        "[user]\n\tname = test\n\temail = t@t\n"
        "[init]\n\tdefaultBranch = main\n"
        "[commit]\n\tgpgsign = false\n"
        "[tag]\n\tgpgsign = false\n"
    )
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.delenv("SUBMODULER_ROOT", raising=False)
    monkeypatch.delenv("SUBMODULER_COMMAND_TIMEOUT", raising=False)
    return home


@pytest.fixture
def parent_root(tmp_path):
    """A parent repo with .submoduler.ini and two managed children, a and b.

    sub/a declares 1.2.0 and sub/b declares 1.3.1.
    """
    root = tmp_path / "parent"
    init_repo(root, {
        ".submoduler.ini": PARENT_INI,
        ".gitmodules": gitmodules([("a", "sub/a"), ("b", "sub/b")]),
        "lib/parent_gem/version.rb": version_rb("ParentGem", "2.0.0"),
    })
    init_repo(root / "sub" / "a", {
        ".submoduler.ini": CHILD_INI,
        "lib/a/version.rb": version_rb("A", "1.2.0"),
    })
    init_repo(root / "sub" / "b", {
        ".submoduler.ini": CHILD_INI,
        "lib/b/version.rb": version_rb("B", "1.3.1"),
    })
    return root
