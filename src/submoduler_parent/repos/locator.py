"""Discover the repositories a parent command operates on.

Three sources, each failing soft to an empty list:
  - the parent itself (always present)
  - children declared in .gitmodules, in file order
  - vendor repos: immediate subdirectories of the vendor dir holding .git
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from submoduler_parent.config import Settings
from submoduler_parent.paths import GITMODULES, is_git_repo

_SECTION_RE = re.compile(r'\[submodule "(.+)"\]')
_PATH_RE = re.compile(r"path = (.+)")


class RepoKind(Enum):
    PARENT = "parent"
    CHILD = "child"
    VENDOR = "vendor"


@dataclass(frozen=True)
class Repository:
    """A repository visited by a command. Identity is (kind, path)."""

    name: str
    path: Path
    kind: RepoKind

    @property
    def identity(self) -> tuple[RepoKind, Path]:
        return (self.kind, self.path)

    @property
    def is_parent(self) -> bool:
        return self.kind is RepoKind.PARENT


def parse_gitmodules(manifest: Path | str) -> list[tuple[str, str]]:
    """Parse a .gitmodules file into (name, path) pairs in file order.

    Sections with no ``path =`` line are dropped. A missing or unreadable
    file yields an empty list.
    """
    try:
        lines = Path(manifest).read_text().splitlines()
    except (OSError, UnicodeDecodeError):
        return []

    entries: list[dict[str, str]] = []
    current: dict[str, str] | None = None
    for line in lines:
        section = _SECTION_RE.search(line)
        if section:
            current = {"name": section.group(1)}
            entries.append(current)
            continue
        path_match = _PATH_RE.search(line)
        if path_match and current is not None:
            current["path"] = path_match.group(1).strip()

    return [(e["name"], e["path"]) for e in entries if e.get("path")]


def parent_repository(root: Path | str) -> Repository:
    return Repository(name="parent", path=Path(root), kind=RepoKind.PARENT)


def find_children(root: Path | str) -> list[Repository]:
    """Child submodules declared in <root>/.gitmodules, manifest order."""
    root_path = Path(root)
    return [
        Repository(name=name, path=root_path / rel_path, kind=RepoKind.CHILD)
        for name, rel_path in parse_gitmodules(root_path / GITMODULES)
    ]


def find_vendor_repos(root: Path | str, vendor_dir: str = "vendor") -> list[Repository]:
    """Git repositories directly under the vendor directory, sorted by name."""
    vendor_path = Path(root) / vendor_dir
    if not vendor_path.is_dir():
        return []

    repos = []
    for child in sorted(vendor_path.iterdir()):
        if child.is_dir() and is_git_repo(child):
            repos.append(Repository(name=child.name, path=child, kind=RepoKind.VENDOR))
    return repos


def discover(
    root: Path | str,
    settings: Settings | None = None,
    include_vendors: bool = True,
) -> list[Repository]:
    """Return children, then vendor repos, then the parent.

    This is the traversal order for status, push and add_branch: the parent
    is visited last so it reflects the state of everything beneath it.
    """
    settings = settings or Settings()
    repos = find_children(root)
    if include_vendors:
        repos.extend(find_vendor_repos(root, settings.vendor_dir))
    repos.append(parent_repository(root))
    return repos
