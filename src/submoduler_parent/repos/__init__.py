"""Repository discovery: parent, manifest submodules, and vendor repos."""

from submoduler_parent.repos.locator import (
    RepoKind,
    Repository,
    discover,
    find_children,
    find_vendor_repos,
    parent_repository,
    parse_gitmodules,
)

__all__ = [
    "RepoKind",
    "Repository",
    "discover",
    "find_children",
    "find_vendor_repos",
    "parent_repository",
    "parse_gitmodules",
]
