"""Locate and rewrite ``VERSION = "x.y.z"`` declarations.

Version files are found by glob under ``<repo>/lib``; the first
``VERSION = "..."`` (or single-quoted) assignment in the file is the
declaration. Only strict MAJOR.MINOR.PATCH integer triples are accepted.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import NamedTuple

from submoduler_parent.git import ops
from submoduler_parent.git.runner import CommandResult

DEFAULT_GLOBS = ["lib/*/version.rb", "lib/**/version.rb"]

# Bare VERSION constant at the start of a line; opening and closing quote must match.
_ASSIGN_RE = re.compile(r"""^([ \t]*VERSION\s*=\s*)(["'])([^"']+)\2""", re.MULTILINE)
_SEMVER_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")

COMMIT_TEMPLATE = "Sync version to {version}"


class SemVer(NamedTuple):
    """A (major, minor, patch) triple; tuple ordering is semver ordering."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(text: str) -> SemVer | None:
    """Parse "1.2.3" into a SemVer. Anything else returns None."""
    match = _SEMVER_RE.match(text.strip())
    if not match:
        return None
    return SemVer(*(int(part) for part in match.groups()))


def find_version_file(
    repo_path: Path | str,
    globs: list[str] | None = None,
) -> Path | None:
    """Return the first version file under *repo_path*, or None.

    Patterns are tried in order; matches within a pattern are sorted.
    """
    root = Path(repo_path)
    for pattern in globs or DEFAULT_GLOBS:
        matches = sorted(p for p in root.glob(pattern) if p.is_file())
        if matches:
            return matches[0]
    return None


def read_version_string(file_path: Path | str) -> str | None:
    """Raw value of the first VERSION assignment, or None if there is none.

    Files that are not valid UTF-8 have no readable assignment.
    """
    try:
        content = Path(file_path).read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return None
    match = _ASSIGN_RE.search(content)
    return match.group(3) if match else None


def extract_version(file_path: Path | str) -> SemVer | None:
    """Parsed version of *file_path*; None when absent or not a strict triple.

    Raises:
        OSError: If the file cannot be read.
    """
    raw = read_version_string(file_path)
    return parse_version(raw) if raw is not None else None


def repo_version(repo_path: Path | str, globs: list[str] | None = None) -> SemVer | None:
    """Version declared by the repository at *repo_path*, if any."""
    version_file = find_version_file(repo_path, globs)
    if version_file is None:
        return None
    return extract_version(version_file)


def write_version(file_path: Path | str, version: SemVer | str) -> bool:
    """Replace the value of the first VERSION assignment with *version*.

    Every other byte of the file is preserved. Returns False when the file
    has no VERSION assignment or is not valid UTF-8.
    """
    path = Path(file_path)
    try:
        content = path.read_bytes().decode("utf-8")
    except UnicodeDecodeError:
        return False
    match = _ASSIGN_RE.search(content)
    if not match:
        return False

    start, end = match.span(3)
    path.write_bytes((content[:start] + str(version) + content[end:]).encode("utf-8"))
    return True


def commit_version(
    repo_path: Path | str,
    file_path: Path | str,
    version: SemVer | str,
    timeout: float | None = None,
) -> CommandResult:
    """Stage and commit only the version file; anything else staged stays staged."""
    repo = Path(repo_path)
    relative = Path(os.path.relpath(file_path, repo)).as_posix()

    staged = ops.add(repo, [relative], timeout)
    if not staged.ok:
        return staged
    return ops.commit(repo, COMMIT_TEMPLATE.format(version=version), timeout, paths=[relative])


def highest(versions: list[SemVer]) -> SemVer | None:
    """Maximum version; the first occurrence wins a tie."""
    if not versions:
        return None
    return max(versions)
