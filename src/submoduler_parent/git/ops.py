"""The git operations issued by the orchestration engine.

Only exit status and human-readable text are interpreted, except for the
ahead count (parsed as an integer) and branch-list emptiness.
"""

from __future__ import annotations

from pathlib import Path

from submoduler_parent.git.runner import CommandResult, run_git


def short_status(repo: Path, timeout: float | None = None) -> CommandResult:
    return run_git(["status", "--short"], repo, timeout)


def porcelain_status(repo: Path, timeout: float | None = None) -> CommandResult:
    return run_git(["status", "--porcelain"], repo, timeout)


def ahead_count(repo: Path, timeout: float | None = None) -> int:
    """Commits on HEAD not yet on the upstream branch.

    Returns 0 when there is no upstream or the count cannot be read.
    """
    result = run_git(["rev-list", "@{u}..HEAD", "--count"], repo, timeout)
    if not result.ok:
        return 0
    try:
        return int(result.output.strip())
    except ValueError:
        return 0


def push(repo: Path, timeout: float | None = None) -> CommandResult:
    return run_git(["push"], repo, timeout)


def local_branch_exists(repo: Path, branch: str, timeout: float | None = None) -> bool:
    result = run_git(["branch", "--list", branch], repo, timeout)
    return result.ok and bool(result.output.strip())


def remote_branch_exists(
    repo: Path,
    branch: str,
    remote: str = "origin",
    timeout: float | None = None,
) -> bool:
    result = run_git(["branch", "-r", "--list", f"{remote}/{branch}"], repo, timeout)
    return result.ok and bool(result.output.strip())


def create_branch(repo: Path, branch: str, timeout: float | None = None) -> CommandResult:
    """Create *branch* at the current HEAD without switching to it."""
    return run_git(["branch", branch], repo, timeout)


def create_tracking_branch(
    repo: Path,
    branch: str,
    remote: str = "origin",
    timeout: float | None = None,
) -> CommandResult:
    """Create and switch to a local branch following ``<remote>/<branch>``."""
    return run_git(
        ["checkout", "-b", branch, "--track", f"{remote}/{branch}"], repo, timeout,
    )


def checkout(repo: Path, branch: str, timeout: float | None = None) -> CommandResult:
    return run_git(["checkout", branch], repo, timeout)


def add(repo: Path, paths: list[str], timeout: float | None = None) -> CommandResult:
    return run_git(["add", "--"] + paths, repo, timeout)


def add_all(repo: Path, timeout: float | None = None) -> CommandResult:
    return run_git(["add", "."], repo, timeout)


def commit(
    repo: Path,
    message: str,
    timeout: float | None = None,
    paths: list[str] | None = None,
) -> CommandResult:
    """Commit the index, or only *paths* when given."""
    args = ["commit", "-m", message]
    if paths:
        args += ["--"] + paths
    return run_git(args, repo, timeout)


def tag_exists(repo: Path, tag: str, timeout: float | None = None) -> bool:
    result = run_git(["tag", "--list", tag], repo, timeout)
    return result.ok and bool(result.output.strip())


def create_tag(repo: Path, tag: str, message: str, timeout: float | None = None) -> CommandResult:
    return run_git(["tag", "-a", tag, "-m", message], repo, timeout)


def push_tag(
    repo: Path,
    tag: str,
    remote: str = "origin",
    timeout: float | None = None,
) -> CommandResult:
    return run_git(["push", remote, tag], repo, timeout)
