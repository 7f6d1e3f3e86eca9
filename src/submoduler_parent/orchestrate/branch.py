"""Create a branch in every repository: children, vendor repos, parent last.

Per repository:
    local branch exists   -> existed (checked out if requested)
    remote branch exists  -> created as a tracking branch (which checks it out)
    otherwise             -> created at HEAD (checked out if requested)
"""

from __future__ import annotations

from pathlib import Path

from submoduler_parent.config import Settings
from submoduler_parent.git import ops
from submoduler_parent.orchestrate.outcomes import BRANCH_BUCKETS, Aggregator, Outcome, RunReport
from submoduler_parent.repos.locator import Repository, discover


def _checkout_details(repo: Repository, branch: str, settings: Settings) -> list[str]:
    result = ops.checkout(repo.path, branch, settings.command_timeout)
    if result.ok:
        return [f"checked out '{branch}'"]
    return [f"failed to checkout '{branch}'"] + result.lines


def add_branch_to_repository(
    repo: Repository,
    branch: str,
    settings: Settings,
    checkout: bool = False,
    dry_run: bool = False,
) -> Outcome:
    if not repo.path.is_dir():
        return Outcome.failed(f"directory does not exist: {repo.path}")

    timeout = settings.command_timeout

    if ops.local_branch_exists(repo.path, branch, timeout):
        details: list[str] = []
        if checkout:
            if dry_run:
                details = [f"would checkout '{branch}'"]
            else:
                details = _checkout_details(repo, branch, settings)
        return Outcome.satisfied("branch already exists locally", details)

    if ops.remote_branch_exists(repo.path, branch, timeout=timeout):
        if dry_run:
            return Outcome.succeeded("would create tracking branch", dry_run=True)
        result = ops.create_tracking_branch(repo.path, branch, timeout=timeout)
        if not result.ok:
            return Outcome.failed("failed to create tracking branch", result.lines)
        return Outcome.succeeded(f"created tracking branch for origin/{branch}")

    if dry_run:
        details = [f"would checkout '{branch}'"] if checkout else []
        return Outcome.succeeded(f"would create branch '{branch}'", details, dry_run=True)

    result = ops.create_branch(repo.path, branch, timeout)
    if not result.ok:
        return Outcome.failed("failed to create branch", result.lines)

    details = _checkout_details(repo, branch, settings) if checkout else []
    return Outcome.succeeded(f"created branch '{branch}'", details)


def run_add_branch(
    root: Path | str,
    branch: str,
    settings: Settings | None = None,
    checkout: bool = False,
    dry_run: bool = False,
) -> RunReport:
    """Create *branch* across all repositories.

    Returns:
        RunReport with created/existed/failed buckets; ok iff nothing failed.
    """
    settings = settings or Settings()
    agg = Aggregator(BRANCH_BUCKETS)

    for repo in discover(root, settings):
        agg.record(
            repo,
            add_branch_to_repository(repo, branch, settings, checkout=checkout, dry_run=dry_run),
        )

    report = RunReport(command="add_branch", aggregator=agg, dry_run=dry_run, ok=not agg.failures)
    if checkout and not dry_run and report.ok:
        report.notes.append(f"All repositories are now on branch '{branch}'")
    return report
