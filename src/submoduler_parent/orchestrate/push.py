"""Push children, then vendor repos, then the parent.

Child and vendor failures are recorded and traversal continues. A failed
parent push fails the whole command: nothing was actually published.
"""

from __future__ import annotations

from pathlib import Path

from submoduler_parent.config import Settings
from submoduler_parent.git import ops
from submoduler_parent.orchestrate.outcomes import PUSH_BUCKETS, Aggregator, Outcome, RunReport
from submoduler_parent.repos.locator import Repository, discover


def push_repository(repo: Repository, settings: Settings, dry_run: bool = False) -> Outcome:
    """Push one repository if it has commits ahead of its upstream."""
    if not repo.path.is_dir():
        return Outcome.failed(f"directory does not exist: {repo.path}")

    ahead = ops.ahead_count(repo.path, settings.command_timeout)
    if ahead == 0:
        return Outcome.satisfied("no commits to push")

    if dry_run:
        return Outcome.succeeded(f"would push {ahead} commit(s) to origin", dry_run=True)

    result = ops.push(repo.path, settings.command_timeout)
    if not result.ok:
        return Outcome.failed("push failed", result.lines)
    return Outcome.succeeded(f"pushed {ahead} commit(s)")


def run_push(
    root: Path | str,
    settings: Settings | None = None,
    dry_run: bool = False,
) -> RunReport:
    settings = settings or Settings()
    agg = Aggregator(PUSH_BUCKETS)
    report = RunReport(command="push", aggregator=agg, dry_run=dry_run)

    for repo in discover(root, settings):
        outcome = agg.record(repo, push_repository(repo, settings, dry_run))
        if repo.is_parent and outcome.is_failure:
            report.ok = False
            report.notes.append("Failed to push parent repository")

    return report
