"""Working-tree status across children, vendor repos and the parent."""

from __future__ import annotations

from pathlib import Path

from submoduler_parent.config import Settings
from submoduler_parent.git import ops
from submoduler_parent.orchestrate.outcomes import STATUS_BUCKETS, Aggregator, Outcome, RunReport
from submoduler_parent.repos.locator import Repository, discover


def check_status(repo: Repository, settings: Settings) -> Outcome:
    """Short status of one repository."""
    if not repo.path.is_dir():
        return Outcome.skipped(f"directory does not exist: {repo.path}")

    result = ops.short_status(repo.path, settings.command_timeout)
    if not result.ok:
        return Outcome.failed("error checking git status", result.lines)

    ahead = ops.ahead_count(repo.path, settings.command_timeout)
    ahead_note = [f"{ahead} commit(s) ahead of upstream"] if ahead else []

    changes = [line.rstrip() for line in result.output.splitlines() if line.strip()]
    if not changes:
        return Outcome.satisfied("working tree is clean", ahead_note)
    return Outcome.succeeded("working tree has changes", changes + ahead_note)


def run_status(root: Path | str, settings: Settings | None = None) -> RunReport:
    """Report working-tree status for every repository.

    Returns:
        RunReport; ok is False only if git itself failed somewhere.
    """
    settings = settings or Settings()
    agg = Aggregator(STATUS_BUCKETS)

    for repo in discover(root, settings):
        agg.record(repo, check_status(repo, settings))

    return RunReport(command="status", aggregator=agg, ok=not agg.failures)
