"""Synchronise the VERSION declaration across child submodules.

Collect each managed child's version, take the highest, then rewrite and
commit every child whose version differs. Children without their own
.submoduler.ini or without a parseable version file are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from submoduler_parent.config import Settings
from submoduler_parent.orchestrate.outcomes import SYNC_BUCKETS, Aggregator, Outcome, RunReport
from submoduler_parent.paths import has_config_marker
from submoduler_parent.repos.locator import Repository, find_children
from submoduler_parent.version.inspector import (
    SemVer,
    commit_version,
    extract_version,
    find_version_file,
    write_version,
)


@dataclass(frozen=True)
class VersionRecord:
    repository_name: str
    path: Path
    version: SemVer
    version_file: Path


@dataclass
class SyncPlan:
    """Target version plus what collection said about each child."""

    target: SemVer | None = None
    records: dict[str, VersionRecord] = field(default_factory=dict)
    collection: list[tuple[Repository, Outcome]] = field(default_factory=list)


def collect_record(repo: Repository, settings: Settings) -> VersionRecord | Outcome:
    """VersionRecord for *repo*, or a skip Outcome explaining why there is none."""
    if not has_config_marker(repo.path):
        return Outcome.skipped("no .submoduler.ini")

    version_file = find_version_file(repo.path, settings.version_globs)
    if version_file is None:
        return Outcome.skipped("no version file found")

    version = extract_version(version_file)
    if version is None:
        return Outcome.skipped(f"no parseable VERSION in {version_file.name}")

    return VersionRecord(repo.name, repo.path, version, version_file)


def build_plan(children: list[Repository], settings: Settings) -> SyncPlan:
    """Collect versions and pick the target.

    The target is the highest version; on a tie the earliest child wins.
    """
    plan = SyncPlan()
    for repo in children:
        found = collect_record(repo, settings)
        if isinstance(found, VersionRecord):
            plan.records[repo.name] = found
            plan.collection.append((repo, Outcome.succeeded(str(found.version))))
        else:
            plan.collection.append((repo, found))

    best: VersionRecord | None = None
    for record in plan.records.values():
        if best is None or record.version > best.version:
            best = record
    plan.target = best.version if best else None
    return plan


def apply_record(
    record: VersionRecord,
    target: SemVer,
    settings: Settings,
    dry_run: bool = False,
) -> Outcome:
    if record.version == target:
        return Outcome.satisfied(f"already at {target}")

    if dry_run:
        return Outcome.succeeded(f"would sync {record.version} -> {target}", dry_run=True)

    if not write_version(record.version_file, target):
        return Outcome.failed(f"no VERSION assignment in {record.version_file}")

    result = commit_version(record.path, record.version_file, target, settings.command_timeout)
    if not result.ok:
        return Outcome.failed("failed to commit version change", result.lines)
    return Outcome.succeeded(f"{record.version} -> {target}")


def run_sync_version(
    root: Path | str,
    settings: Settings | None = None,
    dry_run: bool = False,
) -> tuple[RunReport, SyncPlan]:
    """Bring every managed child to the highest version found among them.

    Returns:
        The run report (synced/skipped/failed) and the plan it executed.
        ok is False if any child failed, or children exist but none
        declared a usable version.
    """
    settings = settings or Settings()
    agg = Aggregator(SYNC_BUCKETS)
    report = RunReport(command="sync_version", aggregator=agg, dry_run=dry_run)

    children = find_children(root)
    if not children:
        report.notes.append("No submodules found.")
        return report, SyncPlan()

    plan = build_plan(children, settings)
    if plan.target is None:
        for repo, outcome in plan.collection:
            agg.record(repo, outcome)
        report.ok = False
        report.notes.append("No versions found in submodules.")
        return report, plan

    for repo, collected in plan.collection:
        record = plan.records.get(repo.name)
        if record is None:
            agg.record(repo, collected)
        else:
            agg.record(repo, apply_record(record, plan.target, settings, dry_run))

    report.ok = not agg.failures
    return report, plan
