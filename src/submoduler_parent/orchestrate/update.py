"""Update workflow: update every child, then commit and push the parent.

A child is updated by running this same workflow in-process with the child
as the root, so the policy applies at any submodule depth. Per-child
failures accumulate without stopping the remaining children; the command
succeeds only if no child failed and the parent step succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from submoduler_parent.config import ConfigError, Settings, load_settings
from submoduler_parent.git import ops
from submoduler_parent.git.runner import run_command
from submoduler_parent.orchestrate.outcomes import (
    UPDATE_BUCKETS,
    Aggregator,
    Outcome,
    OutcomeKind,
    RunReport,
)
from submoduler_parent.orchestrate.testing import resolve_test_command
from submoduler_parent.paths import has_config_marker, is_git_repo
from submoduler_parent.repos.locator import Repository, find_children
from submoduler_parent.version.inspector import SemVer, highest, repo_version

logger = logging.getLogger(__name__)

MAX_DEPTH = 16


@dataclass
class UpdateOptions:
    message: str | None = None
    only: str | None = None
    skip_parent: bool = False
    release: bool = False
    dry_run: bool = False


@dataclass
class UpdateReport(RunReport):
    parent: Outcome | None = None
    children: dict[str, UpdateReport] = field(default_factory=dict)


def build_commit_message(parent_version: SemVer | None, child_version: SemVer | None) -> str:
    """Default parent commit message; clauses with unknown versions are dropped."""
    parts = []
    if parent_version is not None:
        parts.append(f"Bump parent version to {parent_version}")
    if child_version is not None:
        parts.append(f"Bump child version to {child_version}")
    parts.append("update scripts")
    return ". ".join(parts)


def _select_children(root: Path, only: str | None) -> list[Repository]:
    children = find_children(root)
    if only:
        children = [
            c for c in children
            if c.name == only or c.path == root / only
        ]
    return children


def _release_child(repo: Repository, settings: Settings) -> list[str] | Outcome:
    """Tag the child's current version and push the tag."""
    version = repo_version(repo.path, settings.version_globs)
    if version is None:
        return ["no version to release"]

    tag = f"v{version}"
    timeout = settings.command_timeout
    if ops.tag_exists(repo.path, tag, timeout):
        return [f"tag {tag} already exists"]

    created = ops.create_tag(repo.path, tag, f"Release {version}", timeout)
    if not created.ok:
        return Outcome.failed(f"failed to create tag {tag}", created.lines)
    pushed = ops.push_tag(repo.path, tag, timeout=timeout)
    if not pushed.ok:
        return Outcome.failed(f"failed to push tag {tag}", pushed.lines)
    return [f"released {tag}"]


def update_child(
    repo: Repository,
    options: UpdateOptions,
    depth: int,
) -> tuple[Outcome, UpdateReport | None]:
    if not repo.path.is_dir():
        return Outcome.skipped(f"directory does not exist: {repo.path}"), None
    if not is_git_repo(repo.path):
        return Outcome.skipped(f"not a git repository: {repo.path}"), None
    if not has_config_marker(repo.path):
        return Outcome.skipped("no .submoduler.ini found"), None
    if depth >= MAX_DEPTH:
        return Outcome.failed(f"submodule nesting deeper than {MAX_DEPTH}"), None

    try:
        child_settings = load_settings(repo.path)
    except ConfigError as e:
        return Outcome.failed(str(e)), None

    child_options = UpdateOptions(
        message=options.message,
        release=options.release,
        dry_run=options.dry_run,
    )
    child_report = run_update(repo.path, child_settings, child_options, depth=depth + 1)

    if not child_report.ok:
        failures = [f"{r.name}: {o.reason}" for r, o in child_report.aggregator.failures]
        if child_report.parent is not None and child_report.parent.is_failure:
            failures.append(f"parent step: {child_report.parent.reason}")
        return Outcome.failed(f"failed to update {repo.name}", failures), child_report

    details = []
    if options.release and not options.dry_run:
        released = _release_child(repo, child_settings)
        if isinstance(released, Outcome):
            return released, child_report
        details = released

    return Outcome.succeeded(f"updated {repo.name}", details, dry_run=options.dry_run), child_report


def update_parent(
    root: Path,
    settings: Settings,
    options: UpdateOptions,
    updated_children: list[Repository],
) -> Outcome:
    """Test, stage, commit and push the repository at *root* if it has changes."""
    timeout = settings.command_timeout

    status = ops.porcelain_status(root, timeout)
    if not status.ok:
        return Outcome.failed("error checking git status", status.lines)
    if not status.output.strip():
        return Outcome.satisfied("no changes in repository")

    message = options.message
    if not message:
        child_versions = [
            v for v in (repo_version(c.path, settings.version_globs) for c in updated_children)
            if v is not None
        ]
        message = build_commit_message(
            repo_version(root, settings.version_globs),
            highest(child_versions),
        )

    if options.dry_run:
        return Outcome.succeeded(
            "would commit and push changes", [f"message: {message}"], dry_run=True,
        )

    details: list[str] = []
    test_command = resolve_test_command(root, settings)
    if test_command is not None:
        tests = run_command(test_command, root, timeout=timeout)
        details.append("tests passed" if tests.ok else "tests failed")
    else:
        details.append("no tests found")

    staged = ops.add_all(root, timeout)
    if not staged.ok:
        return Outcome.failed("failed to stage changes", details + staged.lines)

    committed = ops.commit(root, message, timeout)
    if not committed.ok:
        return Outcome.failed("failed to commit changes", details + committed.lines)
    details.append(f"committed: {message}")

    pushed = ops.push(root, timeout)
    if not pushed.ok:
        return Outcome.failed("failed to push changes", details + pushed.lines)
    details.append("pushed")
    return Outcome.succeeded("changes committed and pushed", details)


def run_update(
    root: Path | str,
    settings: Settings | None = None,
    options: UpdateOptions | None = None,
    depth: int = 0,
) -> UpdateReport:
    """Run the update workflow rooted at *root*.

    Args:
        root: Repository whose children (then itself) are updated.
        settings: Settings for *root*; each child loads its own.
        options: Message, --only filter, --skip-parent, --release, dry run.
        depth: Nesting level, 0 for the top-level parent.

    Returns:
        UpdateReport with updated/skipped/failed children and the parent outcome.
    """
    root_path = Path(root)
    settings = settings or Settings()
    options = options or UpdateOptions()
    agg = Aggregator(UPDATE_BUCKETS)
    report = UpdateReport(command="update", aggregator=agg, dry_run=options.dry_run)

    logger.debug("update %s (depth=%d)", root_path, depth)
    children = _select_children(root_path, options.only)
    if not children:
        report.notes.append("No submodules found to update.")

    updated: list[Repository] = []
    for child in children:
        outcome, child_report = update_child(child, options, depth)
        agg.record(child, outcome)
        if child_report is not None:
            report.children[child.name] = child_report
        if outcome.kind is OutcomeKind.SUCCEEDED:
            updated.append(child)

    if options.skip_parent:
        report.notes.append("Skipping parent repository update")
        parent_ok = True
    else:
        report.parent = update_parent(root_path, settings, options, updated)
        parent_ok = not report.parent.is_failure

    report.ok = not agg.failures and parent_ok
    return report
