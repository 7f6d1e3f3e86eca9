"""Run each repository's test suite: parent first, then children."""

from __future__ import annotations

from pathlib import Path

from submoduler_parent.config import Settings
from submoduler_parent.git.runner import run_command
from submoduler_parent.orchestrate.outcomes import TEST_BUCKETS, Aggregator, Outcome, RunReport
from submoduler_parent.repos.locator import Repository, find_children, parent_repository

# Runner used for each test directory when settings.test_command is unset.
RUNNERS = {
    "test": ["bundle", "exec", "rake", "test"],
    "spec": ["bundle", "exec", "rspec"],
    "tests": ["python", "-m", "pytest"],
}


def find_test_dir(repo_path: Path, settings: Settings) -> str | None:
    for name in settings.test_dirs:
        if (repo_path / name).is_dir():
            return name
    return None


def resolve_test_command(repo_path: Path, settings: Settings) -> list[str] | None:
    """Command that runs *repo_path*'s tests, or None if it has no test directory.

    An explicit settings.test_command always wins; otherwise the runner is
    chosen by the first test directory present.
    """
    test_dir = find_test_dir(repo_path, settings)
    if test_dir is None:
        return None
    if settings.test_command:
        return settings.test_command
    return RUNNERS.get(test_dir, RUNNERS["tests"])


def run_repository_tests(repo: Repository, settings: Settings) -> Outcome:
    """Run the test command in *repo* if it has a test directory."""
    if not repo.path.is_dir():
        return Outcome.failed(f"directory does not exist: {repo.path}")

    command = resolve_test_command(repo.path, settings)
    if command is None:
        return Outcome.skipped("no test directory found")

    result = run_command(command, repo.path, timeout=settings.command_timeout)
    if result.ok:
        return Outcome.succeeded("all tests passed")
    return Outcome.failed("some tests failed", result.lines[-20:])


def run_tests(
    root: Path | str,
    settings: Settings | None = None,
    parent_only: bool = False,
    children_only: bool = False,
    submodule: str | None = None,
) -> RunReport:
    """Run tests for the parent and/or its children.

    Args:
        parent_only: Only run the parent suite.
        children_only: Only run child suites.
        submodule: Restrict children to the one with this name. An unknown
            name fails the run.
    """
    settings = settings or Settings()
    agg = Aggregator(TEST_BUCKETS)
    report = RunReport(command="test", aggregator=agg)

    if not children_only:
        parent = parent_repository(root)
        agg.record(parent, run_repository_tests(parent, settings))

    unknown_submodule = False
    if not parent_only:
        children = find_children(root)
        if submodule:
            children = [c for c in children if c.name == submodule]
            if not children:
                unknown_submodule = True
                report.notes.append(f"Submodule not found: {submodule}")
        for child in children:
            agg.record(child, run_repository_tests(child, settings))

    report.ok = not agg.failures and not unknown_submodule
    return report
