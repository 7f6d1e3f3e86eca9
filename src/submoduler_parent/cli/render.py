"""Console rendering of run reports."""

from __future__ import annotations

from submoduler_parent.orchestrate.outcomes import Outcome, OutcomeKind, RunReport
from submoduler_parent.repos.locator import RepoKind

MARKS = {
    OutcomeKind.SUCCEEDED: "✓",
    OutcomeKind.ALREADY_SATISFIED: "ℹ",
    OutcomeKind.SKIPPED: "⊘",
    OutcomeKind.FAILED: "✗",
}

SECTION_TITLES = {
    RepoKind.CHILD: "Child Submodules:",
    RepoKind.VENDOR: "Vendor Repositories:",
    RepoKind.PARENT: "Parent Repository:",
}


def format_outcome(outcome: Outcome, indent: str = "    ") -> list[str]:
    prefix = "[DRY RUN] " if outcome.dry_run else ""
    lines = [f"{indent}{MARKS[outcome.kind]} {prefix}{outcome.reason}"]
    lines.extend(f"{indent}  {detail}" for detail in outcome.details)
    return lines


def print_entries(report: RunReport) -> None:
    """Print outcomes grouped by repository kind, in visit order."""
    current_kind = None
    for repo, outcome in report.entries:
        if repo.kind is not current_kind:
            if current_kind is not None:
                print()
            print(SECTION_TITLES[repo.kind])
            current_kind = repo.kind
        print(f"  {repo.name}:")
        for line in format_outcome(outcome):
            print(line)

    for note in report.notes:
        print(f"\n{note}")


def print_summary(report: RunReport, noun: str = "repository") -> None:
    print()
    print("=" * 60)
    print(f"{report.command.replace('_', ' ').title()} Summary")
    print("=" * 60)
    if report.dry_run:
        print("DRY RUN - No changes were made")
    for line in report.aggregator.summarize(noun):
        print(line)


def print_report(report: RunReport, noun: str = "repository") -> None:
    print_entries(report)
    print_summary(report, noun)
