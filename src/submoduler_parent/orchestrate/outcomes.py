"""Per-repository outcomes and the aggregator that buckets them.

Each command maps the four outcome kinds onto its own bucket names
(created/existed/failed, synced/skipped/failed, ...). The aggregator keeps
insertion order everywhere so summaries list repositories in visit order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from submoduler_parent.repos.locator import Repository


class OutcomeKind(Enum):
    SUCCEEDED = "succeeded"
    ALREADY_SATISFIED = "already_satisfied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class Outcome:
    """Result of one command against one repository."""

    kind: OutcomeKind
    reason: str = ""
    details: list[str] = field(default_factory=list)
    dry_run: bool = False

    @classmethod
    def succeeded(cls, reason: str = "", details: list[str] | None = None, dry_run: bool = False) -> Outcome:
        return cls(OutcomeKind.SUCCEEDED, reason, list(details or []), dry_run)

    @classmethod
    def satisfied(cls, reason: str = "", details: list[str] | None = None) -> Outcome:
        return cls(OutcomeKind.ALREADY_SATISFIED, reason, list(details or []))

    @classmethod
    def skipped(cls, reason: str, details: list[str] | None = None) -> Outcome:
        return cls(OutcomeKind.SKIPPED, reason, list(details or []))

    @classmethod
    def failed(cls, reason: str, details: list[str] | None = None) -> Outcome:
        return cls(OutcomeKind.FAILED, reason, list(details or []))

    @property
    def is_failure(self) -> bool:
        return self.kind is OutcomeKind.FAILED


# Bucket labels per command.
STATUS_BUCKETS = {
    OutcomeKind.SUCCEEDED: "changed",
    OutcomeKind.ALREADY_SATISFIED: "clean",
    OutcomeKind.SKIPPED: "skipped",
    OutcomeKind.FAILED: "failed",
}
PUSH_BUCKETS = {
    OutcomeKind.SUCCEEDED: "pushed",
    OutcomeKind.ALREADY_SATISFIED: "up to date",
    OutcomeKind.SKIPPED: "skipped",
    OutcomeKind.FAILED: "failed",
}
BRANCH_BUCKETS = {
    OutcomeKind.SUCCEEDED: "created",
    OutcomeKind.ALREADY_SATISFIED: "existed",
    OutcomeKind.SKIPPED: "failed",
    OutcomeKind.FAILED: "failed",
}
TEST_BUCKETS = {
    OutcomeKind.SUCCEEDED: "passed",
    OutcomeKind.ALREADY_SATISFIED: "passed",
    OutcomeKind.SKIPPED: "skipped",
    OutcomeKind.FAILED: "failed",
}
SYNC_BUCKETS = {
    OutcomeKind.SUCCEEDED: "synced",
    OutcomeKind.ALREADY_SATISFIED: "skipped",
    OutcomeKind.SKIPPED: "skipped",
    OutcomeKind.FAILED: "failed",
}
UPDATE_BUCKETS = {
    OutcomeKind.SUCCEEDED: "updated",
    OutcomeKind.ALREADY_SATISFIED: "updated",
    OutcomeKind.SKIPPED: "skipped",
    OutcomeKind.FAILED: "failed",
}


@dataclass
class Aggregator:
    """Collects one outcome per visited repository into named buckets."""

    labels: dict[OutcomeKind, str]
    entries: list[tuple[Repository, Outcome]] = field(default_factory=list)

    def record(self, repository: Repository, outcome: Outcome) -> Outcome:
        self.entries.append((repository, outcome))
        return outcome

    @property
    def bucket_names(self) -> list[str]:
        """Distinct bucket labels, in the order the label map declares them."""
        names: list[str] = []
        for label in self.labels.values():
            if label not in names:
                names.append(label)
        return names

    def bucket(self, name: str) -> list[str]:
        """Repository names recorded into *name*, first-recorded first."""
        return [repo.name for repo, outcome in self.entries if self.labels[outcome.kind] == name]

    def counts(self) -> dict[str, int]:
        return {name: len(self.bucket(name)) for name in self.bucket_names}

    def outcome_for(self, repository: Repository) -> Outcome | None:
        for repo, outcome in self.entries:
            if repo.identity == repository.identity:
                return outcome
        return None

    @property
    def failures(self) -> list[tuple[Repository, Outcome]]:
        return [(r, o) for r, o in self.entries if o.is_failure]

    @property
    def total(self) -> int:
        return len(self.entries)

    def summarize(self, noun: str = "repository") -> list[str]:
        """Render non-empty buckets followed by a total line."""
        lines: list[str] = []
        for name in self.bucket_names:
            members = self.bucket(name)
            if not members:
                continue
            lines.append(f"{name.capitalize()} ({len(members)}):")
            lines.extend(f"  - {member}" for member in members)
        plural = noun if self.total == 1 else _plural(noun)
        lines.append(f"Total: {self.total} {plural} processed")
        return lines


def _plural(noun: str) -> str:
    if noun.endswith("y"):
        return noun[:-1] + "ies"
    return noun + "s"


@dataclass
class RunReport:
    """What a command run produced: its outcomes and overall verdict."""

    command: str
    aggregator: Aggregator
    ok: bool = True
    dry_run: bool = False
    notes: list[str] = field(default_factory=list)

    @property
    def entries(self) -> list[tuple[Repository, Outcome]]:
        return self.aggregator.entries
