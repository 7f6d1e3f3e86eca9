"""Orchestration engine: sequence per-repository operations and aggregate outcomes."""

from submoduler_parent.orchestrate.branch import run_add_branch
from submoduler_parent.orchestrate.outcomes import Aggregator, Outcome, OutcomeKind, RunReport
from submoduler_parent.orchestrate.push import run_push
from submoduler_parent.orchestrate.status import run_status
from submoduler_parent.orchestrate.testing import run_tests
from submoduler_parent.orchestrate.update import UpdateOptions, run_update

__all__ = [
    "Aggregator",
    "Outcome",
    "OutcomeKind",
    "RunReport",
    "UpdateOptions",
    "run_add_branch",
    "run_push",
    "run_status",
    "run_tests",
    "run_update",
]
