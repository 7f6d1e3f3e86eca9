"""Git module: subprocess runner and the git operations the engine issues."""

from submoduler_parent.git.runner import CommandResult, run_command, run_git

__all__ = [
    "CommandResult",
    "run_command",
    "run_git",
]
