"""Run external commands against one repository's working directory.

Every call takes an explicit ``cwd``; the process-wide working directory is
never changed, so calls against different repositories cannot observe each
other's directory.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Exit status and combined stdout/stderr of one subprocess."""

    ok: bool
    output: str
    returncode: int | None = None
    timed_out: bool = False

    @property
    def lines(self) -> list[str]:
        return [line.strip() for line in self.output.splitlines() if line.strip()]


def run_command(
    args: list[str],
    cwd: Path | str,
    timeout: float | None = None,
) -> CommandResult:
    """Run *args* in *cwd* and capture its combined output.

    A non-zero exit is a normal result. A timeout, or a failure to launch
    the program at all, is reported as a failed result as well.
    """
    logger.debug("%s (cwd=%s)", " ".join(args), cwd)
    try:
        proc = subprocess.run(
            args,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning("%s timed out after %ss (cwd=%s)", args[0], timeout, cwd)
        return CommandResult(
            ok=False,
            output=f"{' '.join(args)}: timed out after {timeout}s",
            timed_out=True,
        )
    except OSError as e:
        logger.warning("could not run %s (cwd=%s): %s", args[0], cwd, e)
        return CommandResult(ok=False, output=f"{args[0]}: {e}")

    if proc.returncode != 0:
        logger.debug("%s exited %d", args[0], proc.returncode)
    return CommandResult(
        ok=proc.returncode == 0,
        output=proc.stdout or "",
        returncode=proc.returncode,
    )


def run_git(
    args: list[str],
    cwd: Path | str,
    timeout: float | None = None,
) -> CommandResult:
    """Run a git command and return the result."""
    return run_command(["git"] + args, cwd, timeout=timeout)
