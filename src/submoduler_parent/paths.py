"""Project path resolution.

Resolves the parent repository root. Uses environment variables when
available, falls back to the current directory.

Environment variables:
    SUBMODULER_ROOT: parent repository root (default: current directory)
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_MARKER = ".submoduler.ini"
SETTINGS_FILE = "submoduler.yaml"
GITMODULES = ".gitmodules"


def project_root(override: Path | str | None = None) -> Path:
    """Return the parent repository root directory."""
    if override:
        return Path(override).expanduser().resolve()
    env = os.environ.get("SUBMODULER_ROOT")
    if env:
        return Path(env).expanduser().resolve()
    return Path.cwd()


def has_config_marker(repo_path: Path | str) -> bool:
    """True if the directory carries its own .submoduler.ini."""
    return (Path(repo_path) / CONFIG_MARKER).is_file()


def is_git_repo(repo_path: Path | str) -> bool:
    """True if the directory holds git metadata (a .git dir, or a .git file for submodules)."""
    return (Path(repo_path) / ".git").exists()
