"""Parent-context verification and run settings.

A parent repository is recognised by a ``.submoduler.ini`` carrying a
``master = ...`` assignment. Tunables (vendor directory, version-file globs,
test command, subprocess timeout) have defaults and may be overridden by an
optional ``submoduler.yaml`` next to it.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from submoduler_parent.paths import CONFIG_MARKER, SETTINGS_FILE

_MASTER_RE = re.compile(r"master\s*=")


class SubmodulerError(Exception):
    """Base class for errors that abort a whole command."""


class ConfigError(SubmodulerError):
    """Raised when the parent context or settings file is unusable."""


@dataclass
class Settings:
    """Per-run tunables, threaded explicitly through every engine call."""

    vendor_dir: str = "vendor"
    version_globs: list[str] = field(
        default_factory=lambda: ["lib/*/version.rb", "lib/**/version.rb"],
    )
    test_dirs: list[str] = field(default_factory=lambda: ["test", "tests", "spec"])
    # None picks a runner from the test directory found; see orchestrate.testing.
    test_command: list[str] | None = None
    command_timeout: float | None = None


def verify_parent_context(root: Path | str) -> None:
    """Ensure *root* is a Submoduler parent directory.

    Raises:
        ConfigError: If .submoduler.ini is missing or lacks a master entry.
    """
    config_file = Path(root) / CONFIG_MARKER
    if not config_file.is_file():
        raise ConfigError(f"Not in a Submoduler directory. Missing {CONFIG_MARKER}")

    content = config_file.read_text()
    if not _MASTER_RE.search(content):
        raise ConfigError(f"Invalid {CONFIG_MARKER}: missing 'master' configuration")


def load_settings(root: Path | str) -> Settings:
    """Load settings for the parent at *root*.

    Reads ``submoduler.yaml`` when present; keys must match Settings fields.
    ``SUBMODULER_COMMAND_TIMEOUT`` overrides the subprocess timeout.

    Raises:
        ConfigError: If the YAML is malformed, not a mapping, or has unknown keys.
    """
    settings = Settings()
    settings_path = Path(root) / SETTINGS_FILE

    if settings_path.is_file():
        try:
            with open(settings_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed {SETTINGS_FILE}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"{SETTINGS_FILE} at {settings_path} is not a YAML mapping")

        known = {f.name for f in fields(Settings)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown keys in {SETTINGS_FILE}: {', '.join(unknown)}")

        for key, value in data.items():
            if key == "test_command" and value is None:
                pass
            elif key in ("version_globs", "test_dirs", "test_command"):
                if isinstance(value, str):
                    value = value.split() if key == "test_command" else [value]
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigError(f"{SETTINGS_FILE}: '{key}' must be a list of strings")
            elif key == "command_timeout":
                if value is not None and not isinstance(value, (int, float)):
                    raise ConfigError(f"{SETTINGS_FILE}: 'command_timeout' must be a number")
            elif not isinstance(value, str):
                raise ConfigError(f"{SETTINGS_FILE}: '{key}' must be a string")
            setattr(settings, key, value)

    env_timeout = os.environ.get("SUBMODULER_COMMAND_TIMEOUT")
    if env_timeout:
        try:
            settings.command_timeout = float(env_timeout)
        except ValueError as e:
            raise ConfigError(
                f"SUBMODULER_COMMAND_TIMEOUT must be a number, got {env_timeout!r}"
            ) from e

    if settings.command_timeout is not None and settings.command_timeout <= 0:
        settings.command_timeout = None

    return settings
