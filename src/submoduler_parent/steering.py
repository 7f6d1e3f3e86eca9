"""Link steering documents shipped by vendored submoduler gems into .kiro/steering.

Existing symlinks are replaced, existing regular files are left alone.
Links are relative so the tree can be moved or cloned.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

PROJECT_STEERING = Path(".kiro") / "steering"
VENDOR_STEERING_SOURCES = [
    Path("vendor") / "submoduler_parent" / ".kiro" / "steering",
    Path("vendor") / "submoduler_child" / ".kiro" / "steering",
]


@dataclass
class SymlinkReport:
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    broken: list[str] = field(default_factory=list)
    missing_sources: list[str] = field(default_factory=list)
    total: int = 0

    def summary(self) -> list[str]:
        lines = []
        for label, names, mark in (
            ("Created", self.created, "+"),
            ("Updated", self.updated, "~"),
            ("Skipped (already exist)", self.skipped, "-"),
            ("Broken", self.broken, "!"),
        ):
            if names:
                lines.append(f"{label}: {len(names)}")
                lines.extend(f"  {mark} {name}" for name in names)
        lines.append(f"Total symlinks in {PROJECT_STEERING}: {self.total}")
        return lines


def build_symlinks(
    root: Path | str,
    sources: list[Path] | None = None,
    target_dir: Path = PROJECT_STEERING,
) -> SymlinkReport:
    """Link every ``*.md`` under each vendor steering dir into *target_dir*."""
    root_path = Path(root)
    target = root_path / target_dir
    target.mkdir(parents=True, exist_ok=True)
    report = SymlinkReport()

    for source in sources if sources is not None else VENDOR_STEERING_SOURCES:
        source_dir = root_path / source
        if not source_dir.is_dir():
            report.missing_sources.append(str(source))
            continue

        for source_file in sorted(source_dir.glob("*.md")):
            link = target / source_file.name
            relative = os.path.relpath(source_file, target)

            if link.is_symlink():
                link.unlink()
                report.updated.append(source_file.name)
            elif link.exists():
                report.skipped.append(source_file.name)
                continue
            else:
                report.created.append(source_file.name)

            link.symlink_to(relative)

    for link in sorted(target.glob("*.md")):
        if link.is_symlink() and not link.exists():
            report.broken.append(link.name)
    report.total = len(list(target.glob("*.md")))
    return report
