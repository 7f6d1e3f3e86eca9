"""Version module: locate, parse, rewrite and synchronise VERSION declarations."""

from submoduler_parent.version.inspector import (
    SemVer,
    extract_version,
    find_version_file,
    parse_version,
    write_version,
)

__all__ = [
    "SemVer",
    "extract_version",
    "find_version_file",
    "parse_version",
    "write_version",
]
