"""Command-line interface for parent repository operations.

Usage:
    submoduler status
    submoduler test [--parent-only | --children-only] [--submodule NAME]
    submoduler push [--dry-run]
    submoduler update [-m MESSAGE] [--only SUBMODULE] [--skip-parent] [--release] [--dry-run]
    submoduler sync_version [--dry-run] [--verbose]
    submoduler add_branch <branch> [--checkout] [--dry-run]
    submoduler symlink_build
    submoduler report
    submoduler release
"""

import argparse
import logging
import sys

from submoduler_parent.cli.repo_cmds import cmd_add_branch, cmd_push, cmd_status, cmd_test
from submoduler_parent.cli.version_cmds import cmd_sync_version, cmd_update
from submoduler_parent.config import SubmodulerError, load_settings, verify_parent_context
from submoduler_parent.paths import project_root

COMMANDS = {
    "status": "Display status of parent and all child submodules",
    "test": "Run tests across parent and all child submodules",
    "push": "Push changes to parent and all child submodules",
    "update": "Update child submodules, then commit and push the parent",
    "sync_version": "Sync VERSION across child submodules to the highest found",
    "add_branch": "Create a branch across all repositories",
    "symlink_build": "Build symlinks from vendor gems to parent .kiro/steering",
    "report": "Generate configuration and status reports",
    "release": "Manage release workflow for parent and children",
}


def cmd_symlink_build(args: argparse.Namespace) -> int:
    from submoduler_parent.steering import PROJECT_STEERING, build_symlinks

    print("=== Building Symlinks (Parent) ===")
    report = build_symlinks(args.root)
    print(f"✓ Ensured {PROJECT_STEERING} exists")
    for source in report.missing_sources:
        print(f"⚠ Source directory not found: {source}")
    print()
    for line in report.summary():
        print(line)
    return 0


def cmd_not_implemented(args: argparse.Namespace) -> int:
    print(f"{args.command.capitalize()} command not yet implemented")
    return 0


def _add_dry_run(p: argparse.ArgumentParser, help_text: str) -> None:
    p.add_argument("-n", "--dry-run", action="store_true", help=help_text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="submoduler",
        description="Submoduler Parent - Manage parent repository operations",
    )
    parser.add_argument(
        "--root", default=None,
        help="Parent repository root (default: $SUBMODULER_ROOT or cwd)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Show detailed output",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help=COMMANDS["status"])

    test = sub.add_parser("test", help=COMMANDS["test"])
    test.add_argument("--parent-only", action="store_true", help="Run only parent tests")
    test.add_argument("--children-only", action="store_true", help="Run only child tests")
    test.add_argument(
        "--submodule", default=None, metavar="NAME",
        help="Run tests for specific submodule",
    )

    push = sub.add_parser("push", help=COMMANDS["push"])
    _add_dry_run(push, "Show what would be pushed without actually pushing")

    upd = sub.add_parser("update", help=COMMANDS["update"])
    upd.add_argument(
        "-m", "--message", default=None,
        help="Commit message (generated from versions if omitted)",
    )
    upd.add_argument(
        "--release", action=argparse.BooleanOptionalAction, default=False,
        help="Tag and push a release for each updated submodule",
    )
    upd.add_argument(
        "--only", default=None, metavar="SUBMODULE",
        help="Only update specified submodule (name or path)",
    )
    upd.add_argument(
        "--skip-parent", action="store_true",
        help="Skip updating the parent repository",
    )
    _add_dry_run(upd, "Show what would be done without committing or pushing")

    sync = sub.add_parser("sync_version", help=COMMANDS["sync_version"])
    _add_dry_run(sync, "Show what would be done without making changes")

    branch = sub.add_parser("add_branch", help=COMMANDS["add_branch"])
    branch.add_argument("branch", help="Branch name")
    branch.add_argument(
        "-c", "--checkout", action="store_true",
        help="Checkout the branch after creating it",
    )
    _add_dry_run(branch, "Show what would be done without actually doing it")

    sub.add_parser("symlink_build", help=COMMANDS["symlink_build"])
    sub.add_parser("report", help=COMMANDS["report"])
    sub.add_parser("release", help=COMMANDS["release"])

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    dispatch = {
        "status": cmd_status,
        "test": cmd_test,
        "push": cmd_push,
        "update": cmd_update,
        "sync_version": cmd_sync_version,
        "add_branch": cmd_add_branch,
        "symlink_build": cmd_symlink_build,
        "report": cmd_not_implemented,
        "release": cmd_not_implemented,
    }

    try:
        args.root = project_root(args.root)
        verify_parent_context(args.root)
        args.settings = load_settings(args.root)
        return dispatch[args.command](args)
    except (SubmodulerError, OSError) as e:
        print(f"Error: {e}")
        if args.verbose:
            logging.getLogger(__name__).exception("command %s failed", args.command)
        return 1
    except Exception as e:
        print(f"Error: {type(e).__name__}: {e}")
        logging.getLogger(__name__).debug("command %s crashed", args.command, exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
