"""Status, push, add_branch and test CLI commands."""

import argparse

from submoduler_parent.cli.render import print_report


def cmd_status(args: argparse.Namespace) -> int:
    from submoduler_parent.orchestrate.status import run_status

    print("Checking repository status...\n")
    report = run_status(args.root, args.settings)
    print_report(report)
    return 0 if report.ok else 1


def cmd_push(args: argparse.Namespace) -> int:
    from submoduler_parent.orchestrate.push import run_push

    print("Pushing changes to parent and child repositories...\n")
    report = run_push(args.root, args.settings, dry_run=args.dry_run)
    print_report(report)
    if not report.ok:
        return 1
    print("\n✓ Push complete")
    return 0


def cmd_add_branch(args: argparse.Namespace) -> int:
    from submoduler_parent.orchestrate.branch import run_add_branch

    print(f"Creating branch '{args.branch}' across all repositories...\n")
    report = run_add_branch(
        args.root,
        args.branch,
        args.settings,
        checkout=args.checkout,
        dry_run=args.dry_run,
    )
    print_report(report)
    return 0 if report.ok else 1


def cmd_test(args: argparse.Namespace) -> int:
    from submoduler_parent.orchestrate.testing import run_tests

    if args.parent_only and args.children_only:
        print("Error: --parent-only and --children-only are mutually exclusive")
        return 1

    print("Running tests...\n")
    report = run_tests(
        args.root,
        args.settings,
        parent_only=args.parent_only,
        children_only=args.children_only,
        submodule=args.submodule,
    )
    print_report(report)
    return 0 if report.ok else 1
