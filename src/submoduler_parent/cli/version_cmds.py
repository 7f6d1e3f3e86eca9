"""sync_version and update CLI commands."""

import argparse

from submoduler_parent.cli.render import format_outcome, print_entries, print_report, print_summary


def cmd_sync_version(args: argparse.Namespace) -> int:
    from submoduler_parent.version.sync import run_sync_version

    print("=== Syncing Versions Across Submodules ===\n")
    report, plan = run_sync_version(args.root, args.settings, dry_run=args.dry_run)

    if plan.collection:
        print("Collected versions:")
        for repo, outcome in plan.collection:
            print(f"  {repo.name}:")
            for line in format_outcome(outcome):
                print(line)
        print()

    if plan.target is not None:
        verb = "Would sync" if args.dry_run else "Syncing"
        print(f"Highest version found: {plan.target}")
        print(f"{verb} submodules to {plan.target}\n")

    print_report(report, noun="submodule")
    return 0 if report.ok else 1


def cmd_update(args: argparse.Namespace) -> int:
    from submoduler_parent.orchestrate.update import UpdateOptions, run_update

    print("=== Parent Update Workflow ===\n")
    options = UpdateOptions(
        message=args.message,
        only=args.only,
        skip_parent=args.skip_parent,
        release=args.release,
        dry_run=args.dry_run,
    )
    report = run_update(args.root, args.settings, options)

    print_entries(report)
    if report.parent is not None:
        print("\nParent Repository:")
        for line in format_outcome(report.parent):
            print(line)

    print_summary(report, noun="submodule")
    return 0 if report.ok else 1
