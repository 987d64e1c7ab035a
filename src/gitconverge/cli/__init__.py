"""Command-line interface for gitconverge.

Usage:
    gitconverge apply [--only NAME] [--dry-run] [--timeout S]
    gitconverge sync <repository> <path> [--ref REF] [--user U] [--state-file F]
                     [--manage-parent] [--absent] [--dry-run] [--timeout S]
    gitconverge status [--only NAME]
    gitconverge resolve <path> <ref>
"""

import argparse
import sys

from gitconverge.cli.checkout_cmds import (
    cmd_apply,
    cmd_resolve,
    cmd_status,
    cmd_sync,
)
from gitconverge.log import level_for_verbosity, setup_logging
from gitconverge.paths import config_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitconverge",
        description="Converge git checkouts onto a desired ref",
    )
    parser.add_argument(
        "--config", default=str(config_path()),
        help="Path to the checkout definitions YAML",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Increase log output (-v info, -vv debug)",
    )
    sub = parser.add_subparsers(dest="command")

    # apply
    app = sub.add_parser("apply", help="Reconcile every configured checkout")
    app.add_argument("--only", default=None, help="Only the checkout with this name")
    app.add_argument(
        "--dry-run", action="store_true",
        help="Report what would change without cloning or checking out",
    )
    app.add_argument(
        "--timeout", type=float, default=None,
        help="Per-command timeout in seconds",
    )

    # sync
    syn = sub.add_parser("sync", help="Reconcile a single checkout from arguments")
    syn.add_argument("repository", help="Repository URL to clone from")
    syn.add_argument("path", help="Checkout directory")
    syn.add_argument(
        "--ref", default="master",
        help="Tag, commit or remote-tracking branch (origin/x) to check out; "
        "a local branch name is not advanced by fetches",
    )
    syn.add_argument("--user", default=None, help="Run git as this user")
    syn.add_argument(
        "--state-file", default="commit",
        help="State file name, created next to the checkout",
    )
    syn.add_argument(
        "--manage-parent", action="store_true",
        help="Create the parent directory if missing",
    )
    syn.add_argument(
        "--absent", action="store_true",
        help="Desired presence is absent (no action is taken)",
    )
    syn.add_argument("--dry-run", action="store_true", help="Preview without changing the checkout")
    syn.add_argument("--timeout", type=float, default=None, help="Per-command timeout in seconds")

    # status
    st = sub.add_parser("status", help="Compare checkouts against their recorded commit")
    st.add_argument("--only", default=None, help="Only the checkout with this name")

    # resolve
    res = sub.add_parser("resolve", help="Resolve a ref to a commit in an existing checkout")
    res.add_argument("path", help="Checkout directory")
    res.add_argument("ref", help="Ref to resolve")
    res.add_argument("--user", default=None, help="Run git as this user")

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(level_for_verbosity(args.verbose))

    dispatch = {
        "apply": cmd_apply,
        "sync": cmd_sync,
        "status": cmd_status,
        "resolve": cmd_resolve,
    }
    return dispatch[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
