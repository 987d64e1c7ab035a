"""Checkout CLI commands."""

import argparse
import logging
from pathlib import Path

from gitconverge.errors import ConfigError, GitConvergeError

logger = logging.getLogger(__name__)


def _report_failure(label: str, exc: GitConvergeError) -> int:
    logger.error("%s: %s", label, exc)
    result = exc.result
    if result is not None:
        logger.error("  command: %s (exit %d)", result.describe(), result.returncode)
        if result.output:
            logger.error("  output:\n%s", result.output)
    return exc.exit_code


def _print_result(result) -> None:
    prefix = "[DRY RUN] " if result.dry_run else ""
    if not result.changed:
        commit = result.commit[:12] if result.commit else "-"
        print(f"  {result.name}: up to date ({commit})")
        return
    actions = " + ".join(result.actions)
    commit = f" -> {result.commit[:12]}" if result.commit else ""
    print(f"  {prefix}{result.name}: {actions}{commit}")


def _load_selected(args: argparse.Namespace):
    from gitconverge.config import load_checkouts

    specs = load_checkouts(args.config)
    if args.only:
        specs = [s for s in specs if s.checkout_name == args.only]
        if not specs:
            raise ConfigError(f"No checkout named {args.only!r} in {args.config}")
    return specs


def cmd_apply(args: argparse.Namespace) -> int:
    from gitconverge.checkout.reconcile import reconcile

    try:
        specs = _load_selected(args)
    except ConfigError as exc:
        return _report_failure("config", exc)

    if not specs:
        print("  No checkouts configured.")
        return 0

    rc = 0
    changed = 0
    for spec in specs:
        try:
            result = reconcile(spec, dry_run=args.dry_run, timeout=args.timeout)
        except GitConvergeError as exc:
            code = _report_failure(str(spec.checkout_path), exc)
            rc = rc or code
            continue
        _print_result(result)
        if result.changed:
            changed += 1

    print(f"\n  {len(specs)} checkout(s), {changed} changed")
    return rc


def cmd_sync(args: argparse.Namespace) -> int:
    from gitconverge.checkout.reconcile import reconcile
    from gitconverge.checkout.spec import CheckoutSpec

    path = Path(args.path).expanduser().absolute()
    try:
        spec = CheckoutSpec(
            parent_directory=path.parent,
            checkout_name=path.name,
            repository_url=args.repository,
            user=args.user,
            ref=args.ref,
            state_file_name=args.state_file,
            manage_parent_directory=args.manage_parent,
            presence="absent" if args.absent else "present",
        )
        result = reconcile(spec, dry_run=args.dry_run, timeout=args.timeout)
    except GitConvergeError as exc:
        return _report_failure(str(path), exc)

    _print_result(result)
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    from gitconverge.checkout.status import checkout_status

    try:
        specs = _load_selected(args)
        reports = [(spec, checkout_status(spec)) for spec in specs]
    except GitConvergeError as exc:
        return _report_failure("status", exc)

    if not reports:
        print("  No checkouts configured.")
        return 0

    print(f"  {'Name':<24} {'Stored':<14} {'Head':<14} {'State':<10} Path")
    print(f"  {'-' * 90}")
    for _, r in reports:
        stored = r["stored"][:12] if r["stored"] else "-"
        head = r["head"][:12] if r["head"] else "-"
        print(f"  {r['name']:<24} {stored:<14} {head:<14} {r['state']:<10} {r['path']}")

    # Absent checkouts are expected to be missing.
    drifted = sum(1 for spec, r in reports if spec.wants_present and r["state"] != "recorded")
    if drifted:
        print(f"\n  {drifted} checkout(s) not at their recorded commit")
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    from gitconverge.checkout.presence import repository_exists
    from gitconverge.checkout.state import resolve_ref

    path = Path(args.path).expanduser()
    try:
        if not repository_exists(path):
            raise ConfigError(f"Not a checkout: {path}")
        commit = resolve_ref(args.ref, path, user=args.user)
    except GitConvergeError as exc:
        return _report_failure(args.ref, exc)

    print(commit)
    return 0
