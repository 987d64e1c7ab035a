"""Converge a checkout onto its desired ref.

A run walks a strict chain: prepare the parent directory, clone if the
checkout is missing, then fetch and force-checkout the desired ref when the
state file says it is not applied yet. Any failing step raises and leaves
the state file untouched, so the next run retries from the same point.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from gitconverge.checkout import runner
from gitconverge.checkout.presence import repository_exists
from gitconverge.checkout.spec import CheckoutSpec
from gitconverge.checkout.state import needs_sync, read_stored, resolve_ref, write_stored
from gitconverge.errors import CloneError, PresenceCheckError, SyncError

logger = logging.getLogger(__name__)

# Steps run, in order, to move an existing checkout onto the desired ref.
SYNC_STEPS = (
    ["fetch", "--all"],
    ["fetch", "--tags"],
    ["checkout", "--force", "{ref}", "--"],
    ["submodule", "init"],
    ["submodule", "sync", "--recursive"],
    ["submodule", "update", "--init", "--recursive"],
)


@dataclass
class ReconcileResult:
    name: str
    checkout_path: Path
    actions: list[str] = field(default_factory=list)
    commit: str | None = None
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.actions)


def ensure_parent_directory(spec: CheckoutSpec) -> None:
    """Create the parent directory and any missing ancestors.

    When running as root with a checkout user, every directory created here
    is chowned to that user. Existing directories are left alone.
    """
    parent = spec.parent_directory
    missing = []
    candidate = parent
    while not candidate.exists():
        missing.append(candidate)
        candidate = candidate.parent
    try:
        for directory in reversed(missing):
            directory.mkdir(exist_ok=True)
            if spec.user and os.geteuid() == 0:
                shutil.chown(directory, user=spec.user)
    except (OSError, LookupError) as exc:
        raise PresenceCheckError(f"Cannot prepare {parent}: {exc}") from exc


def clone_checkout(spec: CheckoutSpec, timeout: float | None = None) -> None:
    """Clone the repository with submodules and check out the desired ref.

    Raises:
        CloneError: If either the clone or the checkout fails.
    """
    logger.info("Cloning %s into %s", spec.repository_url, spec.checkout_path)
    result = runner.run_git(
        ["clone", "--recursive", "--", spec.repository_url, spec.checkout_name],
        spec.parent_directory,
        user=spec.user,
        timeout=timeout,
    )
    if not result.ok:
        raise CloneError(f"Clone of {spec.repository_url} failed", result=result)

    result = runner.run_git(["checkout", spec.ref, "--"], spec.checkout_path, user=spec.user, timeout=timeout)
    if not result.ok:
        raise CloneError(f"Checkout of {spec.ref} after clone failed", result=result)


def sync_checkout(spec: CheckoutSpec, timeout: float | None = None) -> str:
    """Force the checkout onto the desired ref and record the resulting commit.

    Returns:
        The commit hash now at HEAD.

    Raises:
        SyncError: If any step fails. The state file is not written.
    """
    logger.info("Syncing %s to %s", spec.checkout_path, spec.ref)
    for step in SYNC_STEPS:
        args = [arg.format(ref=spec.ref) for arg in step]
        result = runner.run_git(args, spec.checkout_path, user=spec.user, timeout=timeout)
        if not result.ok:
            raise SyncError(f"git {' '.join(args)} failed in {spec.checkout_path}", result=result)

    commit = resolve_ref("HEAD", spec.checkout_path, user=spec.user, timeout=timeout)
    write_stored(spec.state_path, commit)
    return commit


def reconcile(
    spec: CheckoutSpec,
    dry_run: bool = False,
    timeout: float | None = None,
) -> ReconcileResult:
    """Bring ``spec.checkout_path`` to ``spec.ref`` with the fewest actions.

    Args:
        spec: Desired state.
        dry_run: Decide what would run, but do not clone, check out or
            write the state file. Fetching may still happen.
        timeout: Per-command timeout in seconds. None waits forever.

    Returns:
        ReconcileResult listing the actions taken (or planned).
    """
    result = ReconcileResult(
        name=spec.checkout_name,
        checkout_path=spec.checkout_path,
        dry_run=dry_run,
    )
    if not spec.wants_present:
        logger.debug("%s: presence is absent, nothing to do", spec.checkout_path)
        return result

    if spec.manage_parent_directory and not dry_run:
        ensure_parent_directory(spec)

    if not repository_exists(spec.checkout_path):
        result.actions.append("clone")
        if dry_run:
            result.actions.append("sync")
            return result
        if not spec.parent_directory.is_dir():
            raise PresenceCheckError(f"Parent directory {spec.parent_directory} does not exist")
        clone_checkout(spec, timeout=timeout)

    stored = read_stored(spec.state_path)
    if not needs_sync(spec.ref, stored, spec.checkout_path, user=spec.user, timeout=timeout):
        logger.debug("%s: already at %s (%s)", spec.checkout_path, spec.ref, stored)
        result.commit = stored
        return result

    result.actions.append("sync")
    if dry_run:
        return result
    result.commit = sync_checkout(spec, timeout=timeout)
    logger.info("%s: recorded %s", spec.checkout_path, result.commit)
    return result
