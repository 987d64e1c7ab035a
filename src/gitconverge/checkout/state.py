"""Commit state tracking.

The state file records the commit hash of the last ref that was applied
successfully. Comparing it against the desired ref lets a run skip the
checkout entirely when nothing moved. A missing state file means "unknown",
never "at some ref".
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from gitconverge.checkout import runner
from gitconverge.errors import RefResolutionError, StateIOError, SyncError

logger = logging.getLogger(__name__)


def resolve_ref(
    ref: str,
    checkout_path: Path | str,
    user: str | None = None,
    timeout: float | None = None,
) -> str:
    """Resolve ``ref`` to the commit it currently points to.

    Raises:
        RefResolutionError: If git cannot resolve the ref. The message is
            git's own output.
    """
    if ref.startswith("-"):
        raise RefResolutionError(f"Refusing option-like ref {ref!r}")
    result = runner.run_git(["rev-parse", "--verify", f"{ref}^0"], checkout_path, user=user, timeout=timeout)
    lines = result.stdout.strip().splitlines()
    if not result.ok or not lines:
        raise RefResolutionError(
            result.output or f"Cannot resolve {ref} in {checkout_path}",
            result=result,
        )
    return lines[0].strip()


def read_stored(state_path: Path | str) -> str | None:
    """Return the recorded commit hash, or None when unknown.

    An unreadable state file is treated like a missing one so the next
    sync rewrites it.
    """
    path = Path(state_path)
    try:
        content = path.read_text()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring unreadable state file %s: %s", path, exc)
        return None

    lines = content.strip().splitlines()
    return lines[0].strip() if lines else None


def write_stored(state_path: Path | str, commit: str) -> None:
    """Atomically replace the state file with ``commit``.

    Raises:
        StateIOError: If the file cannot be written.
    """
    path = Path(state_path)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=str(path.parent),
            prefix=path.name + ".",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(commit + "\n")
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(temp_path, 0o644)
        os.replace(temp_path, path)
        temp_path = None
    except OSError as exc:
        raise StateIOError(f"Cannot record commit in {path}: {exc}") from exc
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)


def sync_required(
    desired_ref: str,
    stored_hash: str | None,
    resolved_hash: str | None = None,
) -> bool:
    """Decide whether a checkout must be synced.

    Only an exact match of ``desired_ref`` against the stored hash counts as
    pinned; abbreviated hashes must be compared via ``resolved_hash``.
    """
    if stored_hash is None:
        return True
    if desired_ref == stored_hash:
        return False
    return resolved_hash != stored_hash


def needs_sync(
    desired_ref: str,
    stored_hash: str | None,
    checkout_path: Path | str,
    user: str | None = None,
    timeout: float | None = None,
) -> bool:
    """Decide whether ``checkout_path`` must be moved to ``desired_ref``.

    Fetches all remotes before resolving a symbolic ref, so a remote-tracking
    ref such as ``origin/main`` that advanced upstream is never mistaken for
    converged. A local branch name (``main``) is not moved by the fetch and
    keeps resolving to the commit it already had.

    Raises:
        SyncError: If the fetch fails.
        RefResolutionError: If the desired ref cannot be resolved.
    """
    if stored_hash is None or desired_ref == stored_hash:
        return sync_required(desired_ref, stored_hash)

    result = runner.run_git(["fetch", "--all"], checkout_path, user=user, timeout=timeout)
    if not result.ok:
        raise SyncError(f"Fetch failed in {checkout_path}", result=result)

    resolved = resolve_ref(desired_ref, checkout_path, user=user, timeout=timeout)
    return sync_required(desired_ref, stored_hash, resolved)
