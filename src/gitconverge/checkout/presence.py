"""Detect whether a checkout has already been cloned."""

from __future__ import annotations

from pathlib import Path

from gitconverge.errors import PresenceCheckError

METADATA_DIR = ".git"


def repository_exists(checkout_path: Path | str) -> bool:
    """True iff the checkout directory and its ``.git`` entry both exist.

    Says nothing about which ref is checked out.

    Raises:
        PresenceCheckError: If the location cannot be inspected.
    """
    path = Path(checkout_path)
    try:
        if not path.is_dir():
            return False
        (path / METADATA_DIR).lstat()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise PresenceCheckError(f"Cannot inspect {path}: {exc}") from exc
    return True
