"""Configuration path resolution.

Uses environment variables when available, falls back to conventional
defaults.

Environment variables:
    GITCONVERGE_CONFIG — checkout definitions (default: /etc/gitconverge/checkouts.yaml)
"""

from __future__ import annotations

import os
from pathlib import Path

_DEFAULT_CONFIG = Path("/etc/gitconverge/checkouts.yaml")


def config_path() -> Path:
    """Return the path to the checkout definitions file."""
    return Path(os.environ.get("GITCONVERGE_CONFIG", str(_DEFAULT_CONFIG)))
