"""Read-only status reporting for configured checkouts."""

from __future__ import annotations

from gitconverge.checkout import runner
from gitconverge.checkout.presence import repository_exists
from gitconverge.checkout.spec import CheckoutSpec
from gitconverge.checkout.state import read_stored


def checkout_status(spec: CheckoutSpec, timeout: float | None = None) -> dict:
    """Compare a checkout's HEAD against its recorded commit.

    Never fetches, so a branch that moved upstream is not detected here.

    Returns:
        Dict with: name, path, present, stored, head, state. ``state`` is
        one of absent, untracked, drift, recorded.
    """
    report = {
        "name": spec.checkout_name,
        "path": str(spec.checkout_path),
        "present": False,
        "stored": read_stored(spec.state_path),
        "head": None,
        "state": "absent",
    }
    if not repository_exists(spec.checkout_path):
        return report
    report["present"] = True

    head_result = runner.run_git(["rev-parse", "HEAD"], spec.checkout_path, user=spec.user, timeout=timeout)
    if head_result.ok:
        report["head"] = head_result.stdout.strip() or None

    if report["stored"] is None:
        report["state"] = "untracked"
    elif report["head"] != report["stored"]:
        report["state"] = "drift"
    else:
        report["state"] = "recorded"
    return report
