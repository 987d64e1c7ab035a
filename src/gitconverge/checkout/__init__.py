"""Checkout module — clone, track and converge git checkouts."""

from gitconverge.checkout.spec import CheckoutSpec
from gitconverge.checkout.presence import repository_exists
from gitconverge.checkout.state import needs_sync, read_stored, resolve_ref, sync_required, write_stored
from gitconverge.checkout.reconcile import ReconcileResult, reconcile
from gitconverge.checkout.status import checkout_status

__all__ = [
    "CheckoutSpec",
    "repository_exists",
    "needs_sync",
    "read_stored",
    "resolve_ref",
    "sync_required",
    "write_stored",
    "ReconcileResult",
    "reconcile",
    "checkout_status",
]
