"""The desired state of a single checkout."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from gitconverge.checkout.presence import METADATA_DIR
from gitconverge.errors import ConfigError

PRESENCE_VALUES = ("present", "absent")
DEFAULT_REF = "master"
DEFAULT_STATE_FILE = "commit"


def _single_component(value: str, field: str) -> None:
    if not value or value in (".", "..") or "/" in value:
        raise ConfigError(f"{field} must be a single path component, got {value!r}")


@dataclass(frozen=True)
class CheckoutSpec:
    """Where a repository should be checked out, and at which ref.

    The state file lives next to the checkout (``parent_directory /
    state_file_name``), never inside it.
    """

    parent_directory: Path
    checkout_name: str
    repository_url: str
    user: str | None = None
    ref: str = DEFAULT_REF
    state_file_name: str = DEFAULT_STATE_FILE
    manage_parent_directory: bool = False
    presence: str = "present"

    def __post_init__(self):
        object.__setattr__(self, "parent_directory", Path(self.parent_directory))
        if self.presence not in PRESENCE_VALUES:
            raise ConfigError(
                f"presence must be one of {', '.join(PRESENCE_VALUES)}, got {self.presence!r}"
            )
        _single_component(self.checkout_name, "checkout_name")
        _single_component(self.state_file_name, "state_file_name")
        if self.state_file_name == self.checkout_name:
            raise ConfigError(
                f"state_file_name {self.state_file_name!r} collides with the checkout directory"
            )
        if not self.repository_url:
            raise ConfigError(f"{self.checkout_name}: repository_url is required")
        if not self.ref:
            raise ConfigError(f"{self.checkout_name}: ref must not be empty")
        # Both are passed to git as positional arguments.
        for field, value in (("ref", self.ref), ("repository_url", self.repository_url)):
            if value.startswith("-"):
                raise ConfigError(f"{self.checkout_name}: {field} must not start with '-', got {value!r}")

    @property
    def checkout_path(self) -> Path:
        return self.parent_directory / self.checkout_name

    @property
    def metadata_path(self) -> Path:
        return self.checkout_path / METADATA_DIR

    @property
    def state_path(self) -> Path:
        return self.parent_directory / self.state_file_name

    @property
    def wants_present(self) -> bool:
        return self.presence == "present"
