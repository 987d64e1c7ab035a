"""Load checkout definitions from a YAML file."""

from __future__ import annotations

from pathlib import Path

import yaml

from gitconverge.checkout.spec import CheckoutSpec
from gitconverge.errors import ConfigError
from gitconverge.paths import config_path

# YAML key → CheckoutSpec field
FIELD_MAP = {
    "name": "checkout_name",
    "parent": "parent_directory",
    "repository": "repository_url",
    "user": "user",
    "ref": "ref",
    "state_file": "state_file_name",
    "manage_parent": "manage_parent_directory",
    "ensure": "presence",
}
REQUIRED_KEYS = ("name", "parent", "repository")


def spec_from_mapping(data: dict, defaults: dict | None = None) -> CheckoutSpec:
    """Build a CheckoutSpec from a config entry, applying ``defaults`` first.

    Raises:
        ConfigError: On unknown or missing keys, or invalid values.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Checkout entry must be a mapping, got {type(data).__name__}")

    merged = dict(defaults or {})
    merged.update(data)

    unknown = sorted(set(merged) - set(FIELD_MAP))
    if unknown:
        raise ConfigError(f"Unknown checkout key(s): {', '.join(unknown)}")
    missing = [k for k in REQUIRED_KEYS if not merged.get(k)]
    if missing:
        label = merged.get("name", "<unnamed>")
        raise ConfigError(f"{label}: missing required key(s): {', '.join(missing)}")

    kwargs = {FIELD_MAP[k]: v for k, v in merged.items()}
    if "manage_parent_directory" in kwargs and not isinstance(kwargs["manage_parent_directory"], bool):
        raise ConfigError(f"{merged['name']}: manage_parent must be true or false")
    for key in ("checkout_name", "repository_url", "ref", "state_file_name", "user"):
        if kwargs.get(key) is not None:
            kwargs[key] = str(kwargs[key])
    kwargs["parent_directory"] = Path(str(kwargs["parent_directory"])).expanduser()
    return CheckoutSpec(**kwargs)


def load_checkouts(path: Path | str | None = None) -> list[CheckoutSpec]:
    """Read every checkout defined in the config file.

    Args:
        path: Path to the YAML file. Defaults to ``paths.config_path()``.

    Returns:
        CheckoutSpecs in file order.

    Raises:
        ConfigError: If the file is missing, unreadable, malformed, or gives two
            checkouts the same directory or state file.
    """
    cfg_path = Path(path) if path else config_path()
    try:
        with open(cfg_path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {cfg_path}") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {cfg_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {cfg_path}: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, dict):
        raise ConfigError(f"{cfg_path} is not a YAML mapping")

    defaults = data.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise ConfigError(f"{cfg_path}: defaults must be a mapping")
    entries = data.get("checkouts") or []
    if not isinstance(entries, list):
        raise ConfigError(f"{cfg_path}: checkouts must be a list")

    specs: list[CheckoutSpec] = []
    seen: set[Path] = set()
    for entry in entries:
        spec = spec_from_mapping(entry, defaults)
        for claimed in (spec.checkout_path, spec.state_path):
            if claimed in seen:
                raise ConfigError(f"{cfg_path}: {claimed} is used by more than one checkout")
            seen.add(claimed)
        specs.append(spec)
    return specs
