"""
YAML → typed policy loader.

Loads policy values from bilbo.yaml (bundled with the package) and
optionally merges user overrides from ~/.bilbo-tracker/bilbo.yaml.

Usage:
    from bilbo_tracker.core.engine.config_loader import load_policy
    policy = load_policy()
    step = policy.progression_increment

If a YAML file cannot be read or parsed, a warning is emitted and the file
is ignored, so lookups fall back to the Python defaults from config.py.
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import DEFAULT_POLICY, BilboPolicy

CONFIG_FILENAME = "bilbo.yaml"

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} if it is unusable."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(
            f"bilbo-tracker: ignoring config file {path} ({exc})",
            stacklevel=2,
        )
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled bilbo.yaml, or None if not found."""
    candidate = Path(str(importlib.resources.files("bilbo_tracker").joinpath(CONFIG_FILENAME)))
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return the user override file if it exists, else None.

    The directory is ``$BILBO_TRACKER_HOME`` when set, ``~/.bilbo-tracker``
    otherwise.
    """
    home = os.environ.get("BILBO_TRACKER_HOME")
    base = Path(home).expanduser() if home else Path.home() / ".bilbo-tracker"
    p = base / CONFIG_FILENAME
    return p if p.exists() else None


def load_model_config(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/bilbo_tracker/bilbo.yaml
    2. User override (``user_path`` or the default user location)

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = user_path if user_path is not None else get_user_yaml_path()
    if user is not None and user.exists():
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            config = _deep_merge(config, user_cfg)

    return config


def policy_from_dict(section: dict[str, Any]) -> BilboPolicy:
    """
    Build a BilboPolicy from a ``policy:`` mapping.

    Unknown keys are ignored.  Missing keys keep their defaults.

    Raises:
        ValueError: If a value has the wrong type or violates a policy bound
    """
    known = {f.name for f in dataclasses.fields(BilboPolicy)}
    kwargs: dict[str, Any] = {}
    for key, value in section.items():
        if key not in known:
            continue
        default = getattr(DEFAULT_POLICY, key)
        # Whole-number fields must not truncate 15.7 to 15
        if isinstance(default, int) and isinstance(value, float) and not value.is_integer():
            raise ValueError(f"policy.{key}: {value!r} is not a whole number")
        try:
            kwargs[key] = type(default)(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"policy.{key}: {value!r} is not a valid {type(default).__name__}") from exc
    return BilboPolicy(**kwargs)


def load_policy(user_path: Path | None = None) -> BilboPolicy:
    """
    Load the effective BilboPolicy.

    Falls back to DEFAULT_POLICY (with a warning) when the merged config
    holds invalid policy values.
    """
    section = load_model_config(user_path).get("policy") or {}
    if not isinstance(section, dict):
        warnings.warn("bilbo-tracker: 'policy' must be a mapping; using defaults.", stacklevel=2)
        return DEFAULT_POLICY
    try:
        return policy_from_dict(section)
    except ValueError as exc:
        warnings.warn(f"bilbo-tracker: invalid policy ({exc}); using defaults.", stacklevel=2)
        return DEFAULT_POLICY
