"""Central version identifier for Target Watch Overlay."""
from __future__ import annotations

import os
from typing import Optional

__all__ = ["__version__", "is_dev_build", "version_label", "DEV_MODE_ENV_VAR"]

__version__ = "0.3.0-dev"
DEV_MODE_ENV_VAR = "TARGET_OVERLAY_DEV_MODE"


def _coerce_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    token = value.strip().lower()
    if token in {"1", "true", "yes", "on"}:
        return True
    if token in {"0", "false", "no", "off"}:
        return False
    return None


def is_dev_build(version: Optional[str] = None) -> bool:
    """Return True when the current build should enable developer-only behaviour."""

    env_override = _coerce_bool(os.getenv(DEV_MODE_ENV_VAR))
    if env_override is not None:
        return env_override

    identifier = (version or __version__ or "").strip().lower()
    if not identifier:
        return False

    if identifier.endswith("-dev"):
        return True
    if ".dev" in identifier:
        return True
    return any(part == "dev" for part in identifier.replace(".", "-").split("-"))


def version_label(version: Optional[str] = None) -> str:
    """Return the version prefixed with ``v`` for window titles and status text."""

    identifier = (version or __version__ or "").strip()
    if not identifier:
        return "unknown"
    return identifier if identifier.lower().startswith("v") else f"v{identifier}"
