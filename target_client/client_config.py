"""Configuration helpers for the Target Watch Overlay client."""
from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

SETTINGS_FILE_NAME = "target_overlay_settings.json"
PORT_FILE_NAME = "port.json"
PORT_FILE_ENV_VAR = "TARGET_OVERLAY_PORT_FILE"
LOG_LEVEL_ENV_VAR = "TARGET_OVERLAY_LOG_LEVEL"
LOG_RETENTION_MIN = 1
LOG_RETENTION_MAX = 20

_LOGGER = logging.getLogger("TargetOverlay.Client")


@dataclass
class InitialClientSettings:
    """Values used to bootstrap the client window."""

    log_dir: Optional[str] = None
    port_file: Optional[str] = None
    log_level: Optional[int] = None
    log_retention: int = 5
    always_on_top: bool = True
    window_width: int = 420
    window_height: int = 520
    window_opacity: float = 0.95


def _coerce_int(value: Any, fallback: int, *, minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
    if isinstance(value, bool):
        return fallback
    try:
        number = int(value)
    except (TypeError, ValueError):
        return fallback
    if minimum is not None:
        number = max(minimum, number)
    if maximum is not None:
        number = min(maximum, number)
    return number


def _coerce_float(value: Any, fallback: float, *, minimum: float, maximum: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return max(minimum, min(maximum, number))


def _coerce_str(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def coerce_log_level(value: Any) -> Optional[int]:
    """Accept numeric levels or level names (``"debug"``, ``"WARNING"``)."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.isdigit():
        return int(text)
    level = getattr(logging, text.upper(), None)
    return level if isinstance(level, int) else None


def load_initial_settings(settings_path: Path) -> InitialClientSettings:
    """Read bootstrap defaults from the settings file if it exists."""

    defaults = InitialClientSettings()
    try:
        raw = json.loads(settings_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return defaults
    except (OSError, json.JSONDecodeError) as exc:
        _LOGGER.warning("Ignoring unreadable settings file %s: %s", settings_path, exc)
        return defaults
    if not isinstance(raw, dict):
        return defaults
    data: Dict[str, Any] = raw

    always_on_top = data.get("always_on_top", defaults.always_on_top)
    return InitialClientSettings(
        log_dir=_coerce_str(data.get("log_dir")),
        port_file=_coerce_str(data.get("port_file")),
        log_level=coerce_log_level(data.get("log_level")),
        log_retention=_coerce_int(
            data.get("log_retention"),
            defaults.log_retention,
            minimum=LOG_RETENTION_MIN,
            maximum=LOG_RETENTION_MAX,
        ),
        always_on_top=always_on_top if isinstance(always_on_top, bool) else defaults.always_on_top,
        window_width=_coerce_int(data.get("window_width"), defaults.window_width, minimum=200),
        window_height=_coerce_int(data.get("window_height"), defaults.window_height, minimum=200),
        window_opacity=_coerce_float(data.get("window_opacity"), defaults.window_opacity, minimum=0.2, maximum=1.0),
    )


def apply_env_overrides(settings: InitialClientSettings) -> InitialClientSettings:
    port_override = _coerce_str(os.getenv(PORT_FILE_ENV_VAR))
    if port_override:
        settings.port_file = port_override
    level_override = coerce_log_level(os.getenv(LOG_LEVEL_ENV_VAR))
    if level_override is not None:
        settings.log_level = level_override
    return settings


def resolve_port_file(settings: InitialClientSettings, root: Path, cli_value: Optional[str] = None) -> Path:
    """CLI flag beats settings/env; otherwise ``port.json`` beside the client."""

    for candidate in (cli_value, settings.port_file):
        if candidate:
            return Path(candidate).expanduser().resolve()
    return (root / PORT_FILE_NAME).resolve()
