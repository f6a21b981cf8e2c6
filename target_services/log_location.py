"""Locate the newest game log file the watch service tails."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

_LOGGER = logging.getLogger("TargetOverlay.Services")

LOG_DIR_ENV_VAR = "TARGET_OVERLAY_LOG_DIR"
LOG_FILE_PREFIX = "output_log_"
LOG_FILE_SUFFIX = ".txt"
LOG_NOT_FOUND_TEXT = "Log file not found."


def default_log_dir(home: Optional[Path] = None) -> Path:
    base = home if home is not None else Path.home()
    return base / "AppData" / "LocalLow" / "VRChat" / "VRChat"


def resolve_log_dir(configured: Optional[str] = None) -> Path:
    """Return the log directory from the explicit value, the env, or the default."""

    for candidate in (configured, os.getenv(LOG_DIR_ENV_VAR)):
        if candidate and candidate.strip():
            return Path(candidate.strip()).expanduser()
    return default_log_dir()


def find_latest_log_file(log_dir: Path) -> Optional[Path]:
    try:
        entries = list(log_dir.iterdir())
    except OSError as exc:
        _LOGGER.debug("Log directory unreadable (%s): %s", log_dir, exc)
        return None
    latest: Optional[Path] = None
    latest_mtime = float("-inf")
    for entry in entries:
        name = entry.name
        if not (name.startswith(LOG_FILE_PREFIX) and name.endswith(LOG_FILE_SUFFIX)):
            continue
        try:
            if not entry.is_file():
                continue
            mtime = entry.stat().st_mtime
        except OSError:
            continue
        if mtime > latest_mtime:
            latest, latest_mtime = entry, mtime
    return latest


def resolve_log_location(log_dir: Optional[str] = None) -> Optional[str]:
    """Return the newest log file path as text, or ``None`` when there is none."""

    directory = resolve_log_dir(log_dir)
    path = find_latest_log_file(directory)
    if path is None:
        _LOGGER.info("No log file found in %s", directory)
        return None
    _LOGGER.debug("Latest log file: %s", path)
    return str(path)
