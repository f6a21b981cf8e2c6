"""Open a log file's folder in the platform file browser."""
from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from target_services.log_location import LOG_NOT_FOUND_TEXT

_LOGGER = logging.getLogger("TargetOverlay.Services")

Runner = Callable[[Sequence[str]], object]


def _browser_command(directory: Path, platform: str) -> List[str]:
    if platform.startswith("win"):
        return ["explorer", str(directory)]
    if platform == "darwin":
        return ["open", str(directory)]
    return ["xdg-open", str(directory)]


def _default_runner(command: Sequence[str]) -> object:
    return subprocess.Popen(list(command))


def open_in_file_browser(
    path: Optional[str],
    *,
    runner: Optional[Runner] = None,
    platform: Optional[str] = None,
) -> bool:
    """Open the folder containing ``path``.

    Absent paths and the "not found" placeholder are ignored. Launch failures
    are logged and reported as ``False``.
    """

    text = (path or "").strip()
    if not text or text == LOG_NOT_FOUND_TEXT:
        return False
    directory = Path(text).parent
    if not str(directory) or directory == Path(text):
        _LOGGER.warning("Could not resolve a parent folder for %s", text)
        return False
    command = _browser_command(directory, platform or sys.platform)
    try:
        (runner or _default_runner)(command)
    except (OSError, subprocess.SubprocessError) as exc:
        _LOGGER.warning("Failed to open file browser for %s: %s", directory, exc)
        return False
    _LOGGER.debug("Opened file browser: %s", " ".join(command))
    return True
