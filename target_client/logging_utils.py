"""Logger setup shared by the client entry point."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from version import is_dev_build

LOGGER_NAME = "TargetOverlay"
CLIENT_LOGGER_NAME = f"{LOGGER_NAME}.Client"
LOG_TAG = "TargetOverlay"
LOG_FILE_NAME = "target-overlay.log"
LOG_MAX_BYTES = 512 * 1024
LOG_FORMAT = f"[%(asctime)s] [{LOG_TAG}] %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def effective_log_level(level: Optional[int] = None) -> int:
    """Dev builds always log at DEBUG; otherwise use ``level`` or INFO."""

    if is_dev_build():
        return logging.DEBUG
    if level is None:
        return logging.INFO
    return level


def build_rotating_handler(log_dir: Path, retention: int, formatter: logging.Formatter) -> Optional[logging.Handler]:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=LOG_MAX_BYTES,
            backupCount=max(1, int(retention)),
            encoding="utf-8",
        )
    except OSError:
        return None
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    *,
    level: Optional[int] = None,
    log_dir: Optional[Path] = None,
    retention: int = 5,
    stream: bool = True,
) -> logging.Logger:
    """Attach handlers to the ``TargetOverlay`` logger tree once.

    The tree does not propagate so the Qt host or test runner root logger does
    not duplicate lines.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(effective_log_level(level))
    logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)
    if stream and not any(getattr(handler, "_target_overlay_stream", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler._target_overlay_stream = True  # type: ignore[attr-defined]
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    if log_dir is not None and not any(getattr(handler, "_target_overlay_file", False) for handler in logger.handlers):
        file_handler = build_rotating_handler(log_dir, retention, formatter)
        if file_handler is not None:
            file_handler._target_overlay_file = True  # type: ignore[attr-defined]
            logger.addHandler(file_handler)
        else:
            logger.warning("Could not open log file in %s; logging to stderr only", log_dir)
    return logging.getLogger(CLIENT_LOGGER_NAME)
