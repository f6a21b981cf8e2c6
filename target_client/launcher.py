from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import QApplication

from target_client.client_config import (
    SETTINGS_FILE_NAME,
    apply_env_overrides,
    coerce_log_level,
    load_initial_settings,
    resolve_port_file,
)
from target_client.data_client import WatchEventClient
from target_client.logging_utils import configure_logging
from target_client.target_window import TargetWindow
from target_services.file_browser import open_in_file_browser
from target_services.log_location import resolve_log_location
from target_services.markup import format_blocks_as_markup
from target_services.watch_bridge import WatchBridge
from target_state.dispatcher import TargetDispatcher
from version import __version__

CLIENT_DIR = Path(__file__).resolve().parent
ROOT_DIR = CLIENT_DIR.parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Target Watch Overlay client")
    parser.add_argument("--port-file", help="Path to port.json written by the watch service")
    parser.add_argument("--settings", help=f"Path to {SETTINGS_FILE_NAME}")
    parser.add_argument("--log-dir", help="Directory holding the game logs to watch")
    parser.add_argument("--log-level", help="Logging level name or number (overrides settings)")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings_path = Path(args.settings).expanduser() if args.settings else ROOT_DIR / SETTINGS_FILE_NAME
    settings = apply_env_overrides(load_initial_settings(settings_path))
    if args.log_dir:
        settings.log_dir = args.log_dir
    cli_level = coerce_log_level(args.log_level)
    if cli_level is not None:
        settings.log_level = cli_level
    logger = configure_logging(
        level=settings.log_level,
        log_dir=settings_path.parent / "logs",
        retention=settings.log_retention,
    )
    port_file = resolve_port_file(settings, ROOT_DIR, args.port_file)
    logger.info("Starting target overlay client (pid=%s, version=%s)", os.getpid(), __version__)
    logger.debug("Resolved port file path to %s", port_file)
    logger.debug("Loaded settings from %s: %s", settings_path, settings)

    app = QApplication(sys.argv[:1])
    bridge = WatchBridge(port_path=port_file)
    dispatcher = TargetDispatcher(
        watch_service=bridge,
        reset_sender=bridge,
        formatter=format_blocks_as_markup,
    )
    window = TargetWindow(
        dispatcher,
        settings,
        log_locator=lambda: resolve_log_location(settings.log_dir),
        folder_opener=open_in_file_browser,
    )
    window.refresh_log_location()

    events = WatchEventClient(port_file)
    events.event_received.connect(window.handle_event)
    events.status_changed.connect(window.set_connection_status)

    window.show()
    events.start()

    exit_code = app.exec()
    events.stop()
    logger.info("Target overlay client exiting with code %s", exit_code)
    return int(exit_code)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
