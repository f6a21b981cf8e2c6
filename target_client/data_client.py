"""Inbound watch-event stream client bridging an asyncio thread to Qt."""
from __future__ import annotations

import asyncio
import json
import logging
import threading
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from target_services.watch_bridge import DEFAULT_HOST, read_port_file
from version import version_label

_CLIENT_LOGGER = logging.getLogger("TargetOverlay.Client")

MAX_BACKOFF_SECONDS = 10.0


class WatchEventClient(QObject):
    """Async TCP reader that forwards JSON-line events to the Qt thread.

    Signals are emitted from the background thread; Qt queues them onto the
    receiver's thread so the dispatcher only ever runs on the GUI thread.
    """

    event_received = pyqtSignal(dict)
    status_changed = pyqtSignal(str)

    def __init__(self, port_file: Path, loop_sleep: float = 1.0, host: str = DEFAULT_HOST) -> None:
        super().__init__()
        self._port_file = port_file
        self._loop_sleep = loop_sleep
        self._host = host
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_event = threading.Event()

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._thread_main, name="TargetOverlay-Events", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._loop and self._loop.is_running():
            self._loop.call_soon_threadsafe(lambda: None)
        if self._thread:
            self._thread.join(timeout=5.0)
        self._loop = None
        self._thread = None

    # Background thread ----------------------------------------------------

    def _thread_main(self) -> None:
        loop = asyncio.new_event_loop()
        self._loop = loop
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(self._run())
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()

    async def _run(self) -> None:
        backoff = 1.0
        while not self._stop_event.is_set():
            port = read_port_file(self._port_file)
            if port is None:
                self.status_changed.emit(f"Waiting for {self._port_file.name}…")
                await asyncio.sleep(self._loop_sleep)
                continue
            try:
                reader, writer = await asyncio.open_connection(self._host, port)
            except Exception as exc:
                self.status_changed.emit(f"Connect failed: {exc}")
                await asyncio.sleep(backoff)
                backoff = min(backoff * 1.5, MAX_BACKOFF_SECONDS)
                continue

            message = f"{version_label()} - Connected to {self._host}:{port}"
            _CLIENT_LOGGER.debug("Status banner updated: %s", message)
            self.status_changed.emit(message)
            backoff = 1.0
            try:
                await self._read_events(reader)
            except Exception as exc:
                self.status_changed.emit(f"Disconnected: {exc}")
            finally:
                try:
                    writer.close()
                    await writer.wait_closed()
                except Exception:
                    pass
            await asyncio.sleep(backoff)
            backoff = min(backoff * 1.5, MAX_BACKOFF_SECONDS)

    async def _read_events(self, reader: asyncio.StreamReader) -> None:
        while not self._stop_event.is_set():
            try:
                line = await asyncio.wait_for(reader.readline(), timeout=self._loop_sleep)
            except asyncio.TimeoutError:
                continue
            if not line:
                raise ConnectionError("Watch service closed the connection")
            payload = decode_event_line(line)
            if payload is not None:
                self.event_received.emit(payload)


def decode_event_line(line: bytes) -> Optional[dict]:
    """Decode one JSON line; anything but a JSON object is dropped."""

    try:
        payload = json.loads(line.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        _CLIENT_LOGGER.debug("Dropping undecodable event line: %r", line[:120])
        return None
    if not isinstance(payload, dict):
        return None
    return payload
