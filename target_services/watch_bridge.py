from __future__ import annotations

import json
import logging
import socket
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Tuple

JsonDict = dict[str, Any]
ConnectFn = Callable[[tuple[str, int], float], object]

_LOGGER = logging.getLogger("TargetOverlay.Services")

DEFAULT_HOST = "127.0.0.1"
SEND_TIMEOUT_SECONDS = 1.5


def read_port_file(port_path: Path) -> Optional[int]:
    try:
        data = json.loads(port_path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return None
    if not isinstance(data, dict):
        return None
    port = data.get("port")
    if not isinstance(port, int) or isinstance(port, bool) or port <= 0:
        return None
    return port


class WatchBridge:
    """Fire-and-forget JSON-line commands to the external watch service.

    The service advertises its TCP port in ``port.json``. Each call opens a
    short connection, writes one line, and closes; transport failures are
    logged and reported as ``False``.
    """

    def __init__(
        self,
        *,
        port_path: Path,
        host: str = DEFAULT_HOST,
        connect: Optional[ConnectFn] = None,
    ) -> None:
        self._port_path = port_path
        self._host = host
        self._connect = connect or socket.create_connection

    @property
    def port_path(self) -> Path:
        return self._port_path

    def read_port(self) -> Optional[int]:
        return read_port_file(self._port_path)

    def send_cli(self, payload: JsonDict) -> bool:
        port = self.read_port()
        if port is None:
            _LOGGER.debug("Watch service port unavailable (%s); dropping %s", self._port_path, payload.get("cli"))
            return False
        try:
            with self._connect((self._host, port), timeout=SEND_TIMEOUT_SECONDS) as sock:
                writer = sock.makefile("w", encoding="utf-8", newline="\n")
                writer.write(json.dumps(payload, ensure_ascii=False))
                writer.write("\n")
                writer.flush()
            return True
        except Exception as exc:
            _LOGGER.warning("Failed to send %s to watch service: %s", payload.get("cli"), exc)
            return False

    def set_watch_targets(self, targets: Sequence[Tuple[int, str]]) -> bool:
        items = [{"number": int(number), "value": str(value)} for number, value in targets]
        return self.send_cli({"cli": "set_watch_targets", "targets": items})

    def set_recording_enabled(self, enabled: bool) -> bool:
        return self.send_cli({"cli": "set_recording", "enabled": bool(enabled)})

    def send_reset(self) -> bool:
        return self.send_cli({"cli": "send_reset"})
