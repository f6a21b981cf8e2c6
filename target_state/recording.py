"""Recording session that collects discovered names while active."""
from __future__ import annotations

import logging
from typing import List, Optional

_LOGGER = logging.getLogger("TargetOverlay.State")


class RecordingSession:
    """``Idle -> Recording -> Idle`` state machine with first-seen dedupe."""

    def __init__(self) -> None:
        self._active = False
        self._discovered: List[str] = []

    @property
    def active(self) -> bool:
        return self._active

    @property
    def discovered(self) -> List[str]:
        return list(self._discovered)

    def start(self) -> None:
        self._discovered = []
        self._active = True
        _LOGGER.debug("Recording started")

    def discover(self, name: str) -> bool:
        if not self._active:
            return False
        text = (name or "").strip() if isinstance(name, str) else ""
        if not text:
            return False
        if text in self._discovered:
            _LOGGER.debug("Recording already holds %s", text)
            return False
        self._discovered.append(text)
        _LOGGER.debug("Recorded new name %s (%d total)", text, len(self._discovered))
        return True

    def stop(self) -> Optional[List[str]]:
        """Leave recording and hand back the discovered names.

        Returns ``None`` when no session was active so repeated stop signals
        (explicit toggle racing a round-end) only merge once.
        """

        if not self._active:
            return None
        self._active = False
        discovered, self._discovered = self._discovered, []
        _LOGGER.debug("Recording stopped with %d discovered name(s)", len(discovered))
        return discovered
