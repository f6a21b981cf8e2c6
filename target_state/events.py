"""Translate inbound watch-service payloads into dispatcher commands."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from target_state import commands as cmd

_LOGGER = logging.getLogger("TargetOverlay.State")

MATCH_EVENTS = {"match", "log-hit", "log_hit"}
RESET_EVENTS = {"reset", "reset-hit", "reset_hit", "reset-broadcast"}
DISCOVERED_EVENTS = {"discovered", "recording-new-player", "recording_new_player"}
ROUND_ENDED_EVENTS = {"round_ended", "round-ended", "round-over", "round_over"}


def _event_name(payload: Mapping[str, Any]) -> str:
    raw = payload.get("event")
    if not isinstance(raw, str):
        return ""
    return raw.strip().lower()


def command_from_event(payload: Any) -> Optional[cmd.Command]:
    """Return the command for an inbound event, or ``None`` to ignore it.

    Payloads follow ``{"event": <name>, ...}``. Match events carry the 1-based
    position in ``position`` (``payload`` is accepted as well); discovery events
    carry the name in ``name`` (or ``payload``).
    """

    if not isinstance(payload, Mapping):
        return None
    name = _event_name(payload)
    if name in MATCH_EVENTS:
        position = payload.get("position", payload.get("payload"))
        return cmd.ApplyHit(position)
    if name in RESET_EVENTS:
        return cmd.ApplyReset()
    if name in DISCOVERED_EVENTS:
        raw_name = payload.get("name", payload.get("payload"))
        if not isinstance(raw_name, str) or not raw_name.strip():
            _LOGGER.debug("Ignoring discovery event without a name: %s", payload)
            return None
        return cmd.Discovered(raw_name.strip())
    if name in ROUND_ENDED_EVENTS:
        return cmd.RoundEnded()
    if name:
        _LOGGER.debug("Ignoring unknown watch event: %s", name)
    return None
