"""Single entry point that applies commands to the target state.

Every user action and every inbound watch event is turned into a command from
:mod:`target_state.commands` and passed to :meth:`TargetDispatcher.dispatch`.
The dispatcher owns the only copy of the state, re-projects the view model
after each command, and resubscribes the watch service whenever the committed
target list changes. It is meant to be driven from one thread (the Qt main
thread in the client); nothing here locks.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from target_state import commands as cmd
from target_state.highlight import HighlightOverlay
from target_state.recording import RecordingSession
from target_state.render_sync import Formatter, ViewModel, render
from target_state.target_list import TargetListStore
from target_state.watch_sync import WatchService, WatchSubscriptionSync

_LOGGER = logging.getLogger("TargetOverlay.State")

ViewListener = Callable[[ViewModel], None]


class ResetSender(Protocol):  # type: ignore[name-defined]
    def send_reset(self) -> bool: ...


@dataclass
class AppState:
    store: TargetListStore = field(default_factory=TargetListStore)
    overlay: HighlightOverlay = field(default_factory=HighlightOverlay)
    recording: RecordingSession = field(default_factory=RecordingSession)
    edit_mode: bool = False
    status: Optional[str] = None
    revision: int = 0


def coerce_position(value: Any) -> Optional[int]:
    """Return a 1-based position from an event payload, or ``None`` if malformed."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if number >= 1 else None


class TargetDispatcher:
    """Applies commands, keeps the view model current, drives watch sync."""

    def __init__(
        self,
        *,
        watch_service: Optional[WatchService] = None,
        reset_sender: Optional[ResetSender] = None,
        formatter: Optional[Formatter] = None,
        state: Optional[AppState] = None,
    ) -> None:
        self.state = state or AppState()
        self._watch = WatchSubscriptionSync(watch_service)
        self._reset_sender = reset_sender
        self._formatter = formatter
        self._listeners: List[ViewListener] = []
        self._handlers: Dict[type, Callable[[Any], None]] = {
            cmd.SubmitText: self._submit_text,
            cmd.ToggleHighlight: self._toggle_highlight,
            cmd.DeleteAt: self._delete_at,
            cmd.RenameAt: self._rename_at,
            cmd.MoveTarget: self._move_target,
            cmd.SetEditMode: self._set_edit_mode,
            cmd.StartRecording: self._start_recording,
            cmd.StopRecording: self._stop_recording,
            cmd.ToggleRecording: self._toggle_recording,
            cmd.ApplyHit: self._apply_hit,
            cmd.ApplyReset: self._apply_reset,
            cmd.Discovered: self._discovered,
            cmd.RoundEnded: self._round_ended,
            cmd.SendReset: self._send_reset,
        }
        self._view = self._project()

    # Public API ---------------------------------------------------------

    @property
    def view(self) -> ViewModel:
        return self._view

    @property
    def watch(self) -> WatchSubscriptionSync:
        return self._watch

    def subscribe(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def dispatch(self, command: cmd.Command) -> ViewModel:
        handler = self._handlers.get(type(command))
        if handler is None:
            _LOGGER.debug("Ignoring unsupported command: %r", command)
            return self._view
        handler(command)
        self._view = self._project()
        for listener in list(self._listeners):
            try:
                listener(self._view)
            except Exception as exc:  # pragma: no cover
                _LOGGER.warning("View listener failed: %s", exc)
        return self._view

    # Implementation details ---------------------------------------------

    def _project(self) -> ViewModel:
        state = self.state
        view = render(state.store, state.overlay, state.edit_mode, formatter=self._formatter)
        return dataclasses.replace(
            view,
            recording=state.recording.active,
            status=state.status,
            revision=state.revision,
        )

    def _commit(self) -> None:
        state = self.state
        state.revision += 1
        sent = self._watch.sync(state.store, state.recording.active)
        if self._watch.service is not None:
            state.status = None if sent else "Watch service unavailable; resubmit to retry."

    def _submit_text(self, command: cmd.SubmitText) -> None:
        state = self.state
        state.status = None
        state.overlay.clear_all()
        if not state.store.set_from_text(command.text):
            _LOGGER.debug("Blank submit; target list cleared")
        else:
            _LOGGER.debug("Submitted %d target(s)", len(state.store))
        self._commit()

    def _toggle_highlight(self, command: cmd.ToggleHighlight) -> None:
        state = self.state
        if state.edit_mode:
            return
        position = coerce_position(command.position)
        key = state.store.key_at(position) if position is not None else None
        if key is None:
            return
        pinned = state.overlay.toggle_manual(key)
        _LOGGER.debug("Manual highlight for position %d %s", position, "pinned" if pinned else "released")

    def _delete_at(self, command: cmd.DeleteAt) -> None:
        state = self.state
        removed = state.store.delete_at(command.index)
        if removed is None:
            return
        state.overlay.forget(removed.key)
        self._commit()

    def _rename_at(self, command: cmd.RenameAt) -> None:
        if self.state.store.rename_at(command.index, command.value):
            self._commit()

    def _move_target(self, command: cmd.MoveTarget) -> None:
        if self.state.store.move_to(command.from_index, command.to_index):
            self._commit()

    def _set_edit_mode(self, command: cmd.SetEditMode) -> None:
        state = self.state
        enabled = bool(command.enabled)
        if enabled == state.edit_mode:
            return
        state.edit_mode = enabled
        if not enabled:
            self._commit()

    def _start_recording(self, command: cmd.StartRecording) -> None:
        state = self.state
        if state.recording.active:
            return
        state.store.clear()
        state.overlay.clear_all()
        state.recording.start()
        state.status = None
        self._commit()

    def _stop_recording(self, command: Any) -> None:
        state = self.state
        discovered = state.recording.stop()
        if discovered is None:
            return
        if discovered:
            state.store.replace(discovered)
            state.overlay.clear_all()
            _LOGGER.info("Recording merged %d new target(s)", len(discovered))
        else:
            _LOGGER.debug("Recording ended without discoveries")
        self._commit()
        self._watch.notify_recording(False)

    def _toggle_recording(self, command: cmd.ToggleRecording) -> None:
        if self.state.recording.active:
            self._stop_recording(command)
        else:
            self._start_recording(cmd.StartRecording())

    def _round_ended(self, command: cmd.RoundEnded) -> None:
        if not self.state.recording.active:
            return
        _LOGGER.debug("Round ended; stopping recording")
        self._stop_recording(command)

    def _apply_hit(self, command: cmd.ApplyHit) -> None:
        state = self.state
        position = coerce_position(command.position)
        if position is None:
            _LOGGER.debug("Ignoring malformed match position: %r", command.position)
            return
        key = state.store.key_at(position)
        if key is None:
            return
        state.overlay.apply_hit(key)

    def _apply_reset(self, command: cmd.ApplyReset) -> None:
        self.state.overlay.apply_reset()

    def _discovered(self, command: cmd.Discovered) -> None:
        self.state.recording.discover(command.name)

    def _send_reset(self, command: cmd.SendReset) -> None:
        sender = self._reset_sender
        if sender is None:
            return
        try:
            sent = bool(sender.send_reset())
        except Exception as exc:
            _LOGGER.warning("Reset signal failed: %s", exc)
            sent = False
        self.state.status = None if sent else "Reset signal could not be sent."
