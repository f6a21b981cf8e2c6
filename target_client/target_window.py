"""Main overlay window wiring controls and watch events to the dispatcher."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from target_client.block_widgets import EditModeSurface, ViewModeSurface
from target_client.client_config import InitialClientSettings
from target_services.log_location import LOG_NOT_FOUND_TEXT
from target_state import commands as cmd
from target_state.dispatcher import TargetDispatcher
from target_state.events import command_from_event
from target_state.render_sync import ViewModel
from version import version_label

_CLIENT_LOGGER = logging.getLogger("TargetOverlay.Client")

WINDOW_TITLE = "Target Watch Overlay"
SEND_LABEL = "Send"
RESET_LABEL = "Reset"
OPEN_FOLDER_LABEL = "Open folder"
RECORD_LABEL = "Record"
RECORDING_LABEL = "Recording…"
EDIT_LABEL = "Edit"
EDITING_LABEL = "Editing…"

LogLocator = Callable[[], Optional[str]]
FolderOpener = Callable[[Optional[str]], bool]


class TargetWindow(QWidget):
    """Thin Qt surface: every interaction becomes a dispatcher command."""

    def __init__(
        self,
        dispatcher: TargetDispatcher,
        settings: Optional[InitialClientSettings] = None,
        *,
        log_locator: Optional[LogLocator] = None,
        folder_opener: Optional[FolderOpener] = None,
    ) -> None:
        super().__init__()
        self._dispatcher = dispatcher
        self._settings = settings or InitialClientSettings()
        self._log_locator = log_locator
        self._folder_opener = folder_opener
        self._log_path: Optional[str] = None
        self._last_revision: Optional[int] = None
        self._connection_status = ""

        self.setWindowTitle(f"{WINDOW_TITLE} {version_label()}")
        self.resize(self._settings.window_width, self._settings.window_height)
        self.setWindowOpacity(self._settings.window_opacity)
        if self._settings.always_on_top:
            self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)

        self.log_label = QLabel(self)
        self.log_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        self.open_folder_button = QPushButton(OPEN_FOLDER_LABEL, self)
        self.input_field = QLineEdit(self)
        self.input_field.setPlaceholderText("name1, name2, …")
        self.send_button = QPushButton(SEND_LABEL, self)
        self.reset_button = QPushButton(RESET_LABEL, self)
        self.recording_button = QPushButton(RECORD_LABEL, self)
        self.recording_button.setCheckable(True)
        self.edit_button = QPushButton(EDIT_LABEL, self)
        self.edit_button.setCheckable(True)
        self.view_surface = ViewModeSurface(self)
        self.edit_surface = EditModeSurface(self)
        self.stack = QStackedWidget(self)
        self.stack.addWidget(self.view_surface)
        self.stack.addWidget(self.edit_surface)
        self.status_label = QLabel(self)

        log_row = QHBoxLayout()
        log_row.addWidget(self.log_label, 1)
        log_row.addWidget(self.open_folder_button)
        input_row = QHBoxLayout()
        input_row.addWidget(self.input_field, 1)
        input_row.addWidget(self.send_button)
        control_row = QHBoxLayout()
        control_row.addWidget(self.reset_button)
        control_row.addWidget(self.recording_button)
        control_row.addWidget(self.edit_button)
        layout = QVBoxLayout(self)
        layout.addLayout(log_row)
        layout.addLayout(input_row)
        layout.addLayout(control_row)
        layout.addWidget(self.stack, 1)
        layout.addWidget(self.status_label)

        self.send_button.clicked.connect(self.submit_input)
        self.input_field.returnPressed.connect(self.submit_input)
        self.reset_button.clicked.connect(lambda: self._dispatch(cmd.SendReset()))
        self.recording_button.clicked.connect(lambda: self._dispatch(cmd.ToggleRecording()))
        self.edit_button.clicked.connect(self._toggle_edit_mode)
        self.open_folder_button.clicked.connect(self.open_log_folder)
        self.view_surface.block_clicked.connect(lambda position: self._dispatch(cmd.ToggleHighlight(position)))
        self.edit_surface.rename_requested.connect(lambda index, value: self._dispatch(cmd.RenameAt(index, value)))
        self.edit_surface.delete_requested.connect(lambda index: self._dispatch(cmd.DeleteAt(index)))
        self.edit_surface.move_requested.connect(lambda src, dst: self._dispatch(cmd.MoveTarget(src, dst)))

        dispatcher.subscribe(self.apply_view)
        self.apply_view(dispatcher.view)

    # Inputs ---------------------------------------------------------------

    def _dispatch(self, command: cmd.Command) -> ViewModel:
        return self._dispatcher.dispatch(command)

    def submit_input(self) -> None:
        self._dispatch(cmd.SubmitText(self.input_field.text()))

    def _toggle_edit_mode(self) -> None:
        self._dispatch(cmd.SetEditMode(not self._dispatcher.view.edit_mode))

    def handle_event(self, payload: Dict[str, Any]) -> None:
        command = command_from_event(payload)
        if command is None:
            return
        self._dispatch(command)

    def refresh_log_location(self) -> None:
        path: Optional[str] = None
        if self._log_locator is not None:
            try:
                path = self._log_locator()
            except Exception as exc:
                _CLIENT_LOGGER.warning("Resolving the log location failed: %s", exc)
                self._log_path = None
                self.log_label.setText(f"Error: {exc}")
                return
        self._log_path = path
        self.log_label.setText(path or LOG_NOT_FOUND_TEXT)

    def open_log_folder(self) -> None:
        if self._folder_opener is None or not self._log_path:
            return
        if not self._folder_opener(self._log_path):
            self.status_label.setText("Could not open the log folder.")

    def set_connection_status(self, message: str) -> None:
        self._connection_status = message or ""
        self._update_status(self._dispatcher.view)

    # Rendering ------------------------------------------------------------

    def apply_view(self, view: ViewModel) -> None:
        self.recording_button.setChecked(view.recording)
        self.recording_button.setText(RECORDING_LABEL if view.recording else RECORD_LABEL)
        self.edit_button.setChecked(view.edit_mode)
        self.edit_button.setText(EDITING_LABEL if view.edit_mode else EDIT_LABEL)
        if view.revision != self._last_revision:
            self._last_revision = view.revision
            if view.revision:
                self.input_field.setText(view.text)
        if view.edit_mode:
            self.edit_surface.show_view(view)
            self.stack.setCurrentWidget(self.edit_surface)
        else:
            self.view_surface.show_view(view)
            self.stack.setCurrentWidget(self.view_surface)
        self._update_status(view)

    def _update_status(self, view: ViewModel) -> None:
        self.status_label.setText(view.status or self._connection_status)
