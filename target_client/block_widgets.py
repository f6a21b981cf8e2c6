"""PyQt6 surfaces that draw a :class:`ViewModel` in view and edit mode."""
from __future__ import annotations

import html
import logging
from typing import List, Optional, Tuple

from PyQt6.QtCore import QPoint, Qt, QUrl, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from target_services.markup import parse_block_href
from target_state.render_sync import BlockView, ViewModel, highlight_stylesheet, insertion_index
from target_state.target_list import reorder

_CLIENT_LOGGER = logging.getLogger("TargetOverlay.Client")

BASE_BLOCK_CSS = (
    ".data-block { border: 2px solid black; padding: 2px; margin: 2px; }\n"
    ".number { font-weight: bold; }\n"
    "a { color: black; text-decoration: none; }\n"
)
DRAG_HANDLE_TEXT = "≡"
DELETE_BUTTON_TEXT = "×"


class ViewModeSurface(QTextBrowser):
    """Displays formatter markup; clicking a block emits its position."""

    block_clicked = pyqtSignal(int)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setOpenLinks(False)
        self.setOpenExternalLinks(False)
        self.anchorClicked.connect(self._handle_anchor)
        self._last_render: Optional[Tuple[str, str]] = None

    def show_view(self, view: ViewModel) -> None:
        if view.error is not None:
            body = f"<p>{html.escape(view.error)}</p>"
            css = ""
        elif view.empty:
            body = ""
            css = ""
        else:
            body = view.markup
            css = highlight_stylesheet(view)
        if self._last_render == (body, css):
            return
        self._last_render = (body, css)
        # The default stylesheet only applies to documents set after it.
        self.document().setDefaultStyleSheet(BASE_BLOCK_CSS + css)
        self.setHtml(body)

    def _handle_anchor(self, url: QUrl) -> None:
        position = parse_block_href(url.toString())
        if position is None:
            _CLIENT_LOGGER.debug("Ignoring non-block link: %s", url.toString())
            return
        self.block_clicked.emit(position)


class _InlineEditor(QLineEdit):
    cancelled = pyqtSignal()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.key() == Qt.Key.Key_Escape:
            self.cancelled.emit()
            event.accept()
            return
        super().keyPressEvent(event)


class _ClickableLabel(QLabel):
    clicked = pyqtSignal()

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit()
            event.accept()
            return
        super().mousePressEvent(event)


class _DragHandle(QLabel):
    pressed = pyqtSignal(QPoint)
    moved = pyqtSignal(QPoint)
    released = pyqtSignal(QPoint)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(DRAG_HANDLE_TEXT, parent)
        self.setCursor(Qt.CursorShape.OpenHandCursor)

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            self.pressed.emit(event.globalPosition().toPoint())
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        self.moved.emit(event.globalPosition().toPoint())
        event.accept()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self.setCursor(Qt.CursorShape.OpenHandCursor)
            self.released.emit(event.globalPosition().toPoint())
            event.accept()
            return
        super().mouseReleaseEvent(event)


class EditableBlock(QFrame):
    """One editable row: number, click-to-rename value, delete, drag handle."""

    rename_committed = pyqtSignal(int, str)
    delete_requested = pyqtSignal(int)

    def __init__(self, block: BlockView, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.block = block
        self._editing = False
        self.setFrameShape(QFrame.Shape.Box)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(2, 2, 2, 2)
        layout.setSpacing(4)

        self.handle = _DragHandle(self)
        self.number_label = QLabel(str(block.position), self)
        self.number_label.setFixedWidth(30)
        self.number_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.value_label = _ClickableLabel(block.value, self)
        self.value_label.setCursor(Qt.CursorShape.IBeamCursor)
        self.value_label.clicked.connect(self.begin_edit)
        self.editor = _InlineEditor(self)
        self.editor.hide()
        self.editor.editingFinished.connect(self._finish_edit)
        self.editor.cancelled.connect(self._cancel_edit)
        self.delete_button = QPushButton(DELETE_BUTTON_TEXT, self)
        self.delete_button.setFixedWidth(28)
        self.delete_button.clicked.connect(lambda: self.delete_requested.emit(self.block.index))

        layout.addWidget(self.handle)
        layout.addWidget(self.number_label)
        layout.addWidget(self.value_label, 1)
        layout.addWidget(self.editor, 1)
        layout.addWidget(self.delete_button)

    @property
    def editing(self) -> bool:
        return self._editing

    def set_number(self, position: int) -> None:
        self.number_label.setText(str(position))

    def begin_edit(self) -> None:
        if self._editing:
            return
        self._editing = True
        self.editor.setText(self.value_label.text())
        self.value_label.hide()
        self.editor.show()
        self.editor.setFocus()
        self.editor.selectAll()

    def _finish_edit(self) -> None:
        if not self._editing:
            return
        self._editing = False
        new_value = self.editor.text().strip()
        self.value_label.setText(new_value)
        self.editor.hide()
        self.value_label.show()
        self.rename_committed.emit(self.block.index, new_value)

    def _cancel_edit(self) -> None:
        # Escape restores the displayed text only; nothing is committed.
        self._editing = False
        self.editor.hide()
        self.value_label.setText(self.block.value)
        self.value_label.show()


class EditModeSurface(QWidget):
    """Stacked editable blocks with drag-to-reorder."""

    rename_requested = pyqtSignal(int, str)
    delete_requested = pyqtSignal(int)
    move_requested = pyqtSignal(int, int)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(4)
        self._layout.addStretch(1)
        self._blocks: List[EditableBlock] = []
        self._signature: Optional[Tuple[Tuple[int, str], ...]] = None
        self._drag_index: Optional[int] = None

    @property
    def blocks(self) -> List[EditableBlock]:
        return list(self._blocks)

    def show_view(self, view: ViewModel) -> None:
        signature = tuple((block.key, block.value) for block in view.blocks)
        if signature == self._signature:
            return
        self._signature = signature
        self._drag_index = None
        for widget in self._blocks:
            self._layout.removeWidget(widget)
            widget.hide()
            widget.deleteLater()
        self._blocks = []
        for block in view.blocks:
            widget = EditableBlock(block, self)
            widget.rename_committed.connect(self.rename_requested)
            widget.delete_requested.connect(self.delete_requested)
            widget.handle.pressed.connect(lambda _pos, index=block.index: self._start_drag(index))
            widget.handle.moved.connect(self._drag_moved)
            widget.handle.released.connect(self._drop)
            self._layout.insertWidget(self._layout.count() - 1, widget)
            self._blocks.append(widget)

    def midpoints(self) -> List[float]:
        return [float(widget.geometry().center().y()) for widget in self._blocks]

    def drop_index_at(self, local_y: float) -> Optional[int]:
        if self._drag_index is None:
            return None
        return insertion_index(self.midpoints(), self._drag_index, local_y)

    def _start_drag(self, index: int) -> None:
        self._drag_index = index
        _CLIENT_LOGGER.debug("Drag started for block %d", index + 1)

    def _drag_moved(self, global_pos: QPoint) -> None:
        target = self.drop_index_at(self.mapFromGlobal(global_pos).y())
        if target is None:
            return
        preview = self._preview_order(self._drag_index, target)
        for position, widget in enumerate(preview, start=1):
            widget.set_number(position)

    def _preview_order(self, from_index: int, to_index: int) -> List[EditableBlock]:
        return reorder(self._blocks, from_index, to_index)

    def _drop(self, global_pos: QPoint) -> None:
        from_index = self._drag_index
        target = self.drop_index_at(self.mapFromGlobal(global_pos).y())
        self._drag_index = None
        if from_index is None or target is None:
            return
        for position, widget in enumerate(self._blocks, start=1):
            widget.set_number(position)
        _CLIENT_LOGGER.debug("Drop block %d at insertion point %d", from_index + 1, target)
        self.move_requested.emit(from_index, target)
