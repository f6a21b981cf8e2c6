from __future__ import annotations

from target_client.target_window import EDITING_LABEL, RECORDING_LABEL, TargetWindow
from target_services.log_location import LOG_NOT_FOUND_TEXT
from target_services.markup import format_blocks_as_markup
from target_state.dispatcher import TargetDispatcher


class _FakeWatch:
    def __init__(self) -> None:
        self.target_calls: list[list[tuple[int, str]]] = []
        self.recording_calls: list[bool] = []

    def set_watch_targets(self, targets):
        self.target_calls.append(list(targets))
        return True

    def set_recording_enabled(self, enabled):
        self.recording_calls.append(enabled)
        return True


def _window(**kwargs):
    watch = _FakeWatch()
    dispatcher = TargetDispatcher(watch_service=watch, formatter=format_blocks_as_markup)
    return TargetWindow(dispatcher, **kwargs), dispatcher, watch


def test_submit_normalises_input_and_subscribes(qapp):
    window, dispatcher, watch = _window()
    window.input_field.setText(" p1 ,, p2 ")
    window.send_button.click()

    assert window.input_field.text() == "p1, p2"
    assert watch.target_calls == [[(1, "p1"), (2, "p2")]]
    assert window.stack.currentWidget() is window.view_surface


def test_watch_events_highlight_blocks(qapp):
    window, dispatcher, _watch = _window()
    window.input_field.setText("p1, p2")
    window.submit_input()

    window.handle_event({"event": "match", "position": 2})
    assert dispatcher.view.block_at(2).highlighted is True
    assert ".block-2 {" in window.view_surface.document().defaultStyleSheet()

    window.handle_event({"event": "reset"})
    window.handle_event({"event": "unknown"})
    assert dispatcher.view.block_at(2).highlighted is False


def test_edit_mode_swaps_surface_and_handles_delete(qapp):
    window, dispatcher, watch = _window()
    window.input_field.setText("a, b, c")
    window.submit_input()

    window.edit_button.click()
    assert window.edit_button.text() == EDITING_LABEL
    assert window.stack.currentWidget() is window.edit_surface
    assert len(window.edit_surface.blocks) == 3

    window.edit_surface.blocks[0].delete_button.click()
    assert [block.value for block in dispatcher.view.blocks] == ["b", "c"]
    assert watch.target_calls[-1] == [(1, "b"), (2, "c")]

    window.edit_button.click()
    assert window.stack.currentWidget() is window.view_surface
    assert window.input_field.text() == "b, c"


def test_recording_button_toggles_discovery(qapp):
    window, dispatcher, watch = _window()
    window.recording_button.click()
    assert window.recording_button.text() == RECORDING_LABEL
    assert window.recording_button.isChecked() is True

    window.handle_event({"event": "discovered", "name": "x"})
    window.handle_event({"event": "round-over"})
    assert window.recording_button.isChecked() is False
    assert window.input_field.text() == "x"
    assert watch.recording_calls == [True, False]


def test_log_location_label_and_folder_button(qapp):
    opened: list[str] = []
    window, _dispatcher, _watch = _window(
        log_locator=lambda: "/logs/output_log_1.txt",
        folder_opener=lambda path: opened.append(path) or False,
    )
    window.refresh_log_location()
    assert window.log_label.text() == "/logs/output_log_1.txt"
    window.open_folder_button.click()
    assert opened == ["/logs/output_log_1.txt"]
    assert window.status_label.text() == "Could not open the log folder."


def test_log_location_missing_or_failing(qapp):
    window, _dispatcher, _watch = _window(log_locator=lambda: None)
    window.refresh_log_location()
    assert window.log_label.text() == LOG_NOT_FOUND_TEXT

    def broken():
        raise PermissionError("denied")

    failing, _dispatcher, _watch = _window(log_locator=broken)
    failing.refresh_log_location()
    assert failing.log_label.text() == "Error: denied"


def test_connection_status_shown_when_no_state_status(qapp):
    window, _dispatcher, _watch = _window()
    window.set_connection_status("Connected")
    assert window.status_label.text() == "Connected"
