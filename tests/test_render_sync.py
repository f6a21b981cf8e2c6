from __future__ import annotations

import re

from target_state.highlight import HighlightOverlay
from target_state.render_sync import highlight_stylesheet, insertion_index, render, split_point
from target_state.target_list import TargetListStore
from target_services.markup import format_blocks_as_markup


def _store(*values: str) -> TargetListStore:
    return TargetListStore(list(values))


def test_empty_store_renders_empty_state():
    view = render(TargetListStore(), HighlightOverlay(), False, formatter=lambda text: "unused")
    assert view.empty is True
    assert view.blocks == ()
    assert view.markup == ""


def test_blocks_follow_store_order_and_highlight_state():
    store = _store("a", "b", "c")
    overlay = HighlightOverlay()
    overlay.apply_hit(store.key_at(2))
    overlay.toggle_manual(store.key_at(3))
    view = render(store, overlay, False)
    assert [block.position for block in view.blocks] == [1, 2, 3]
    assert [block.value for block in view.blocks] == ["a", "b", "c"]
    assert [block.highlighted for block in view.blocks] == [False, True, True]
    assert [block.overridden for block in view.blocks] == [False, False, True]
    assert view.text == "a, b, c"


def test_two_column_split_rounds_up():
    assert split_point(0) == 0
    assert split_point(1) == 1
    assert split_point(4) == 2
    assert split_point(5) == 3
    view = render(_store("a", "b", "c", "d", "e"), HighlightOverlay(), True)
    assert [block.value for block in view.column(0)] == ["a", "b", "c"]
    assert [block.value for block in view.column(1)] == ["d", "e"]


def test_formatter_used_in_view_mode_only():
    seen: list = []

    def formatter(pairs) -> str:
        seen.append(list(pairs))
        return "<markup>" + ";".join(f"{number}={value}" for number, value in pairs) + "</markup>"

    store = _store("a", "b")
    view = render(store, HighlightOverlay(), False, formatter=formatter)
    assert view.markup == "<markup>1=a;2=b</markup>"
    edit_view = render(store, HighlightOverlay(), True, formatter=formatter)
    assert edit_view.markup == ""
    assert seen == [[(1, "a"), (2, "b")]]


def test_formatter_failure_renders_error_block():
    def broken(pairs) -> str:
        raise RuntimeError("formatter offline")

    view = render(_store("a"), HighlightOverlay(), False, formatter=broken)
    assert view.error == "Error: formatter offline"
    assert view.blocks == ()
    assert view.empty is False


def test_insertion_index_first_midpoint_below_pointer():
    midpoints = [10.0, 30.0, 50.0, 70.0]
    assert insertion_index(midpoints, 0, 5.0) == 1
    assert insertion_index(midpoints, 3, 5.0) == 0
    assert insertion_index(midpoints, 0, 40.0) == 2
    assert insertion_index(midpoints, 1, 40.0) == 2


def test_insertion_index_defaults_to_end_of_list():
    assert insertion_index([10.0, 30.0], 0, 100.0) == 2
    assert insertion_index([], 0, 0.0) == 0


def test_drag_drop_through_store_renumbers_positions():
    store = _store("a", "b", "c", "d")
    midpoints = [10.0, 30.0, 50.0, 70.0]
    target = insertion_index(midpoints, 0, 60.0)
    assert target == 3
    store.move_to(0, target)
    view = render(store, HighlightOverlay(), True)
    assert [(block.position, block.value) for block in view.blocks] == [(1, "b"), (2, "c"), (3, "a"), (4, "d")]


def test_highlight_stylesheet_targets_highlighted_blocks():
    store = _store("a", "b", "c")
    overlay = HighlightOverlay()
    overlay.apply_hit(store.key_at(1))
    overlay.toggle_manual(store.key_at(3))
    css = highlight_stylesheet(render(store, overlay, False))
    assert ".block-1 {" in css
    assert ".block-3 {" in css
    assert ".block-2" not in css


def _markup_blocks(markup: str) -> list[tuple[int, str]]:
    pattern = r'class="number">(\d+)</span> <span class="value">([^<]*)<'
    return [(int(number), value) for number, value in re.findall(pattern, markup)]


def test_markup_keeps_block_for_entry_renamed_to_empty():
    store = _store("a", "b", "c")
    store.rename_at(1, "")
    overlay = HighlightOverlay()
    overlay.apply_hit(store.key_at(3))
    view = render(store, overlay, False, formatter=format_blocks_as_markup)

    assert _markup_blocks(view.markup) == [(1, "a"), (2, ""), (3, "c")]
    assert 'class="data-block block-3"' in view.markup
    assert ".block-3 {" in highlight_stylesheet(view)


def test_markup_keeps_comma_in_renamed_value_as_one_block():
    store = _store("a", "b")
    store.rename_at(0, "x,y")
    view = render(store, HighlightOverlay(), False, formatter=format_blocks_as_markup)

    assert _markup_blocks(view.markup) == [(1, "x,y"), (2, "b")]
    assert len(_markup_blocks(view.markup)) == len(store)
