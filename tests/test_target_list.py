from __future__ import annotations

import itertools

import pytest

from target_state.target_list import Target, TargetListStore, moved_index, parse_target_text, reorder


def test_set_from_text_trims_and_drops_empty_pieces():
    store = TargetListStore()
    assert store.set_from_text("a, b ,, c") is True
    assert store.values() == ["a", "b", "c"]


@pytest.mark.parametrize("raw", ["", "   ", "\t\n", ", ,  ,"])
def test_blank_text_clears_instead_of_single_empty_entry(raw):
    store = TargetListStore(["old"])
    assert store.set_from_text(raw) is False
    assert len(store) == 0
    assert store.values() == []


def test_parse_target_text_handles_none():
    assert parse_target_text(None) == []  # type: ignore[arg-type]


def test_set_from_text_keeps_duplicates():
    store = TargetListStore()
    store.set_from_text("x, x, y")
    assert store.values() == ["x", "x", "y"]


def test_positions_are_one_based_and_follow_order():
    store = TargetListStore(["p1", "p2", "p3"])
    assert store.positions() == [(1, "p1"), (2, "p2"), (3, "p3")]
    store.move_to(2, 0)
    assert store.positions() == [(1, "p3"), (2, "p1"), (3, "p2")]


def test_to_text_joins_with_comma_space():
    store = TargetListStore(["a", "b", "c"])
    assert store.to_text() == "a, b, c"
    assert TargetListStore().to_text() == ""


def test_delete_out_of_range_is_noop():
    store = TargetListStore(["a", "b"])
    assert store.delete_at(5) is None
    assert store.delete_at(-1) is None
    assert store.values() == ["a", "b"]
    removed = store.delete_at(0)
    assert removed is not None and removed.value == "a"
    assert store.values() == ["b"]


def test_insert_at_bounds():
    store = TargetListStore(["a"])
    assert store.insert_at(1, " b ") is True
    assert store.insert_at(0, "z") is True
    assert store.insert_at(9, "nope") is False
    assert store.values() == ["z", "a", "b"]


def test_rename_trims_and_accepts_empty_value():
    store = TargetListStore(["a", "b"])
    assert store.rename_at(0, "  alpha  ") is True
    assert store.rename_at(1, "   ") is True
    assert store.values() == ["alpha", ""]
    assert store.rename_at(2, "c") is False


def test_rename_keeps_entry_key():
    store = TargetListStore(["a"])
    key = store.key_at(1)
    store.rename_at(0, "b")
    assert store.key_at(1) == key


@pytest.mark.parametrize(
    "from_index, to_index, expected",
    [
        (0, 2, ["b", "a", "c", "d"]),
        (0, 4, ["b", "c", "d", "a"]),
        (3, 0, ["d", "a", "b", "c"]),
        (1, 3, ["a", "c", "b", "d"]),
        (2, 1, ["a", "c", "b", "d"]),
    ],
)
def test_move_to_uses_remove_then_insert_shift(from_index, to_index, expected):
    store = TargetListStore(["a", "b", "c", "d"])
    store.move_to(from_index, to_index)
    assert store.values() == expected


def test_move_to_same_slot_reports_no_change():
    store = TargetListStore(["a", "b", "c"])
    assert store.move_to(1, 1) is False
    assert store.move_to(1, 2) is False
    assert store.values() == ["a", "b", "c"]


def test_move_to_out_of_range_is_noop():
    store = TargetListStore(["a", "b"])
    assert store.move_to(2, 0) is False
    assert store.move_to(0, 3) is False
    assert store.move_to(-1, 0) is False
    assert store.values() == ["a", "b"]


def _inverse(from_index: int, to_index: int) -> tuple[int, int]:
    if to_index > from_index:
        return to_index - 1, from_index
    return to_index, from_index + 1


def test_move_preserves_multiset_and_inverse_restores_order():
    original = ["a", "b", "a", "c", "d"]
    size = len(original)
    for from_index, to_index in itertools.product(range(size), range(size + 1)):
        store = TargetListStore(original)
        store.move_to(from_index, to_index)
        assert len(store) == size
        assert sorted(store.values()) == sorted(original)
        back_from, back_to = _inverse(from_index, to_index)
        store.move_to(back_from, back_to)
        assert store.values() == original


def test_targets_get_distinct_keys():
    first, second = Target("a"), Target("a")
    assert first.key != second.key
    store = TargetListStore(["a", "a"])
    assert store.key_at(1) != store.key_at(2)
    assert store.index_of_key(store.key_at(2)) == 1
    assert store.key_at(3) is None
    assert store.key_at(0) is None


def test_reorder_helper_matches_store_move():
    original = ["a", "b", "c", "d"]
    for from_index, to_index in itertools.product(range(4), range(5)):
        store = TargetListStore(original)
        changed = store.move_to(from_index, to_index)
        assert reorder(original, from_index, to_index) == store.values()
        assert changed is (moved_index(from_index, to_index) != from_index)
