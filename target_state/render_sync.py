"""Pure projection of the target state into a renderable view model."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from target_state.highlight import HighlightOverlay
from target_state.target_list import TargetListStore

_LOGGER = logging.getLogger("TargetOverlay.State")

# Receives the store's (position, value) pairs so block numbers match positions.
Formatter = Callable[[Sequence[Tuple[int, str]]], str]

HIGHLIGHT_COLOR = "red"


@dataclass(frozen=True)
class BlockView:
    key: int
    index: int
    value: str
    highlighted: bool = False
    overridden: bool = False
    column: int = 0

    @property
    def position(self) -> int:
        return self.index + 1


@dataclass(frozen=True)
class ViewModel:
    blocks: Tuple[BlockView, ...] = ()
    edit_mode: bool = False
    text: str = ""
    markup: str = ""
    error: Optional[str] = None
    recording: bool = False
    status: Optional[str] = None
    revision: int = 0

    @property
    def empty(self) -> bool:
        return not self.blocks and self.error is None

    def block_at(self, position: int) -> Optional[BlockView]:
        for block in self.blocks:
            if block.position == position:
                return block
        return None

    def column(self, column: int) -> Tuple[BlockView, ...]:
        return tuple(block for block in self.blocks if block.column == column)


def split_point(count: int) -> int:
    """Number of entries in the left column of the two-column layout."""

    return int(math.ceil(count / 2.0)) if count > 0 else 0


def render(
    store: TargetListStore,
    overlay: HighlightOverlay,
    edit_mode: bool,
    *,
    formatter: Optional[Formatter] = None,
) -> ViewModel:
    text = store.to_text()
    if not store:
        return ViewModel(edit_mode=edit_mode, text=text)
    half = split_point(len(store))
    blocks = tuple(
        BlockView(
            key=target.key,
            index=index,
            value=target.value,
            highlighted=overlay.is_highlighted(target.key),
            overridden=overlay.is_overridden(target.key),
            column=0 if index < half else 1,
        )
        for index, target in enumerate(store.targets)
    )
    markup = ""
    if not edit_mode and formatter is not None:
        try:
            markup = formatter(store.positions())
        except Exception as exc:
            _LOGGER.warning("Target markup formatting failed: %s", exc)
            return ViewModel(edit_mode=edit_mode, text=text, error=f"Error: {exc}")
    return ViewModel(blocks=blocks, edit_mode=edit_mode, text=text, markup=markup)


def insertion_index(midpoints: Sequence[float], dragged_index: int, pointer_y: float) -> int:
    """Return the drop index for a dragged block.

    The insertion point is the first block other than the dragged one whose
    vertical midpoint lies below the pointer; ``len(midpoints)`` (end of list)
    when there is none. The result is in pre-drop indexing, ready for
    :meth:`TargetListStore.move_to`.
    """

    for index, midpoint in enumerate(midpoints):
        if index == dragged_index:
            continue
        if pointer_y < midpoint:
            return index
    return len(midpoints)


def highlight_stylesheet(view: ViewModel, color: str = HIGHLIGHT_COLOR) -> str:
    """CSS painting the highlighted blocks of the view-mode markup."""

    rules = [
        f".block-{block.position} {{ background-color: {color}; }}"
        for block in view.blocks
        if block.highlighted
    ]
    return "\n".join(rules)
