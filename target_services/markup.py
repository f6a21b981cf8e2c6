"""Format numbered target entries as two-column block markup."""
from __future__ import annotations

import html
from typing import List, Optional, Sequence, Tuple

from target_state.render_sync import split_point
from target_state.target_list import parse_target_text

BLOCK_LINK_SCHEME = "target"


class MarkupError(ValueError):
    """Raised when the formatter receives something other than text."""


def block_href(position: int) -> str:
    return f"{BLOCK_LINK_SCHEME}:{position}"


def parse_block_href(href: str) -> Optional[int]:
    """Return the position encoded in a block link, or ``None``."""

    text = (href or "").strip()
    prefix = f"{BLOCK_LINK_SCHEME}:"
    if not text.startswith(prefix):
        return None
    token = text[len(prefix) :].strip()
    if not token.isdigit():
        return None
    position = int(token)
    return position if position >= 1 else None


def _format_block(position: int, value: str) -> str:
    return (
        f'<div class="data-block block-{position}">'
        f'<a href="{block_href(position)}">'
        f'<span class="number">{position}</span> '
        f'<span class="value">{html.escape(value)}</span>'
        "</a></div>"
    )


def _format_column(pairs: Sequence[Tuple[int, str]]) -> str:
    return "".join(_format_block(position, value) for position, value in pairs)


def format_blocks_as_markup(pairs: Sequence[Tuple[int, str]]) -> str:
    """Render one block per ``(position, value)`` pair, numbered as given.

    Empty values still get a block so block numbers stay aligned with the
    positions used for matching and click-to-toggle. The first half (rounded
    up) goes into the left column.
    """

    items = list(pairs)
    for item in items:
        if not (isinstance(item, tuple) and len(item) == 2 and isinstance(item[1], str)):
            raise MarkupError(f"expected (position, value) pairs, got {item!r}")
    half = split_point(len(items))
    return (
        '<table class="columns" width="100%"><tr>'
        f'<td class="column">{_format_column(items[:half])}</td>'
        f'<td class="column">{_format_column(items[half:])}</td>'
        "</tr></table>"
    )


def format_as_markup(text: str) -> str:
    """Render one block per non-empty trimmed entry of ``text``.

    Blocks carry their 1-based number both as text and as a ``block-N`` class.
    """

    if not isinstance(text, str):
        raise MarkupError(f"expected text, got {type(text).__name__}")
    items: List[str] = parse_target_text(text)
    return format_blocks_as_markup([(index + 1, value) for index, value in enumerate(items)])
