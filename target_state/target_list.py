"""Canonical ordered target list shared by every other view of the state."""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar

TEXT_SEPARATOR = ","
TEXT_JOINER = ", "

_KEY_SOURCE = itertools.count(1)

T = TypeVar("T")


def _next_key() -> int:
    return next(_KEY_SOURCE)


def moved_index(from_index: int, to_index: int) -> int:
    """Final index of an entry moved by remove-then-insert.

    ``to_index`` is expressed against the list before removal; when it lies
    after the removed slot it shifts down by one.
    """

    return to_index - 1 if to_index > from_index else to_index


def reorder(items: Sequence[T], from_index: int, to_index: int) -> List[T]:
    """Return a copy of ``items`` with one entry moved by remove-then-insert."""

    result = list(items)
    entry = result.pop(from_index)
    result.insert(moved_index(from_index, to_index), entry)
    return result


def parse_target_text(raw: str) -> List[str]:
    """Split comma separated text into trimmed, non-empty values."""

    text = (raw or "").strip()
    if not text:
        return []
    return [piece.strip() for piece in text.split(TEXT_SEPARATOR) if piece.strip()]


@dataclass
class Target:
    """A tracked value plus the stable key its highlight state hangs off."""

    value: str
    key: int = 0

    def __post_init__(self) -> None:
        if not self.key:
            self.key = _next_key()


class TargetListStore:
    """Owns the ordered target list; positions are derived from list order."""

    def __init__(self, values: Optional[Iterable[str]] = None) -> None:
        self._targets: List[Target] = [Target(str(value)) for value in (values or [])]

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[Target]:
        return iter(list(self._targets))

    def __bool__(self) -> bool:
        return bool(self._targets)

    @property
    def targets(self) -> Tuple[Target, ...]:
        return tuple(self._targets)

    def values(self) -> List[str]:
        return [target.value for target in self._targets]

    def positions(self) -> List[Tuple[int, str]]:
        return [(index + 1, target.value) for index, target in enumerate(self._targets)]

    def to_text(self) -> str:
        return TEXT_JOINER.join(self.values())

    # Lookup ----------------------------------------------------------------

    def _in_range(self, index: int) -> bool:
        return isinstance(index, int) and 0 <= index < len(self._targets)

    def target_at(self, index: int) -> Optional[Target]:
        if not self._in_range(index):
            return None
        return self._targets[index]

    def key_at(self, position: int) -> Optional[int]:
        target = self.target_at(position - 1) if isinstance(position, int) else None
        return target.key if target is not None else None

    def index_of_key(self, key: int) -> Optional[int]:
        for index, target in enumerate(self._targets):
            if target.key == key:
                return index
        return None

    # Mutations -------------------------------------------------------------

    def set_from_text(self, raw: str) -> bool:
        """Replace the list from comma separated text.

        Returns ``False`` when the text is blank; the list is cleared in that
        case rather than holding a single empty entry.
        """

        values = parse_target_text(raw)
        if not values:
            self.clear()
            return False
        self.replace(values)
        return True

    def replace(self, values: Iterable[str]) -> None:
        self._targets = [Target(str(value)) for value in values]

    def clear(self) -> None:
        self._targets = []

    def insert_at(self, index: int, value: str) -> bool:
        if not isinstance(index, int) or not 0 <= index <= len(self._targets):
            return False
        self._targets.insert(index, Target(str(value).strip()))
        return True

    def delete_at(self, index: int) -> Optional[Target]:
        if not self._in_range(index):
            return None
        return self._targets.pop(index)

    def rename_at(self, index: int, new_value: str) -> bool:
        # An empty value is kept as an empty entry; only move/delete drop entries.
        if not self._in_range(index):
            return False
        self._targets[index].value = (new_value or "").strip()
        return True

    def move_to(self, from_index: int, to_index: int) -> bool:
        """Remove the entry at ``from_index`` and reinsert it before ``to_index``.

        ``to_index`` is expressed against the list *before* removal and may be
        ``len(list)`` for "end of list"; when it lies after the removed slot it
        shifts down by one once the entry has been taken out.
        """

        if not self._in_range(from_index):
            return False
        if not isinstance(to_index, int) or not 0 <= to_index <= len(self._targets):
            return False
        self._targets = reorder(self._targets, from_index, to_index)
        return moved_index(from_index, to_index) != from_index
