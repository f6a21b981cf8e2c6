"""Automatic vs. manual highlight bookkeeping for target entries."""
from __future__ import annotations

from typing import FrozenSet, Set


class HighlightOverlay:
    """Tracks automatic hits and user-pinned overrides per target key.

    Manual overrides win over automatic events: a pinned entry stays
    highlighted through later hits and reset broadcasts until the user toggles
    it again.
    """

    def __init__(self) -> None:
        self._manual: Set[int] = set()
        self._automatic: Set[int] = set()

    @property
    def overridden(self) -> FrozenSet[int]:
        return frozenset(self._manual)

    @property
    def automatic(self) -> FrozenSet[int]:
        return frozenset(self._automatic)

    def is_overridden(self, key: int) -> bool:
        return key in self._manual

    def is_highlighted(self, key: int) -> bool:
        return key in self._manual or key in self._automatic

    def toggle_manual(self, key: int) -> bool:
        """Flip the override for ``key`` and return the new override state."""

        if key in self._manual:
            self._manual.discard(key)
            self._automatic.discard(key)
            return False
        self._manual.add(key)
        return True

    def apply_hit(self, key: int) -> bool:
        if key in self._manual:
            return False
        if key in self._automatic:
            return False
        self._automatic.add(key)
        return True

    def apply_reset(self) -> bool:
        cleared = {key for key in self._automatic if key not in self._manual}
        self._automatic -= cleared
        return bool(cleared)

    def forget(self, key: int) -> None:
        self._manual.discard(key)
        self._automatic.discard(key)

    def clear_all(self) -> None:
        self._manual.clear()
        self._automatic.clear()
