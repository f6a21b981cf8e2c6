"""Decide and send watch-service subscriptions for the committed target list."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple

from target_state.target_list import TargetListStore

_LOGGER = logging.getLogger("TargetOverlay.State")

TargetPair = Tuple[int, str]


class WatchService(Protocol):  # type: ignore[name-defined]
    def set_watch_targets(self, targets: Sequence[TargetPair]) -> bool: ...
    def set_recording_enabled(self, enabled: bool) -> bool: ...


@dataclass(frozen=True)
class WatchSubscription:
    targets: Tuple[TargetPair, ...] = ()
    recording: bool = False

    @property
    def paused(self) -> bool:
        return not self.targets and not self.recording

    def as_payload(self) -> List[dict]:
        return [{"number": number, "value": value} for number, value in self.targets]


def plan_subscription(store: TargetListStore, recording_active: bool) -> WatchSubscription:
    """Return the subscription that matches the committed state.

    While recording the list is irrelevant: nothing is matched and the watcher
    only reports discoveries. Entries renamed to an empty value keep their slot
    but are not matched.
    """

    if recording_active:
        return WatchSubscription(targets=(), recording=True)
    pairs = tuple((position, value) for position, value in store.positions() if value)
    return WatchSubscription(targets=pairs, recording=False)


@dataclass
class WatchSubscriptionSync:
    """Sends full-replace subscriptions and remembers the last one sent."""

    service: Optional[WatchService] = None
    last_sent: Optional[WatchSubscription] = field(default=None, init=False)
    _last_recording_flag: Optional[bool] = field(default=None, init=False)

    def sync(self, store: TargetListStore, recording_active: bool) -> bool:
        subscription = plan_subscription(store, recording_active)
        return self.send(subscription)

    def send(self, subscription: WatchSubscription) -> bool:
        self.last_sent = subscription
        if self.service is None:
            _LOGGER.debug("No watch service attached; subscription kept locally")
            return False
        try:
            sent = bool(self.service.set_watch_targets(subscription.targets))
        except Exception as exc:
            _LOGGER.warning("Watch subscription failed: %s", exc)
            sent = False
        if subscription.paused:
            _LOGGER.debug("Watch paused (no targets)")
        elif subscription.recording:
            _LOGGER.debug("Watch switched to discovery mode")
        else:
            _LOGGER.debug("Watching %d target(s)", len(subscription.targets))
        if subscription.recording and self._last_recording_flag is not True:
            self.notify_recording(True)
        if not sent:
            _LOGGER.warning("Watch service did not accept the subscription; resubmit to resync")
        return sent

    def notify_recording(self, enabled: bool) -> bool:
        """Tell the watch service whether discovery is on; failures are non-fatal."""

        if self.service is None:
            return False
        try:
            sent = bool(self.service.set_recording_enabled(enabled))
        except Exception as exc:
            _LOGGER.warning("Recording toggle notification failed: %s", exc)
            return False
        if not sent:
            _LOGGER.warning("Watch service unavailable while setting recording=%s", enabled)
            return False
        self._last_recording_flag = enabled
        return True
