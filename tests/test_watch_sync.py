from __future__ import annotations

from target_state.target_list import TargetListStore
from target_state.watch_sync import WatchSubscription, WatchSubscriptionSync, plan_subscription


class _FakeWatchService:
    def __init__(self, *, accept: bool = True, explode: bool = False) -> None:
        self.accept = accept
        self.explode = explode
        self.target_calls: list[tuple] = []
        self.recording_calls: list[bool] = []

    def set_watch_targets(self, targets):
        if self.explode:
            raise OSError("socket closed")
        self.target_calls.append(tuple(targets))
        return self.accept

    def set_recording_enabled(self, enabled):
        if self.explode:
            raise OSError("socket closed")
        self.recording_calls.append(enabled)
        return self.accept


def test_plan_full_set_when_not_recording():
    store = TargetListStore(["p1", "p2"])
    plan = plan_subscription(store, recording_active=False)
    assert plan == WatchSubscription(targets=((1, "p1"), (2, "p2")), recording=False)
    assert plan.as_payload() == [{"number": 1, "value": "p1"}, {"number": 2, "value": "p2"}]


def test_plan_empty_list_is_paused():
    plan = plan_subscription(TargetListStore(), recording_active=False)
    assert plan.targets == ()
    assert plan.paused is True


def test_plan_recording_ignores_list():
    plan = plan_subscription(TargetListStore(["a"]), recording_active=True)
    assert plan.targets == ()
    assert plan.recording is True
    assert plan.paused is False


def test_plan_skips_empty_values_but_keeps_positions():
    store = TargetListStore(["a", "b", "c"])
    store.rename_at(1, "")
    plan = plan_subscription(store, recording_active=False)
    assert plan.targets == ((1, "a"), (3, "c"))


def test_sync_sends_full_replace_each_time():
    service = _FakeWatchService()
    sync = WatchSubscriptionSync(service)
    store = TargetListStore(["a", "b"])
    assert sync.sync(store, False) is True
    store.delete_at(0)
    assert sync.sync(store, False) is True
    assert service.target_calls == [((1, "a"), (2, "b")), ((1, "b"),)]
    assert sync.last_sent == WatchSubscription(targets=((1, "b"),))
    assert service.recording_calls == []


def test_sync_enables_recording_once():
    service = _FakeWatchService()
    sync = WatchSubscriptionSync(service)
    store = TargetListStore()
    sync.sync(store, True)
    sync.sync(store, True)
    assert service.recording_calls == [True]
    assert sync.notify_recording(False) is True
    sync.sync(store, True)
    assert service.recording_calls == [True, False, True]


def test_sync_failures_are_reported_not_raised():
    sync = WatchSubscriptionSync(_FakeWatchService(explode=True))
    assert sync.sync(TargetListStore(["a"]), False) is False
    assert sync.notify_recording(False) is False
    assert sync.last_sent is not None

    rejecting = WatchSubscriptionSync(_FakeWatchService(accept=False))
    assert rejecting.sync(TargetListStore(["a"]), False) is False


def test_sync_without_service_keeps_last_plan():
    sync = WatchSubscriptionSync()
    assert sync.sync(TargetListStore(["a"]), False) is False
    assert sync.last_sent == WatchSubscription(targets=((1, "a"),))
