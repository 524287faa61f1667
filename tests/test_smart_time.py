from datetime import timedelta

import pytest

from conftest import T0, FakeClock, FakeScheduler
from services.smart_time import SmartTimeRefresher, next_refresh_delay, smart_label
from utils.date_helpers import format_timestamp


def _ago(**kwargs):
    return format_timestamp(T0 - timedelta(**kwargs))


@pytest.mark.parametrize("age, label", [
    (timedelta(minutes=0), "Just now"),
    (timedelta(minutes=14, seconds=59), "Just now"),
    (timedelta(minutes=20), "15 minutes ago"),
    (timedelta(minutes=30), "30 minutes ago"),
    (timedelta(minutes=50), "45 minutes ago"),
    (timedelta(minutes=61), "1 hour ago"),
    (timedelta(hours=5, minutes=30), "5 hours ago"),
    (timedelta(hours=23, minutes=59), "23 hours ago"),
])
def test_smart_label(age, label):
    assert smart_label(format_timestamp(T0 - age), T0) == label


def test_smart_label_hidden_after_a_day():
    assert smart_label(_ago(hours=24), T0) is None
    assert smart_label(_ago(hours=25), T0) is None


def test_smart_label_unparseable():
    assert smart_label("not a date", T0) is None
    assert smart_label(None, T0) is None


def test_smart_label_future_is_just_now():
    assert smart_label(format_timestamp(T0 + timedelta(minutes=3)), T0) == "Just now"


def test_next_delay_waits_for_quarter_hour():
    assert next_refresh_delay([_ago(minutes=10)], T0) == timedelta(minutes=5)


def test_next_delay_waits_for_next_hour():
    # 2h10m old: next change at 3h, but capped at 15 minutes
    assert next_refresh_delay([_ago(hours=2, minutes=10)], T0) == timedelta(minutes=15)
    assert next_refresh_delay([_ago(hours=2, minutes=50)], T0) == timedelta(minutes=10)


def test_next_delay_uses_earliest_boundary():
    delay = next_refresh_delay([_ago(hours=3, minutes=10), _ago(minutes=14)], T0)
    assert delay == timedelta(seconds=60)


def test_next_delay_clamped_to_minimum():
    assert next_refresh_delay([_ago(minutes=14, seconds=50)], T0) == timedelta(seconds=30)


def test_next_delay_without_visible_notifications():
    assert next_refresh_delay([], T0) == timedelta(minutes=15)
    assert next_refresh_delay([_ago(hours=30)], T0) == timedelta(minutes=15)


# ── Refresher ────────────────────────────────────────────────────────────────

def _refresher(timestamps):
    clock = FakeClock()
    scheduler = FakeScheduler(clock)
    calls = []
    refresher = SmartTimeRefresher(
        scheduler, lambda: timestamps, lambda: calls.append(clock.now), clock=clock,
    )
    return refresher, scheduler, clock, calls


def test_refresher_fires_at_label_boundary():
    refresher, scheduler, clock, calls = _refresher([_ago(minutes=10)])
    refresher.start()
    assert len(scheduler.pending) == 1
    assert refresher.last_delay == timedelta(minutes=5)

    scheduler.advance(5 * 60)
    assert calls == [T0 + timedelta(minutes=5)]
    # rescheduled for the next boundary
    assert len(scheduler.pending) == 1


def test_refresher_single_timer():
    refresher, scheduler, _, _ = _refresher([_ago(minutes=10)])
    refresher.start()
    refresher.start()
    refresher.reschedule()
    assert len(scheduler.pending) == 1


def test_refresher_stop_and_resume():
    refresher, scheduler, _, calls = _refresher([_ago(minutes=10)])
    refresher.start()
    refresher.pause()
    assert not refresher.is_running
    assert scheduler.pending == {}

    scheduler.advance(60 * 60)
    assert calls == []

    refresher.resume()
    assert len(calls) == 1
    assert refresher.is_running
    assert len(scheduler.pending) == 1


def test_refresher_survives_callback_errors():
    clock = FakeClock()
    scheduler = FakeScheduler(clock)

    def boom():
        raise RuntimeError("render failed")

    refresher = SmartTimeRefresher(scheduler, lambda: [], boom, clock=clock)
    refresher.start()
    scheduler.advance(15 * 60)
    assert refresher.is_running
    assert len(scheduler.pending) == 1


def test_refresher_callback_may_stop_loop():
    clock = FakeClock()
    scheduler = FakeScheduler(clock)
    refresher = None

    def stop():
        refresher.stop()

    refresher = SmartTimeRefresher(scheduler, lambda: [], stop, clock=clock)
    refresher.start()
    scheduler.advance(15 * 60)
    assert not refresher.is_running
    assert scheduler.pending == {}
