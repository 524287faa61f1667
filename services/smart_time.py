"""Relative time labels for notifications and the timer that keeps them fresh.

Labels move in 15-minute steps during the first hour and in whole hours
after that; anything a day old gets no label and is hidden. The refresher
sleeps exactly until the next label would change instead of polling.
"""
import logging
import math
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Optional

from utils.constants import MAX_REFRESH_SECONDS, MIN_REFRESH_SECONDS
from utils.date_helpers import ONE_DAY, age_of, utc_now
from utils.scheduling import Scheduler

logger = logging.getLogger(__name__)

QUARTER_HOUR = 15 * 60
HOUR = 60 * 60
MIN_REFRESH = timedelta(seconds=MIN_REFRESH_SECONDS)
MAX_REFRESH = timedelta(seconds=MAX_REFRESH_SECONDS)


def smart_label(timestamp, now: datetime | None = None) -> Optional[str]:
    """Human label for a notification timestamp, or None when it should be hidden."""
    now = now or utc_now()
    age = age_of(timestamp, now)
    if age is None or age >= ONE_DAY:
        return None

    minutes = max(0, math.floor(age.total_seconds() / 60))
    if minutes < 15:
        return "Just now"
    if minutes < 30:
        return "15 minutes ago"
    if minutes < 45:
        return "30 minutes ago"
    if minutes < 60:
        return "45 minutes ago"

    hours = minutes // 60
    if hours == 1:
        return "1 hour ago"
    return f"{hours} hours ago"


def next_refresh_delay(timestamps: Iterable, now: datetime | None = None) -> timedelta:
    """Time until the earliest label change among visible timestamps.

    Clamped to [MIN_REFRESH, MAX_REFRESH]; MAX_REFRESH when nothing is visible.
    """
    now = now or utc_now()
    shortest = MAX_REFRESH.total_seconds()
    for ts in timestamps:
        if smart_label(ts, now) is None:
            continue
        seconds = age_of(ts, now).total_seconds()
        step = QUARTER_HOUR if seconds < HOUR else HOUR
        boundary = (math.floor(seconds / step) + 1) * step
        wait = boundary - seconds
        if 0 < wait < shortest:
            shortest = wait
    delay = timedelta(seconds=shortest)
    return min(max(delay, MIN_REFRESH), MAX_REFRESH)


class SmartTimeRefresher:
    """Single self-rescheduling timer.

    At most one timer is pending. `start` while running does nothing; `stop`
    always cancels. `pause`/`resume` follow window visibility, and `resume`
    refreshes immediately because labels may be stale after a long pause.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        get_timestamps: Callable[[], Iterable],
        on_refresh: Callable[[], Any],
        clock: Callable[[], datetime] = utc_now,
    ):
        self._scheduler = scheduler
        self._get_timestamps = get_timestamps
        self._on_refresh = on_refresh
        self._clock = clock
        self._handle = None
        self._running = False
        self.last_delay: timedelta | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        logger.info("Smart time refresh started")
        self._schedule_next()

    def stop(self) -> None:
        self._running = False
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None
        logger.info("Smart time refresh stopped")

    def pause(self) -> None:
        self.stop()

    def resume(self) -> None:
        self._refresh()
        self.start()

    def reschedule(self) -> None:
        """Recompute the wait after the notification set changed."""
        if not self._running:
            return
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None
        self._schedule_next()

    def _schedule_next(self) -> None:
        delay = next_refresh_delay(self._get_timestamps(), self._clock())
        self.last_delay = delay
        logger.debug("Next notification time refresh in %ds", delay.total_seconds())
        self._handle = self._scheduler.call_later(delay.total_seconds(), self._fire)

    def _fire(self) -> None:
        self._handle = None
        if not self._running:
            return
        self._refresh()
        # the callback may itself have stopped or rescheduled the loop
        if self._running and self._handle is None:
            self._schedule_next()

    def _refresh(self) -> None:
        try:
            self._on_refresh()
        except Exception:
            logger.exception("Notification time refresh failed")
