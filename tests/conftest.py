import json
from datetime import datetime, timedelta, timezone

import pytest

from database.kv_store import MemoryStore
from database.notification_dao import NotificationDAO
from models.category import Category
from services.notification_service import NotificationService
from utils.constants import EXPENSE

T0 = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class FakeScheduler:
    """Manual timer queue driven by a FakeClock."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.pending: dict[int, tuple[datetime, object]] = {}
        self._next_id = 0

    def call_later(self, delay_seconds, callback):
        self._next_id += 1
        self.pending[self._next_id] = (self.clock.now + timedelta(seconds=delay_seconds), callback)
        return self._next_id

    def cancel(self, handle):
        self.pending.pop(handle, None)

    def advance(self, seconds: float):
        target = self.clock.now + timedelta(seconds=seconds)
        while True:
            due = [(when, h) for h, (when, _) in self.pending.items() if when <= target]
            if not due:
                break
            when, handle = min(due)
            _, callback = self.pending.pop(handle)
            self.clock.now = when
            callback()
        self.clock.now = target


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None, reason="", content_type="application/json"):
        self.status_code = status_code
        self.reason = reason
        self.headers = {"content-type": content_type} if content_type else {}
        if text is not None:
            self.text = text
        elif body is not None:
            self.text = json.dumps(body)
        else:
            self.text = ""
        self.content = self.text.encode("utf-8")

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Stands in for requests.Session: returns queued responses in order."""

    def __init__(self, *responses):
        self.headers = {}
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def request(self, method, url, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "json": json, "timeout": timeout})
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp

    def close(self):
        self.closed = True


def make_category(id, name=None, type=EXPENSE, is_default=False, is_deleted=False, created_at=None):
    return Category(
        id=id,
        name=name or f"Category {id}",
        type=type,
        is_default=is_default,
        is_deleted=is_deleted,
        created_at=created_at,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def notification_dao(store):
    return NotificationDAO(store)


@pytest.fixture
def notification_service(notification_dao, clock):
    return NotificationService(notification_dao, clock=clock)
