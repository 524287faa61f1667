import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable

from database.notification_dao import NotificationDAO
from models.category import Category
from models.notification import Notification, NotificationId
from utils.constants import (
    EXPENSE, EXPENSE_IMBALANCE_RATIO, INCOME, NOTIFICATION_TYPES,
    POPULAR_USAGE_THRESHOLD, SEVERITY_ICONS,
)
from utils.date_helpers import format_timestamp, is_expired, parse_timestamp, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerivedRule:
    id: str
    title: str
    type: str
    offset: timedelta       # synthetic age; orders derived notices below fresh events


UNUSED_RULE = DerivedRule("unused-categories", "Unused Categories", "info", timedelta(hours=2))
POPULAR_RULE = DerivedRule("popular-categories", "Popular Categories", "info", timedelta(hours=4))
BALANCE_RULE = DerivedRule("category-balance", "Category Balance", "warning", timedelta(hours=20))

DERIVED_IDS = frozenset(r.id for r in (UNUSED_RULE, POPULAR_RULE, BALANCE_RULE))


class NotificationService:
    """Builds, persists and tracks read state of category notifications.

    Derived notifications are recomputed from category statistics on every
    load and keep stable ids; session notifications come from user actions
    and are stored with their real timestamp. Both expire after one day.
    """

    def __init__(self, dao: NotificationDAO, clock: Callable[[], datetime] = utc_now):
        self._dao = dao
        self._clock = clock
        self._notifications: list[Notification] = []

    # ── Generation ───────────────────────────────────────────────────────────

    def derive(self, categories: list[Category], usage: dict[int, int]) -> list[Notification]:
        """Rule-based notifications over non-archived categories."""
        now = self._clock()
        active = [c for c in categories if not c.is_deleted]
        result = []

        def make(rule: DerivedRule, message: str) -> Notification:
            return Notification(
                id=rule.id,
                title=rule.title,
                message=message,
                type=rule.type,
                timestamp=format_timestamp(now - rule.offset),
            )

        unused = [c for c in active if usage.get(c.id, 0) == 0]
        if unused:
            result.append(make(
                UNUSED_RULE,
                f"You have {len(unused)} categories that haven't been used yet",
            ))

        popular = [c for c in active if usage.get(c.id, 0) >= POPULAR_USAGE_THRESHOLD]
        if popular:
            result.append(make(
                POPULAR_RULE,
                f"{len(popular)} categories are heavily used - consider creating subcategories",
            ))

        income = sum(1 for c in active if c.type == INCOME)
        expense = sum(1 for c in active if c.type == EXPENSE)
        if expense > income * EXPENSE_IMBALANCE_RATIO:
            result.append(make(
                BALANCE_RULE,
                f"You have many more expense categories ({expense}) "
                f"than income categories ({income})",
            ))
        return result

    def generate(self, categories: list[Category], usage: dict[int, int]) -> list[Notification]:
        """Merge derived and stored notifications into the visible list.

        Deduplicated by id, expired entries dropped, newest first, read state
        resolved against the permanent read-id set.
        """
        now = self._clock()
        read_ids = set(self._dao.get_read_ids())

        merged: dict[NotificationId, Notification] = {}
        for n in self.derive(categories, usage) + self._dao.get_session():
            if n.id in merged or is_expired(n.timestamp, now):
                continue
            n.is_read = n.is_read or n.id in read_ids
            merged[n.id] = n

        self._notifications = _newest_first(merged.values())
        logger.info(
            "Generated %d notifications (%d unread)",
            len(self._notifications), self.unread_count(),
        )
        return list(self._notifications)

    # ── Session notifications ────────────────────────────────────────────────

    def add(self, title: str, message: str, type_: str = "info") -> Notification:
        if type_ not in NOTIFICATION_TYPES:
            type_ = "info"
        now = self._clock()
        notification = Notification(
            id=f"session-{uuid.uuid4().hex[:12]}",
            title=title,
            message=message,
            type=type_,
            timestamp=format_timestamp(now),
            is_read=False,
        )
        self._dao.prepend(notification, now)
        self._notifications.insert(0, notification)
        logger.info("Notification added: %s", title)
        return notification

    # ── Read state ───────────────────────────────────────────────────────────

    def mark_read(self, notification_id: NotificationId) -> bool:
        """Mark one notification read everywhere. Returns False if it already was."""
        changed = False
        for n in self._notifications:
            if n.id == notification_id and not n.is_read:
                n.is_read = True
                changed = True
        changed |= self._dao.add_read_ids([notification_id]) > 0
        changed |= self._dao.mark_session_read([notification_id]) > 0
        return changed

    def mark_all_read(self) -> int:
        """Mark every visible notification read. Returns how many were unread."""
        ids = [n.id for n in self._notifications]
        unread = 0
        for n in self._notifications:
            if not n.is_read:
                n.is_read = True
                unread += 1
        if ids:
            self._dao.add_read_ids(ids)
            self._dao.mark_session_read(ids)
        return unread

    # ── Queries / housekeeping ───────────────────────────────────────────────

    def visible(self) -> list[Notification]:
        return list(self._notifications)

    def unread_count(self) -> int:
        return sum(1 for n in self._notifications if not n.is_read)

    def timestamps(self) -> list[str]:
        return [n.timestamp for n in self._notifications]

    def prune_expired(self) -> int:
        """Drop in-memory notifications that crossed the one-day boundary."""
        now = self._clock()
        kept = [n for n in self._notifications if not is_expired(n.timestamp, now)]
        hidden = len(self._notifications) - len(kept)
        if hidden:
            self._notifications = kept
            logger.info("Hid %d expired notifications", hidden)
        return hidden

    def cleanup(self) -> int:
        """Startup purge of stored notifications and orphaned read ids."""
        removed = self._dao.purge_expired(self._clock())
        live = {n.id for n in self._dao.get_session()} | DERIVED_IDS
        read_ids = self._dao.get_read_ids()
        kept = [i for i in read_ids if i in live]
        if len(kept) != len(read_ids):
            self._dao.set_read_ids(kept)
        return removed

    @staticmethod
    def icon_for(type_: str) -> str:
        return SEVERITY_ICONS.get(type_, SEVERITY_ICONS["info"])


def _newest_first(notifications: Iterable[Notification]) -> list[Notification]:
    return sorted(
        notifications,
        key=lambda n: parse_timestamp(n.timestamp),
        reverse=True,
    )
