import json
import logging
from datetime import datetime
from typing import Iterable

from database.kv_store import KeyValueStore
from models.notification import Notification, NotificationId
from utils.constants import NOTIFICATIONS_KEY, READ_NOTIFICATION_IDS_KEY
from utils.date_helpers import is_expired

logger = logging.getLogger(__name__)


class NotificationDAO:
    """Persists session notifications and the permanent read-id set.

    Both records are JSON arrays in the key-value store. Corrupt or missing
    records read as empty; nothing here raises on bad stored data.
    """

    def __init__(self, store: KeyValueStore):
        self._store = store

    # ── Session notifications ────────────────────────────────────────────────

    def get_session(self) -> list[Notification]:
        """Stored session notifications, newest first as persisted."""
        result = []
        for item in self._load_list(NOTIFICATIONS_KEY):
            if not isinstance(item, dict):
                continue
            try:
                result.append(Notification.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed stored notification: %r", item)
        return result

    def save_session(self, notifications: Iterable[Notification]) -> None:
        self._save_list(NOTIFICATIONS_KEY, [n.to_dict() for n in notifications])

    def prepend(self, notification: Notification, now: datetime) -> list[Notification]:
        """Insert at the front and drop anything older than the retention window."""
        items = [notification] + self.get_session()
        kept = [n for n in items if not is_expired(n.timestamp, now)]
        self.save_session(kept)
        return kept

    def purge_expired(self, now: datetime) -> int:
        """Remove expired session notifications. Returns how many were dropped."""
        items = self.get_session()
        kept = [n for n in items if not is_expired(n.timestamp, now)]
        removed = len(items) - len(kept)
        if removed:
            self.save_session(kept)
            logger.info("Purged %d expired notifications, kept %d", removed, len(kept))
        return removed

    def mark_session_read(self, ids: Iterable[NotificationId]) -> int:
        """Flag matching session records as read. Returns how many changed."""
        wanted = set(ids)
        items = self.get_session()
        changed = 0
        for n in items:
            if n.id in wanted and not n.is_read:
                n.is_read = True
                changed += 1
        if changed:
            self.save_session(items)
        return changed

    # ── Read-id set ──────────────────────────────────────────────────────────

    def get_read_ids(self) -> list[NotificationId]:
        return [i for i in self._load_list(READ_NOTIFICATION_IDS_KEY)
                if isinstance(i, (str, int)) and not isinstance(i, bool)]

    def add_read_ids(self, ids: Iterable[NotificationId]) -> int:
        """Union ids into the read set. Returns how many were new."""
        current = self.get_read_ids()
        known = set(current)
        added = 0
        for i in ids:
            if i not in known:
                current.append(i)
                known.add(i)
                added += 1
        if added:
            self._save_list(READ_NOTIFICATION_IDS_KEY, current)
        return added

    def set_read_ids(self, ids: Iterable[NotificationId]) -> None:
        self._save_list(READ_NOTIFICATION_IDS_KEY, list(ids))

    # ── Internal helpers ─────────────────────────────────────────────────────

    def _load_list(self, key: str) -> list:
        raw = self._store.get(key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except (ValueError, TypeError):
            logger.warning("Stored value for %s is not valid JSON; treating as empty", key)
            return []
        if not isinstance(data, list):
            logger.warning("Stored value for %s is not a list; treating as empty", key)
            return []
        return data

    def _save_list(self, key: str, items: list) -> None:
        try:
            self._store.set(key, json.dumps(items, ensure_ascii=False))
        except Exception:
            # Store writes are best-effort; in-memory state stays authoritative
            logger.exception("Failed to persist %s", key)
