"""String key-value stores for client-side persisted state.

`MemoryStore` backs tests and throwaway sessions; `SettingsStore` persists to
the `app_settings` table of the local SQLite file.
"""
from typing import Optional

from database.db_manager import DatabaseManager


class KeyValueStore:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SettingsStore(KeyValueStore):
    def __init__(self, db: DatabaseManager):
        self._db = db

    def get(self, key: str) -> Optional[str]:
        if not self._db.has_setting(key):
            return None
        return self._db.get_setting(key)

    def set(self, key: str, value: str) -> None:
        self._db.set_setting(key, value)

    def remove(self, key: str) -> None:
        self._db.delete_setting(key)
