import logging
from typing import Optional

from database.api_client import ApiClient, ApiError
from models.category import Category
from utils.date_helpers import parse_timestamp

logger = logging.getLogger(__name__)


def _first(data: dict, *keys, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _to_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


class CategoryDAO:
    """Category endpoints of the backend REST API."""

    def __init__(self, api: ApiClient):
        self._api = api

    def _to_model(self, data: dict) -> Category:
        return Category(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            type=str(data.get("type") or "EXPENSE").upper(),
            color=str(data.get("color") or "#6366f1"),
            is_default=_to_bool(_first(data, "isDefault", "is_default", default=False)),
            is_deleted=_to_bool(_first(data, "isDeleted", "is_deleted", "deleted", default=False)),
            created_at=parse_timestamp(_first(data, "createdAt", "created_at")),
        )

    def _to_models(self, payload) -> list[Category]:
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ApiError("Unexpected response from server")
        result = []
        for item in payload:
            try:
                result.append(self._to_model(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed category payload: %r", item)
        return result

    def get_all(self, include_archived: bool = False) -> list[Category]:
        """Active categories, or active + archived when include_archived."""
        path = "/categories/all" if include_archived else "/categories"
        return self._to_models(self._api.get(path))

    def get_by_id(self, category_id: int) -> Optional[Category]:
        data = self._api.get(f"/categories/{category_id}")
        return self._to_model(data) if data else None

    def create(self, name: str, type_: str, color: str) -> Optional[Category]:
        data = self._api.post("/categories", {"name": name, "type": type_, "color": color})
        return self._to_model(data) if isinstance(data, dict) and "id" in data else None

    def update(self, category_id: int, name: str, type_: str, color: str) -> Optional[Category]:
        data = self._api.put(
            f"/categories/{category_id}",
            {"name": name, "type": type_, "color": color},
        )
        return self._to_model(data) if isinstance(data, dict) and "id" in data else None

    def delete(self, category_id: int) -> None:
        """Soft-delete (archive). Any 2xx is success, body may be empty."""
        self._api.delete(f"/categories/{category_id}")

    def restore(self, category_id: int) -> None:
        self._api.post(f"/categories/{category_id}/restore")
