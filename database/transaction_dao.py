import logging
from typing import Optional

from database.api_client import ApiClient, ApiError
from models.transaction import Transaction

logger = logging.getLogger(__name__)


class TransactionDAO:
    """Read-only view of /transactions, used for category usage counts."""

    def __init__(self, api: ApiClient):
        self._api = api

    @staticmethod
    def _category_ref(data: dict) -> Optional[int]:
        ref = data.get("categoryId")
        if ref is None:
            ref = data.get("category_id")
        if ref is None and isinstance(data.get("category"), dict):
            ref = data["category"].get("id")
        if ref is None or ref == "":
            return None
        try:
            return int(ref)
        except (TypeError, ValueError):
            return None

    def _to_model(self, data: dict) -> Transaction:
        return Transaction(
            id=int(data["id"]),
            category_id=self._category_ref(data),
            type=str(data.get("type") or "").upper(),
            amount=float(data.get("amount") or 0),
            date=str(data.get("transactionDate") or data.get("date") or ""),
            description=str(data.get("description") or ""),
        )

    def get_all(self) -> list[Transaction]:
        payload = self._api.get("/transactions")
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ApiError("Unexpected response from server")
        result = []
        for item in payload:
            try:
                result.append(self._to_model(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed transaction payload: %r", item)
        return result
