from datetime import datetime, timezone

import pytest

from conftest import FakeResponse, FakeSession
from database.api_client import ApiClient, ApiError
from database.category_dao import CategoryDAO
from database.transaction_dao import TransactionDAO


def _api(*responses):
    session = FakeSession(*responses)
    return ApiClient("http://api.test/api", session=session), session


def test_get_all_normalizes_payloads():
    api, session = _api(FakeResponse(200, [
        {"id": 1, "name": "Salary", "type": "income", "isDefault": True,
         "createdAt": "2024-02-01T10:00:00.123456789Z"},
        {"id": "2", "name": "Rent", "type": "EXPENSE", "is_deleted": "true", "color": "#ff0000"},
        {"name": "no id"},
    ]))
    cats = CategoryDAO(api).get_all(include_archived=True)

    assert session.calls[0]["url"].endswith("/categories/all")
    assert [c.id for c in cats] == [1, 2]
    salary, rent = cats
    assert salary.type == "INCOME"
    assert salary.is_default is True
    assert salary.color == "#6366f1"
    assert salary.created_at == datetime(2024, 2, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
    assert rent.is_deleted is True
    assert rent.created_at is None


def test_get_all_active_endpoint():
    api, session = _api(FakeResponse(200, []))
    assert CategoryDAO(api).get_all() == []
    assert session.calls[0]["url"].endswith("/categories")


def test_create_returns_model_or_none():
    api, session = _api(
        FakeResponse(201, {"id": 9, "name": "Food", "type": "EXPENSE"}),
        FakeResponse(201, content_type=None),
    )
    dao = CategoryDAO(api)
    created = dao.create("Food", "EXPENSE", "#3b82f6")
    assert created.id == 9
    assert session.calls[0]["json"] == {"name": "Food", "type": "EXPENSE", "color": "#3b82f6"}
    assert dao.create("Food", "EXPENSE", "#3b82f6") is None


def test_delete_accepts_empty_204():
    api, session = _api(FakeResponse(204, content_type=None))
    CategoryDAO(api).delete(4)
    assert session.calls[0]["method"] == "DELETE"
    assert session.calls[0]["url"].endswith("/categories/4")


def test_restore_posts():
    api, session = _api(FakeResponse(200, content_type=None))
    CategoryDAO(api).restore(4)
    assert session.calls[0]["method"] == "POST"
    assert session.calls[0]["url"].endswith("/categories/4/restore")


def test_transactions_category_reference_shapes():
    api, _ = _api(FakeResponse(200, [
        {"id": 1, "categoryId": 3, "type": "expense", "amount": "12.5", "transactionDate": "2024-02-01"},
        {"id": 2, "category": {"id": "4"}, "amount": 1},
        {"id": 3, "category_id": None},
        {"id": 4, "categoryId": "abc"},
        {"amount": 5},
    ]))
    txs = TransactionDAO(api).get_all()
    assert [t.category_id for t in txs] == [3, 4, None, None]
    assert txs[0].amount == 12.5
    assert txs[0].type == "EXPENSE"
    assert txs[0].date == "2024-02-01"


@pytest.mark.parametrize("body", [5, {"items": []}, "oops"])
def test_list_endpoints_reject_non_list_body(body):
    api, _ = _api(FakeResponse(200, body), FakeResponse(200, body))
    with pytest.raises(ApiError):
        CategoryDAO(api).get_all()
    with pytest.raises(ApiError):
        TransactionDAO(api).get_all()


def test_list_endpoints_empty_body():
    api, _ = _api(FakeResponse(200, content_type=None), FakeResponse(204, content_type=None))
    assert CategoryDAO(api).get_all() == []
    assert TransactionDAO(api).get_all() == []
