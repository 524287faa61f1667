from conftest import FakeResponse, FakeSession, make_category
from database.api_client import ApiClient, NetworkError
from database.category_dao import CategoryDAO
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from services.data_service import DataService
from utils.constants import EXPENSE, INCOME


class StubCategoryDAO:
    def __init__(self, categories=None, error=None):
        self.categories = categories or []
        self.error = error
        self.include_archived = None

    def get_all(self, include_archived=False):
        self.include_archived = include_archived
        if self.error:
            raise self.error
        return self.categories


class StubTransactionDAO:
    def __init__(self, transactions=None, error=None):
        self.transactions = transactions or []
        self.error = error

    def get_all(self):
        if self.error:
            raise self.error
        return self.transactions


def _tx(id, category_id):
    return Transaction(id=id, category_id=category_id, type=EXPENSE, amount=10.0, date="2024-03-01")


CATS = [make_category(1, "Salary", INCOME), make_category(2, "Rent"), make_category(3, "Food")]


def test_refresh_all(notification_service):
    cat_dao = StubCategoryDAO(CATS)
    svc = DataService(cat_dao, StubTransactionDAO([_tx(1, 2), _tx(2, 2), _tx(3, None)]), notification_service)

    state = svc.refresh_all(show_archived=True)

    assert state.ok
    assert cat_dao.include_archived is True
    assert state.usage == {2: 2}
    assert state.summary.total == 3
    assert state.summary.most_used_name == "Rent"
    assert {n.id for n in state.notifications} == {"unused-categories"}


def test_transaction_failure_keeps_categories(notification_service):
    svc = DataService(
        StubCategoryDAO(CATS), StubTransactionDAO(error=NetworkError()), notification_service,
    )
    state = svc.refresh_all()

    assert state.failed_sources == ["transactions"]
    assert len(state.categories) == 3
    assert state.usage == {}
    assert state.summary.expense == 2


def test_category_failure_keeps_notifications(notification_service):
    notification_service.add("Category Updated", "Rent category has been updated")
    svc = DataService(
        StubCategoryDAO(error=NetworkError()), StubTransactionDAO([_tx(1, 2)]), notification_service,
    )
    state = svc.refresh_all()

    assert state.failed_sources == ["categories"]
    assert not state.ok
    assert state.categories == []
    assert len(state.transactions) == 1
    assert [n.title for n in state.notifications] == ["Category Updated"]


def test_notification_failure_is_isolated(notification_service, monkeypatch):
    def broken(*_args):
        raise RuntimeError("boom")

    monkeypatch.setattr(notification_service, "generate", broken)
    svc = DataService(StubCategoryDAO(CATS), StubTransactionDAO(), notification_service)
    state = svc.refresh_all()

    assert state.failed_sources == ["notifications"]
    assert len(state.categories) == 3


def test_unexpected_category_body_is_isolated(notification_service):
    session = FakeSession(FakeResponse(200, 5), FakeResponse(200, [{"id": 1, "categoryId": 2}]))
    api = ApiClient("http://api.test/api", session=session)
    svc = DataService(CategoryDAO(api), TransactionDAO(api), notification_service)

    state = svc.refresh_all()

    assert state.failed_sources == ["categories"]
    assert state.categories == []
    assert state.usage == {2: 1}


def test_unexpected_error_is_isolated(notification_service):
    svc = DataService(
        StubCategoryDAO(CATS), StubTransactionDAO(error=TypeError("bad row")), notification_service,
    )
    state = svc.refresh_all()

    assert state.failed_sources == ["transactions"]
    assert len(state.categories) == 3
