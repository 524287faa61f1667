from conftest import make_category
from models.transaction import Transaction
from services.summary_service import CategorySummary, summarize, truncate_name, usage_counts
from utils.constants import EXPENSE, INCOME


def test_usage_counts_skips_uncategorized():
    txs = [
        Transaction(1, 4, EXPENSE, 1.0, "2024-01-01"),
        Transaction(2, 4, EXPENSE, 1.0, "2024-01-02"),
        Transaction(3, None, INCOME, 1.0, "2024-01-03"),
        Transaction(4, 7, INCOME, 1.0, "2024-01-04"),
    ]
    assert usage_counts(txs) == {4: 2, 7: 1}


def test_summarize_counts_active_only():
    cats = [
        make_category(1, "Salary", INCOME),
        make_category(2, "Groceries", EXPENSE),
        make_category(3, "Rent", EXPENSE),
        make_category(4, "Old", EXPENSE, is_deleted=True),
    ]
    s = summarize(cats, {1: 2, 2: 7, 3: 7, 4: 50})

    assert (s.total, s.income, s.expense) == (3, 1, 2)
    assert s.income_uses == 2
    assert s.expense_uses == 14
    # ties keep the first category seen
    assert (s.most_used_name, s.most_used_count, s.most_used_id) == ("Groceries", 7, 2)


def test_summarize_without_usage():
    s = summarize([make_category(1)], {})
    assert s == CategorySummary(total=1, expense=1)
    assert s.most_used_name == "None"


def test_truncate_name():
    assert truncate_name("Groceries") == "Grocer.."
    assert truncate_name("Rent") == "Rent"
    assert truncate_name("Salary") == "Salary"
    assert truncate_name("None") == "None"
