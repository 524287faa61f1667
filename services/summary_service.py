from collections import Counter
from dataclasses import dataclass

from models.category import Category
from models.transaction import Transaction
from utils.constants import EXPENSE, INCOME


@dataclass
class CategorySummary:
    total: int = 0
    income: int = 0
    expense: int = 0
    most_used_name: str = "None"
    most_used_count: int = 0
    most_used_id: int | None = None
    income_uses: int = 0
    expense_uses: int = 0


def usage_counts(transactions: list[Transaction]) -> dict[int, int]:
    """Transactions per category id; uncategorized transactions are skipped."""
    return dict(Counter(t.category_id for t in transactions if t.category_id is not None))


def summarize(categories: list[Category], usage: dict[int, int]) -> CategorySummary:
    """Summary card figures over non-archived categories."""
    active = [c for c in categories if not c.is_deleted]
    summary = CategorySummary(
        total=len(active),
        income=sum(1 for c in active if c.type == INCOME),
        expense=sum(1 for c in active if c.type == EXPENSE),
        income_uses=sum(usage.get(c.id, 0) for c in active if c.type == INCOME),
        expense_uses=sum(usage.get(c.id, 0) for c in active if c.type == EXPENSE),
    )
    best: Category | None = None
    best_count = 0
    for cat in active:
        count = usage.get(cat.id, 0)
        if count > best_count:
            best, best_count = cat, count
    if best is not None:
        summary.most_used_name = best.name
        summary.most_used_count = best_count
        summary.most_used_id = best.id
    return summary


def truncate_name(name: str, max_length: int = 6) -> str:
    """Short label for the summary card: first `max_length` chars + '..'."""
    if not name or name == "None" or len(name) <= max_length:
        return name
    return name[:max_length] + ".."
