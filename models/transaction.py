from dataclasses import dataclass
from typing import Optional


@dataclass
class Transaction:
    id: int
    category_id: Optional[int]
    type: str               # 'INCOME' | 'EXPENSE'
    amount: float
    date: str               # 'YYYY-MM-DD'
    description: str = ""
