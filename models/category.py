from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    type: str               # 'INCOME' | 'EXPENSE'
    color: str = "#6366f1"
    is_default: bool = False
    is_deleted: bool = False
    created_at: Optional[datetime] = None
