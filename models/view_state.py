from dataclasses import dataclass, field

from models.category import Category
from utils.constants import PAGE_SIZE


@dataclass(frozen=True)
class FilterConfig:
    type: str = "all"           # 'all' | 'INCOME' | 'EXPENSE'
    usage: str = "all"          # 'all' | 'active' | 'unused' | 'frequent'
    origin: str = "all"         # 'all' | 'default' | 'custom'
    search: str = ""
    sort: str = "newest"        # see SORT_OPTIONS
    show_archived: bool = False


@dataclass
class PaginationState:
    current_page: int = 1
    page_size: int = PAGE_SIZE
    total_pages: int = 0
    total_items: int = 0


@dataclass
class ViewResult:
    page: list[Category] = field(default_factory=list)
    pagination: PaginationState = field(default_factory=PaginationState)
    filtered: list[Category] = field(default_factory=list)
