"""Filter, sort and paginate the category list.

`apply_view` is a pure function over a snapshot of categories and usage
counts. `CategoryBrowser` keeps the filter configuration and current page
for one session and recomputes the view on every change.
"""
import locale
import logging
import math
from dataclasses import replace
from datetime import datetime, timezone

from models.category import Category
from models.view_state import FilterConfig, PaginationState, ViewResult
from utils.constants import FREQUENT_USAGE_THRESHOLD, INCOME, PAGE_SIZE

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)

_FILTER_FIELDS = ("type", "usage", "origin", "search", "sort")


# ── Search ───────────────────────────────────────────────────────────────────

def normalize_search(text: str) -> str:
    """Lowercase, trim and collapse whitespace. Non-Latin letters are kept as-is."""
    if not text:
        return ""
    return " ".join(text.lower().split())


def clean_search(text: str) -> str:
    """Trim and collapse whitespace, keeping case. Blank input becomes ''."""
    return " ".join((text or "").split())


def matches_search(name: str, search: str) -> bool:
    """Substring match first, then every search word inside some name word."""
    text = normalize_search(name)
    term = normalize_search(search)
    if not text or not term:
        return False
    if term in text:
        return True
    text_words = text.split(" ")
    return all(any(sw in tw for tw in text_words) for sw in term.split(" "))


# ── Stages ───────────────────────────────────────────────────────────────────

def partition_archived(categories: list[Category], show_archived: bool) -> list[Category]:
    return [c for c in categories if bool(c.is_deleted) == show_archived]


def _usage_ok(count: int, usage: str) -> bool:
    if usage == "active":
        return count > 0
    if usage == "unused":
        return count == 0
    if usage == "frequent":
        return count >= FREQUENT_USAGE_THRESHOLD
    return True


def _origin_ok(cat: Category, origin: str) -> bool:
    if origin == "default":
        return cat.is_default is True
    if origin == "custom":
        return cat.is_default is not True
    return True


def _name_key(name: str):
    folded = (name or "").casefold()
    try:
        return (locale.strxfrm(folded), name or "")
    except (ValueError, OSError):
        return (folded, name or "")


def _created_key(cat: Category) -> datetime:
    return cat.created_at or _OLDEST


def sort_categories(
    categories: list[Category],
    usage_counts: dict[int, int],
    sort: str,
) -> list[Category]:
    if sort == "name":
        return sorted(categories, key=lambda c: _name_key(c.name))
    if sort == "name_desc":
        return sorted(categories, key=lambda c: _name_key(c.name), reverse=True)
    if sort == "usage":
        return sorted(categories, key=lambda c: usage_counts.get(c.id, 0), reverse=True)
    if sort == "oldest":
        return sorted(categories, key=_created_key)
    if sort == "type":
        return sorted(categories, key=lambda c: (0 if c.type == INCOME else 1, _name_key(c.name)))
    # 'newest' and anything unknown
    return sorted(categories, key=_created_key, reverse=True)


def filter_categories(
    categories: list[Category],
    usage_counts: dict[int, int],
    config: FilterConfig,
) -> list[Category]:
    """Archive partition, type, usage, origin, search, then sort. Order matters."""
    result = partition_archived(categories, config.show_archived)
    if config.type != "all":
        result = [c for c in result if c.type == config.type]
    if config.usage != "all":
        result = [c for c in result if _usage_ok(usage_counts.get(c.id, 0), config.usage)]
    if config.origin != "all":
        result = [c for c in result if _origin_ok(c, config.origin)]
    if config.search:
        result = [c for c in result if matches_search(c.name, config.search)]
    return sort_categories(result, usage_counts, config.sort)


def paginate(items: list, current_page: int, page_size: int = PAGE_SIZE) -> tuple[list, PaginationState]:
    total = len(items)
    total_pages = math.ceil(total / page_size)
    if current_page > total_pages and total_pages > 0:
        current_page = 1
    start = (current_page - 1) * page_size
    page = items[start:start + page_size] if total_pages > 0 else []
    return page, PaginationState(
        current_page=current_page,
        page_size=page_size,
        total_pages=total_pages,
        total_items=total,
    )


def apply_view(
    categories: list[Category],
    usage_counts: dict[int, int],
    config: FilterConfig,
    current_page: int = 1,
    page_size: int = PAGE_SIZE,
) -> ViewResult:
    filtered = filter_categories(categories, usage_counts, config)
    page, pagination = paginate(filtered, current_page, page_size)
    return ViewResult(page=page, pagination=pagination, filtered=filtered)


# ── Session state ────────────────────────────────────────────────────────────

class CategoryBrowser:
    """Filter configuration + current page over the latest category snapshot."""

    def __init__(self, config: FilterConfig | None = None, page_size: int = PAGE_SIZE):
        self._config = config or FilterConfig()
        self._page_size = page_size
        self._current_page = 1
        self._categories: list[Category] = []
        self._usage: dict[int, int] = {}
        self._result = ViewResult(pagination=PaginationState(page_size=page_size))

    @property
    def config(self) -> FilterConfig:
        return self._config

    @property
    def pagination(self) -> PaginationState:
        return self._result.pagination

    @property
    def categories(self) -> list[Category]:
        return list(self._categories)

    def load(self, categories: list[Category], usage_counts: dict[int, int]) -> ViewResult:
        """New data snapshot; the page is kept unless it no longer exists."""
        self._categories = list(categories)
        self._usage = dict(usage_counts)
        return self._recompute()

    def current_page_items(self) -> list[Category]:
        return list(self._result.page)

    # ── Filter changes ───────────────────────────────────────────────────────

    def set_filter(self, **changes) -> ViewResult:
        unknown = set(changes) - set(_FILTER_FIELDS) - {"show_archived"}
        if unknown:
            raise ValueError(f"Unknown filter field(s): {', '.join(sorted(unknown))}")
        if "search" in changes:
            changes["search"] = clean_search(changes["search"])
        self._config = replace(self._config, **changes)
        self._current_page = 1
        return self._recompute()

    def apply_filters(
        self,
        type: str = "all",
        usage: str = "all",
        origin: str = "all",
        search: str = "",
        sort: str = "newest",
    ) -> ViewResult:
        """Replace the five panel fields at once; the archived view is kept."""
        self._config = FilterConfig(
            type=type or "all",
            usage=usage or "all",
            origin=origin or "all",
            search=clean_search(search),
            sort=sort or "newest",
            show_archived=self._config.show_archived,
        )
        self._current_page = 1
        return self._recompute()

    def clear_filters(self) -> ViewResult:
        self._config = FilterConfig(show_archived=self._config.show_archived)
        self._current_page = 1
        return self._recompute()

    def set_show_archived(self, show_archived: bool) -> ViewResult:
        self._config = replace(self._config, show_archived=bool(show_archived))
        self._current_page = 1
        return self._recompute()

    def toggle_archived(self) -> ViewResult:
        return self.set_show_archived(not self._config.show_archived)

    # ── Paging ───────────────────────────────────────────────────────────────

    def go_to_page(self, page: int) -> bool:
        """Move to `page`. Out-of-range pages leave the state untouched."""
        if page < 1 or page > self._result.pagination.total_pages:
            logger.debug("Ignoring page %s (valid 1-%s)", page, self._result.pagination.total_pages)
            return False
        self._current_page = page
        self._recompute()
        return True

    def next_page(self) -> bool:
        return self.go_to_page(self._current_page + 1)

    def previous_page(self) -> bool:
        return self.go_to_page(self._current_page - 1)

    # ── Descriptions ─────────────────────────────────────────────────────────

    def active_filter_count(self) -> int:
        c = self._config
        return sum([c.type != "all", c.usage != "all", c.origin != "all", bool(c.search)])

    def active_filters_text(self) -> str:
        c = self._config
        parts = []
        if c.type != "all":
            parts.append(f"Type: {c.type}")
        if c.usage != "all":
            parts.append(f"Usage: {c.usage}")
        if c.origin != "all":
            parts.append(f"Origin: {c.origin}")
        if c.search:
            parts.append(f'Search: "{c.search}"')
        if c.sort != "newest":
            parts.append(f"Sort: {c.sort}")
        return f"Active filters: {', '.join(parts)}" if parts else ""

    def empty_state(self) -> tuple[str, str]:
        """(title, message) shown when the current view has no rows."""
        if self.active_filter_count() > 0:
            in_mode = partition_archived(self._categories, self._config.show_archived)
            mode = "archived categories" if self._config.show_archived else "categories"
            return (
                "No categories match your filters",
                f"Found 0 of {len(in_mode)} {mode}. Try adjusting your search "
                f"criteria or clear filters to see all {mode}.",
            )
        if self._config.show_archived:
            return ("No archived categories", "Archived categories will appear here.")
        return (
            "No categories yet",
            "Create your first category to start organizing your transactions.",
        )

    def _recompute(self) -> ViewResult:
        self._result = apply_view(
            self._categories, self._usage, self._config,
            self._current_page, self._page_size,
        )
        self._current_page = self._result.pagination.current_page
        return self._result
