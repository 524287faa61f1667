import logging
from typing import Optional

from database.api_client import NotFoundError
from database.category_dao import CategoryDAO
from models.category import Category
from services.notification_service import NotificationService
from utils.constants import (
    CATEGORY_NAME_MAX_LENGTH, CATEGORY_TYPES, DEFAULT_CATEGORY_COLOR, QUICK_CATEGORY_COLORS,
)

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Bad user input. `field` names the form field the message belongs to."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class CategoryStateError(ValueError):
    """The category cannot take the requested action in its current state.

    `severity` is 'warning' for protected defaults and 'info' when the action
    is already done; neither is a hard failure.
    """

    def __init__(self, message: str, severity: str = "warning"):
        super().__init__(message)
        self.severity = severity


class CategoryService:
    def __init__(self, category_dao: CategoryDAO, notification_service: NotificationService | None = None):
        self._dao = category_dao
        self._notifications = notification_service

    def get_all(self, include_archived: bool = False) -> list[Category]:
        return self._dao.get_all(include_archived)

    def get(self, category_id: int) -> Optional[Category]:
        return self._dao.get_by_id(category_id)

    # ── Validation ───────────────────────────────────────────────────────────

    def validate(
        self,
        name: str,
        type_: str,
        exclude_id: int | None = None,
        existing: list[Category] | None = None,
    ) -> str:
        """Return the cleaned name or raise ValidationError."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("name", "Category name is required")
        if len(name) > CATEGORY_NAME_MAX_LENGTH:
            raise ValidationError(
                "name", f"Category name must not exceed {CATEGORY_NAME_MAX_LENGTH} characters"
            )
        if type_ not in CATEGORY_TYPES:
            raise ValidationError("type", "Category type must be INCOME or EXPENSE")

        if existing is None:
            existing = self._dao.get_all()
        lowered = name.lower()
        for cat in existing:
            if (
                cat.name.strip().lower() == lowered
                and cat.type == type_
                and cat.id != exclude_id
                and not cat.is_deleted
            ):
                raise ValidationError("name", "A category with this name already exists for this type")
        return name

    # ── Writes ───────────────────────────────────────────────────────────────

    def create(self, name: str, type_: str, color: str | None = None) -> Optional[Category]:
        name = self.validate(name, type_)
        created = self._dao.create(name, type_, color or DEFAULT_CATEGORY_COLOR)
        logger.info("Created category %r (%s)", name, type_)
        self._notify("New Category Created", f"{name} category has been created", "success")
        return created

    def quick_create(self, name: str, type_: str) -> Optional[Category]:
        name = self.validate(name, type_)
        created = self._dao.create(name, type_, QUICK_CATEGORY_COLORS.get(type_, DEFAULT_CATEGORY_COLOR))
        logger.info("Quick-created category %r (%s)", name, type_)
        self._notify("Quick Category Created", f"{name} category has been created", "success")
        return created

    def update(self, category_id: int, name: str, type_: str, color: str | None = None) -> Optional[Category]:
        name = self.validate(name, type_, exclude_id=category_id)
        updated = self._dao.update(category_id, name, type_, color or DEFAULT_CATEGORY_COLOR)
        logger.info("Updated category %s -> %r", category_id, name)
        self._notify("Category Updated", f"{name} category has been updated", "info")
        return updated

    def check_archivable(self, category_id: int) -> Category:
        """Load a category and confirm it may be archived."""
        try:
            cat = self._dao.get_by_id(category_id)
        except NotFoundError:
            cat = None
        if cat is None:
            raise CategoryStateError("Category not found.", "info")
        if cat.is_default:
            raise CategoryStateError(
                "Cannot archive default categories. They are protected system categories.",
                "warning",
            )
        if cat.is_deleted:
            raise CategoryStateError("Category is already archived.", "info")
        return cat

    def archive(self, category: Category) -> None:
        if category.is_default:
            raise CategoryStateError(
                "Cannot archive default categories. They are protected system categories.",
                "warning",
            )
        try:
            self._dao.delete(category.id)
        except NotFoundError as e:
            raise CategoryStateError("Category not found. It may have been deleted.", "info") from e
        logger.info("Archived category %s (%r)", category.id, category.name)
        self._notify("Category Archived", f"{category.name} has been archived", "warning")

    def restore(self, category_id: int) -> None:
        try:
            self._dao.restore(category_id)
        except NotFoundError as e:
            raise CategoryStateError("Category not found. It may have been deleted.", "info") from e
        logger.info("Restored category %s", category_id)
        self._notify("Category Restored", "Category has been restored and is now active", "success")

    def _notify(self, title: str, message: str, type_: str) -> None:
        if self._notifications is None:
            return
        try:
            self._notifications.add(title, message, type_)
        except Exception:
            logger.exception("Could not record notification %r", title)
