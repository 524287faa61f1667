import logging
from dataclasses import dataclass, field

from database.api_client import ApiError
from database.category_dao import CategoryDAO
from database.transaction_dao import TransactionDAO
from models.category import Category
from models.notification import Notification
from models.transaction import Transaction
from services.notification_service import NotificationService
from services.summary_service import CategorySummary, summarize, usage_counts

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything one full refresh produced. Sources that failed are empty."""
    categories: list[Category] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    usage: dict[int, int] = field(default_factory=dict)
    summary: CategorySummary = field(default_factory=CategorySummary)
    notifications: list[Notification] = field(default_factory=list)
    failed_sources: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_sources


class DataService:
    """Reloads categories, transactions and notifications in one pass.

    Each source is isolated: a failure is logged, recorded on the state and
    replaced by an empty result so the others still render.
    """

    def __init__(
        self,
        category_dao: CategoryDAO,
        transaction_dao: TransactionDAO,
        notification_service: NotificationService,
    ):
        self._categories = category_dao
        self._transactions = transaction_dao
        self._notifications = notification_service

    def refresh_all(self, show_archived: bool = False) -> AppState:
        state = AppState()

        try:
            state.categories = self._categories.get_all(include_archived=show_archived)
        except ApiError as e:
            logger.warning("Categories refresh failed: %s", e)
            state.failed_sources.append("categories")
        except Exception:
            logger.exception("Categories refresh failed")
            state.failed_sources.append("categories")

        try:
            state.transactions = self._transactions.get_all()
        except ApiError as e:
            logger.warning("Transactions refresh failed: %s", e)
            state.failed_sources.append("transactions")
        except Exception:
            logger.exception("Transactions refresh failed")
            state.failed_sources.append("transactions")

        state.usage = usage_counts(state.transactions)
        state.summary = summarize(state.categories, state.usage)

        try:
            state.notifications = self._notifications.generate(state.categories, state.usage)
        except Exception:
            logger.exception("Notifications refresh failed")
            state.failed_sources.append("notifications")

        logger.info(
            "Refresh finished: %d categories, %d transactions, %d notifications%s",
            len(state.categories), len(state.transactions), len(state.notifications),
            f" (failed: {', '.join(state.failed_sources)})" if state.failed_sources else "",
        )
        return state
