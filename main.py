import locale
import logging
import os
import sys

import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.api_client import ApiClient
from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.kv_store import SettingsStore
from database.notification_dao import NotificationDAO
from database.transaction_dao import TransactionDAO

from models.view_state import FilterConfig
from services.category_service import CategoryService
from services.category_view import CategoryBrowser
from services.data_service import DataService
from services.notification_service import NotificationService

from ui.app_window import AppWindow
from utils.app_config import get_api_base_url, get_db_folder, get_log_level, get_request_timeout

logger = logging.getLogger(__name__)


def main():
    # ── Logging ──────────────────────────────────────────────────────────────
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # name sorting follows the user's collation
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning("System locale unavailable; sorting names by code point")

    # ── Local storage ────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=get_db_folder())
    notification_dao = NotificationDAO(SettingsStore(db))

    # ── REST backend ─────────────────────────────────────────────────────────
    api = ApiClient(get_api_base_url(), timeout=get_request_timeout())
    logger.info("Using API at %s", api.base_url)
    category_dao = CategoryDAO(api)
    tx_dao = TransactionDAO(api)

    # ── Services ─────────────────────────────────────────────────────────────
    notification_svc = NotificationService(notification_dao)
    removed = notification_svc.cleanup()
    if removed:
        logger.info("Removed %d expired notifications", removed)
    category_svc = CategoryService(category_dao, notification_svc)
    data_svc = DataService(category_dao, tx_dao, notification_svc)

    browser = CategoryBrowser(
        FilterConfig(show_archived=db.get_setting("show_archived", "0") == "1")
    )

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        category_service=category_svc,
        notification_service=notification_svc,
        data_service=data_svc,
        browser=browser,
        db=db,
    )
    try:
        app.mainloop()
    finally:
        api.close()
        db.close()


if __name__ == "__main__":
    main()
