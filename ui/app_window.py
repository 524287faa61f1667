import logging
import threading

import customtkinter as ctk

from database.api_client import ApiError
from database.db_manager import DatabaseManager
from models.category import Category
from services.category_service import CategoryService, CategoryStateError, ValidationError
from services.category_view import CategoryBrowser
from services.data_service import AppState, DataService
from services.notification_service import NotificationService
from services.smart_time import SmartTimeRefresher
from ui.components.alert_banner import AlertBanner
from ui.components.archive_dialog import ArchiveDialog
from ui.components.category_form import CategoryForm
from ui.components.filter_panel import FilterPanel
from ui.tabs.categories_tab import CategoriesTab
from ui.tabs.notifications_tab import NotificationsTab
from utils.constants import APP_HEIGHT, APP_NAME, APP_WIDTH
from utils.scheduling import TkScheduler

logger = logging.getLogger(__name__)

_SOURCE_ERRORS = {
    "categories": ("Failed to load categories. Please check your connection and try again.", "error"),
    "transactions": ("Failed to load transaction data for statistics.", "warning"),
    "notifications": ("Failed to load notifications.", "warning"),
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        category_service: CategoryService,
        notification_service: NotificationService,
        data_service: DataService,
        browser: CategoryBrowser,
        db: DatabaseManager | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._cat_svc = category_service
        self._notif_svc = notification_service
        self._data_svc = data_service
        self._browser = browser
        self._db = db
        self._usage: dict[int, int] = {}
        self._load_gen = 0

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_header()
        self._build_banner_area()
        self._build_tabs()

        self._refresher = SmartTimeRefresher(
            TkScheduler(self),
            get_timestamps=self._notif_svc.timestamps,
            on_refresh=self._on_time_tick,
        )

        self.bind("<Unmap>", self._on_unmap)
        self.bind("<Map>", self._on_map)
        self.protocol("WM_DELETE_WINDOW", self._on_close)

        self._categories_tab.render()
        self.after(100, self.refresh_data)

    # ── Layout ───────────────────────────────────────────────────────────────

    def _build_header(self):
        bar = ctk.CTkFrame(self, fg_color=("gray85", "gray15"), corner_radius=0, height=44)
        bar.grid(row=0, column=0, sticky="ew")
        bar.grid_propagate(False)

        ctk.CTkLabel(bar, text="Categories", font=ctk.CTkFont(size=16, weight="bold")).pack(
            side="left", padx=(12, 4), pady=8
        )

        self._bell_btn = ctk.CTkButton(
            bar, text="🔔", width=70,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda: self._tabview.set("Notifications"),
        )
        self._bell_btn.pack(side="right", padx=(4, 12))

        self._refresh_btn = ctk.CTkButton(bar, text="Refresh", width=90, command=self.refresh_data)
        self._refresh_btn.pack(side="right", padx=4)

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=1, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Categories", "Notifications"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._categories_tab = CategoriesTab(
            self._tabview.tab("Categories"),
            browser=self._browser,
            on_add=self._open_add,
            on_quick_add=self._quick_add,
            on_edit=self._open_edit,
            on_archive=self._archive,
            on_restore=self._restore,
            on_filters=self._open_filters,
            on_clear_filters=self._clear_filters,
            on_toggle_archived=self._toggle_archived,
        )
        self._categories_tab.grid(row=0, column=0, sticky="nsew")

        self._notifications_tab = NotificationsTab(
            self._tabview.tab("Notifications"),
            notification_service=self._notif_svc,
            on_change=self._update_bell,
        )
        self._notifications_tab.grid(row=0, column=0, sticky="nsew")

    # ── Data loading ─────────────────────────────────────────────────────────

    def refresh_data(self):
        """Reload every source on a worker thread; only the newest load renders."""
        self._load_gen += 1
        gen = self._load_gen
        show_archived = self._browser.config.show_archived
        self._refresh_btn.configure(state="disabled", text="Loading...")

        def fetch():
            try:
                state = self._data_svc.refresh_all(show_archived=show_archived)
            except Exception:
                logger.exception("Refresh failed")
                state = AppState(failed_sources=list(_SOURCE_ERRORS))
            self.after(0, lambda: self._on_data_ready(gen, state))

        threading.Thread(target=fetch, daemon=True).start()

    def _on_data_ready(self, gen: int, state: AppState):
        if gen != self._load_gen:
            return  # superseded by a newer load
        if not self.winfo_exists():
            return
        self._refresh_btn.configure(state="normal", text="Refresh")

        self._usage = state.usage
        self._browser.load(state.categories, state.usage)
        self._categories_tab.render(state.summary, state.usage)
        self._notifications_tab.render()
        self._update_bell()

        for source in state.failed_sources:
            message, severity = _SOURCE_ERRORS.get(source, (f"Failed to load {source}.", "warning"))
            self._show_banner(message, severity, timeout_ms=None,
                              action_text="Retry", action_cmd=self.refresh_data)

        if self._refresher.is_running:
            self._refresher.reschedule()
        else:
            self._refresher.start()

    def _reload_after_write(self, message: str):
        self._show_banner(message, "success")
        self.refresh_data()

    # ── Category actions ─────────────────────────────────────────────────────

    def _open_add(self):
        form = CategoryForm(self, self._cat_svc, existing=self._browser.categories)
        self.wait_window(form)
        if form.saved:
            self._reload_after_write("Category created successfully")

    def _open_edit(self, category: Category):
        form = CategoryForm(self, self._cat_svc, category=category, existing=self._browser.categories)
        self.wait_window(form)
        if form.saved:
            self._reload_after_write("Category updated successfully")

    def _quick_add(self, name: str, type_: str) -> bool:
        try:
            self._cat_svc.validate(name, type_, existing=self._browser.categories)
            self._cat_svc.quick_create(name, type_)
        except ValidationError as e:
            self._show_banner(str(e), "warning")
            return False
        except ApiError as e:
            logger.warning("Quick add failed: %s", e)
            self._show_banner(str(e), "error", timeout_ms=None)
            return False
        self._reload_after_write("Category created successfully")
        return True

    def _archive(self, category: Category):
        try:
            fresh = self._cat_svc.check_archivable(category.id)
        except CategoryStateError as e:
            self._show_banner(str(e), e.severity)
            return
        except ApiError as e:
            self._show_banner(str(e), "error", timeout_ms=None)
            return

        dialog = ArchiveDialog(self, fresh, usage_count=self._usage.get(fresh.id, 0))
        if not dialog.result:
            return
        try:
            self._cat_svc.archive(fresh)
        except CategoryStateError as e:
            self._show_banner(str(e), e.severity)
            self.refresh_data()
            return
        except ApiError as e:
            logger.warning("Archive of category %s failed: %s", fresh.id, e)
            self._show_banner(str(e), "error", timeout_ms=None)
            return
        self._reload_after_write("Category archived successfully")

    def _restore(self, category: Category):
        try:
            self._cat_svc.restore(category.id)
        except CategoryStateError as e:
            self._show_banner(str(e), e.severity)
            self.refresh_data()
            return
        except ApiError as e:
            logger.warning("Restore of category %s failed: %s", category.id, e)
            self._show_banner(str(e), "error", timeout_ms=None)
            return
        self._reload_after_write("Category restored successfully")

    # ── Filters ──────────────────────────────────────────────────────────────

    def _open_filters(self):
        panel = FilterPanel(self, self._browser.config)
        self.wait_window(panel)
        if panel.cleared:
            self._browser.clear_filters()
        elif panel.result is not None:
            self._browser.apply_filters(**panel.result)
        else:
            return
        self._categories_tab.render()

    def _clear_filters(self):
        self._browser.clear_filters()
        self._categories_tab.render()

    def _toggle_archived(self):
        self._browser.toggle_archived()
        show = self._browser.config.show_archived
        if self._db:
            self._db.set_setting("show_archived", "1" if show else "0")
        self._categories_tab.render()
        # archived categories are only fetched when asked for
        self.refresh_data()

    # ── Notifications ────────────────────────────────────────────────────────

    def _on_time_tick(self):
        hidden = self._notif_svc.prune_expired()
        self._notifications_tab.refresh_labels()
        if hidden:
            self._update_bell()

    def _update_bell(self):
        unread = self._notif_svc.unread_count()
        self._bell_btn.configure(
            text=f"🔔 {unread}" if unread else "🔔",
            fg_color="#F44336" if unread else "transparent",
        )

    # ── Visibility / lifecycle ───────────────────────────────────────────────

    def _on_unmap(self, event):
        if event.widget is self:
            self._refresher.pause()

    def _on_map(self, event):
        if event.widget is self and not self._refresher.is_running:
            self._refresher.resume()

    def _on_close(self):
        self._refresher.stop()
        self._load_gen += 1
        self.destroy()

    # ── Banners ──────────────────────────────────────────────────────────────

    def _show_banner(self, message: str, severity: str = "info", **kwargs):
        for w in self._banner_frame.winfo_children():
            w.destroy()
        AlertBanner(self._banner_frame, message=message, severity=severity, **kwargs).pack(
            fill="x", pady=2
        )
