import customtkinter as ctk

from models.category import Category
from services.category_view import CategoryBrowser
from services.summary_service import CategorySummary, truncate_name
from utils.constants import CATEGORY_TYPES, EXPENSE, TYPE_COLORS
from utils.date_helpers import format_display_datetime


class CategoriesTab(ctk.CTkFrame):
    """Summary cards, toolbar, one page of categories and the pager.

    Holds no data of its own: every render reads from the CategoryBrowser.
    User actions are forwarded to the callbacks supplied by the window.
    """

    def __init__(
        self,
        master,
        browser: CategoryBrowser,
        on_add,
        on_quick_add,
        on_edit,
        on_archive,
        on_restore,
        on_filters,
        on_clear_filters,
        on_toggle_archived,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._browser = browser
        self._on_add = on_add
        self._on_quick_add = on_quick_add
        self._on_edit = on_edit
        self._on_archive = on_archive
        self._on_restore = on_restore
        self._on_filters = on_filters
        self._on_clear_filters = on_clear_filters
        self._on_toggle_archived = on_toggle_archived
        self._usage: dict[int, int] = {}

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._build_summary()
        self._build_toolbar()
        self._build_mode_bar()
        self._build_list()
        self._build_pager()

    # ── Layout ───────────────────────────────────────────────────────────────

    def _build_summary(self):
        cards = ctk.CTkFrame(self, fg_color="transparent")
        cards.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        self._card_labels: dict[str, tuple[ctk.CTkLabel, ctk.CTkLabel]] = {}
        for col, (key, title) in enumerate([
            ("total", "Total Categories"),
            ("income", "Income Categories"),
            ("expense", "Expense Categories"),
            ("most_used", "Most Used"),
        ]):
            cards.grid_columnconfigure(col, weight=1)
            card = ctk.CTkFrame(cards, fg_color=("gray88", "gray18"), corner_radius=8)
            card.grid(row=0, column=col, sticky="ew", padx=4)
            ctk.CTkLabel(card, text=title, text_color="gray60",
                         font=ctk.CTkFont(size=11)).pack(anchor="w", padx=12, pady=(8, 0))
            value = ctk.CTkLabel(card, text="0", font=ctk.CTkFont(size=20, weight="bold"))
            value.pack(anchor="w", padx=12)
            detail = ctk.CTkLabel(card, text="", text_color="gray60", font=ctk.CTkFont(size=11))
            detail.pack(anchor="w", padx=12, pady=(0, 8))
            self._card_labels[key] = (value, detail)

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=1, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkButton(bar, text="+ Add Category", command=self._on_add).pack(
            side="left", padx=(12, 4), pady=6
        )

        self._quick_name = ctk.StringVar()
        quick_entry = ctk.CTkEntry(bar, textvariable=self._quick_name, width=160,
                                   placeholder_text="Quick add name")
        quick_entry.pack(side="left", padx=(12, 4))
        quick_entry.bind("<Return>", lambda _e: self._quick_add())
        self._quick_type = ctk.StringVar(value=EXPENSE)
        ctk.CTkSegmentedButton(bar, values=CATEGORY_TYPES, variable=self._quick_type).pack(
            side="left", padx=4
        )
        ctk.CTkButton(bar, text="Add", width=50, command=self._quick_add).pack(side="left", padx=4)

        self._archived_btn = ctk.CTkButton(
            bar, text="Show Archived", width=120,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._on_toggle_archived,
        )
        self._archived_btn.pack(side="right", padx=(4, 12))

        self._filters_btn = ctk.CTkButton(bar, text="Filters", width=90, command=self._on_filters)
        self._filters_btn.pack(side="right", padx=4)

    def _build_mode_bar(self):
        self._mode_bar = ctk.CTkFrame(self, fg_color="transparent")
        self._mode_bar.grid(row=2, column=0, sticky="ew", padx=12, pady=(6, 0))
        self._mode_label = ctk.CTkLabel(self._mode_bar, text="", text_color="gray60", anchor="w")
        self._mode_label.pack(side="left")

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=3, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _build_pager(self):
        pager = ctk.CTkFrame(self, fg_color="transparent")
        pager.grid(row=4, column=0, pady=(0, 8))
        self._prev_btn = ctk.CTkButton(pager, text="‹ Previous", width=100, command=self._prev_page)
        self._prev_btn.pack(side="left", padx=4)
        self._page_label = ctk.CTkLabel(pager, text="", width=180)
        self._page_label.pack(side="left", padx=8)
        self._next_btn = ctk.CTkButton(pager, text="Next ›", width=100, command=self._next_page)
        self._next_btn.pack(side="left", padx=4)

    # ── Rendering ────────────────────────────────────────────────────────────

    def render(self, summary: CategorySummary | None = None, usage: dict[int, int] | None = None):
        if summary is not None:
            self._render_summary(summary)
        if usage is not None:
            self._usage = usage
        self._render_mode()
        self._render_rows()
        self._render_pager()

    def _render_summary(self, s: CategorySummary):
        self._set_card("total", s.total, f"{s.total} total categories")
        self._set_card("income", s.income, f"{s.income_uses} transactions")
        self._set_card("expense", s.expense, f"{s.expense_uses} transactions")
        self._set_card("most_used", truncate_name(s.most_used_name), f"{s.most_used_count} uses")

    def _set_card(self, key: str, value, detail: str):
        value_lbl, detail_lbl = self._card_labels[key]
        value_lbl.configure(text=str(value))
        detail_lbl.configure(text=detail)

    def _render_mode(self):
        cfg = self._browser.config
        self._archived_btn.configure(text="Hide Archived" if cfg.show_archived else "Show Archived")
        count = self._browser.active_filter_count()
        self._filters_btn.configure(text=f"Filters ({count})" if count else "Filters")
        mode = "Viewing archived categories" if cfg.show_archived else "Viewing active categories"
        filters = self._browser.active_filters_text()
        self._mode_label.configure(text=f"{mode}  ·  {filters}" if filters else mode)

    def _render_rows(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        items = self._browser.current_page_items()
        if not items:
            title, message = self._browser.empty_state()
            ctk.CTkLabel(self._scroll, text=title,
                         font=ctk.CTkFont(size=15, weight="bold")).grid(row=0, column=0, pady=(40, 4))
            ctk.CTkLabel(self._scroll, text=message, text_color="gray60",
                         wraplength=520).grid(row=1, column=0)
            if self._browser.active_filter_count():
                ctk.CTkButton(self._scroll, text="Clear All Filters", width=140,
                              command=self._on_clear_filters).grid(row=2, column=0, pady=12)
            return

        for idx, cat in enumerate(items):
            self._add_row(idx, cat)

    def _add_row(self, idx: int, cat: Category):
        row = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        row.grid(row=idx, column=0, sticky="ew", padx=4, pady=3)
        row.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(row, text="", width=28, height=28, corner_radius=4,
                     fg_color=cat.color).grid(row=0, column=0, padx=(10, 0), pady=8)

        name_frame = ctk.CTkFrame(row, fg_color="transparent")
        name_frame.grid(row=0, column=1, padx=8, sticky="w")
        ctk.CTkLabel(name_frame, text=cat.name, anchor="w",
                     font=ctk.CTkFont(size=13, weight="bold")).pack(side="left")
        if cat.is_default:
            ctk.CTkLabel(name_frame, text="default", text_color="gray60",
                         font=ctk.CTkFont(size=10)).pack(side="left", padx=(6, 0))
        if cat.is_deleted:
            ctk.CTkLabel(name_frame, text="archived", text_color="#FF9800",
                         font=ctk.CTkFont(size=10)).pack(side="left", padx=(6, 0))

        uses = self._usage.get(cat.id, 0)
        ctk.CTkLabel(row, text=f"{uses} uses", width=70, text_color="gray60",
                     font=ctk.CTkFont(size=11)).grid(row=0, column=2, padx=4)
        ctk.CTkLabel(row, text=format_display_datetime(cat.created_at), width=90,
                     text_color="gray60", font=ctk.CTkFont(size=11)).grid(row=0, column=3, padx=4)
        ctk.CTkLabel(row, text=cat.type, width=70, anchor="center",
                     text_color=TYPE_COLORS.get(cat.type, "#888888"),
                     font=ctk.CTkFont(size=11, weight="bold")).grid(row=0, column=4, padx=4)

        btn_frame = ctk.CTkFrame(row, fg_color="transparent")
        btn_frame.grid(row=0, column=5, padx=(4, 10), pady=6)

        if cat.is_deleted:
            ctk.CTkButton(
                btn_frame, text="Restore", width=70, height=26,
                command=lambda c=cat: self._on_restore(c),
            ).pack(side="left")
            return

        ctk.CTkButton(
            btn_frame, text="Edit", width=60, height=26,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda c=cat: self._on_edit(c),
        ).pack(side="left", padx=(0, 4))

        archive_btn = ctk.CTkButton(
            btn_frame, text="Archive", width=70, height=26,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda c=cat: self._on_archive(c),
        )
        if cat.is_default:
            archive_btn.configure(state="disabled", fg_color="gray50")
        archive_btn.pack(side="left")

    def _render_pager(self):
        p = self._browser.pagination
        if p.total_pages == 0:
            self._page_label.configure(text="")
        else:
            self._page_label.configure(
                text=f"Page {p.current_page} of {p.total_pages}  ·  {p.total_items} categories"
            )
        self._prev_btn.configure(state="normal" if p.current_page > 1 else "disabled")
        self._next_btn.configure(state="normal" if p.current_page < p.total_pages else "disabled")

    # ── Actions ──────────────────────────────────────────────────────────────

    def _prev_page(self):
        if self._browser.previous_page():
            self.render()

    def _next_page(self):
        if self._browser.next_page():
            self.render()

    def _quick_add(self):
        if self._on_quick_add(self._quick_name.get(), self._quick_type.get()):
            self._quick_name.set("")
