import customtkinter as ctk

from models.view_state import FilterConfig
from utils.constants import FILTER_ORIGINS, FILTER_TYPES, FILTER_USAGES, SORT_LABELS, SORT_OPTIONS

_TYPE_LABELS = {"all": "All types", "INCOME": "Income", "EXPENSE": "Expense"}
_USAGE_LABELS = {"all": "Any usage", "active": "Used", "unused": "Unused", "frequent": "Frequently used"}
_ORIGIN_LABELS = {"all": "All categories", "default": "Default only", "custom": "Custom only"}


def _combo(master, row: int, label: str, labels: dict[str, str], keys: list[str], current: str):
    ctk.CTkLabel(master, text=label).grid(row=row, column=0, padx=(16, 8), pady=4, sticky="e")
    var = ctk.StringVar(value=labels[current])
    ctk.CTkComboBox(
        master, values=[labels[k] for k in keys], variable=var,
        width=200, state="readonly",
    ).grid(row=row, column=1, padx=(0, 16), pady=4, sticky="ew")
    return var


def _key_for(labels: dict[str, str], shown: str) -> str:
    return next((k for k, v in labels.items() if v == shown), "all")


class FilterPanel(ctk.CTkToplevel):
    """Edit search, filters and sort in one go. `result` holds the new values on Apply."""

    def __init__(self, master, config: FilterConfig, **kwargs):
        super().__init__(master, **kwargs)
        self.title("Filter Categories")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)
        self.result: dict | None = None
        self.cleared = False

        ctk.CTkLabel(self, text="Search:").grid(row=0, column=0, padx=(16, 8), pady=(16, 4), sticky="e")
        self._search_var = ctk.StringVar(value=config.search)
        search = ctk.CTkEntry(self, textvariable=self._search_var, width=200,
                              placeholder_text="Name contains...")
        search.grid(row=0, column=1, padx=(0, 16), pady=(16, 4), sticky="ew")

        self._type_var = _combo(self, 1, "Type:", _TYPE_LABELS, FILTER_TYPES, config.type)
        self._usage_var = _combo(self, 2, "Usage:", _USAGE_LABELS, FILTER_USAGES, config.usage)
        self._origin_var = _combo(self, 3, "Origin:", _ORIGIN_LABELS, FILTER_ORIGINS, config.origin)
        self._sort_var = _combo(self, 4, "Sort by:", SORT_LABELS, SORT_OPTIONS, config.sort)

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=5, column=0, columnspan=2, padx=16, pady=(12, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Clear All", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._on_clear,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Apply", width=90, command=self._on_apply).pack(side="right")

        search.bind("<Return>", lambda _e: self._on_apply())
        self.bind("<Escape>", lambda _e: self.destroy())
        self.transient(master)
        self.grab_set()
        self._center()
        search.focus_set()

    def _on_apply(self):
        self.result = {
            "type": _key_for(_TYPE_LABELS, self._type_var.get()),
            "usage": _key_for(_USAGE_LABELS, self._usage_var.get()),
            "origin": _key_for(_ORIGIN_LABELS, self._origin_var.get()),
            "search": self._search_var.get(),
            "sort": next((k for k, v in SORT_LABELS.items() if v == self._sort_var.get()), "newest"),
        }
        self.destroy()

    def _on_clear(self):
        self.cleared = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
