import customtkinter as ctk

from models.category import Category


class ArchiveDialog(ctk.CTkToplevel):
    """Confirm archiving a category. Returns result via .result attribute."""

    def __init__(self, master, category: Category, usage_count: int = 0, **kwargs):
        super().__init__(master, **kwargs)
        self.title("Archive Category")
        self.result = False
        self.resizable(False, False)

        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=f"Archive \"{category.name}\"?",
            font=ctk.CTkFont(size=14, weight="bold"),
            anchor="w", padx=20, pady=12,
        ).grid(row=0, column=0, sticky="ew")

        lines = ["Archived categories are hidden from lists but can be restored at any time."]
        if usage_count:
            lines.append(
                f"It is used by {usage_count} transaction{'s' if usage_count != 1 else ''}; "
                "they keep their category."
            )
        ctk.CTkLabel(
            self, text="\n".join(lines), wraplength=360, justify="left", padx=20,
        ).grid(row=1, column=0, sticky="ew", pady=(0, 12))

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=2, column=0, pady=(0, 16), padx=20, sticky="e")

        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._on_cancel,
        ).pack(side="left", padx=(0, 8))

        ctk.CTkButton(
            btn_frame, text="Archive", width=90,
            fg_color="#F44336", hover_color="#D32F2F",
            command=self._on_confirm,
        ).pack(side="left")

        self.bind("<Escape>", lambda _e: self._on_cancel())
        self.transient(master)
        self.grab_set()
        self._center()
        self.wait_window()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_width(), self.winfo_height()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")

    def _on_confirm(self):
        self.result = True
        self.destroy()

    def _on_cancel(self):
        self.result = False
        self.destroy()
