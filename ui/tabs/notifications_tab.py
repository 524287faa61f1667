import customtkinter as ctk

from models.notification import Notification
from services.notification_service import NotificationService
from services.smart_time import smart_label
from utils.constants import SEVERITY_COLORS


class NotificationsTab(ctk.CTkFrame):
    """Notification list with per-row mark-read and a mark-all button.

    `refresh_labels` only rewrites the relative times and drops rows that
    expired, so the smart-time timer never rebuilds the whole list.
    """

    def __init__(self, master, notification_service: NotificationService, on_change=None, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = notification_service
        self._on_change = on_change
        self._rows: dict = {}

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        header = ctk.CTkFrame(self, fg_color="transparent")
        header.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        self._title = ctk.CTkLabel(header, text="Notifications",
                                   font=ctk.CTkFont(size=16, weight="bold"))
        self._title.pack(side="left", padx=4)
        self._mark_all_btn = ctk.CTkButton(header, text="Mark all read", width=120,
                                           command=self._mark_all)
        self._mark_all_btn.pack(side="right", padx=4)

        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def render(self):
        for w in self._scroll.winfo_children():
            w.destroy()
        self._rows = {}

        notifications = self._svc.visible()
        if not notifications:
            ctk.CTkLabel(self._scroll, text="No notifications", text_color="gray60",
                         font=ctk.CTkFont(size=14)).grid(row=0, column=0, pady=40)
        for i, n in enumerate(notifications):
            self._add_row(i, n)
        self._update_header()

    def refresh_labels(self):
        """Rewrite relative times; hide rows that crossed the one-day mark."""
        for nid, (frame, time_lbl, n) in list(self._rows.items()):
            label = smart_label(n.timestamp)
            if label is None:
                frame.destroy()
                del self._rows[nid]
            else:
                time_lbl.configure(text=label)
        self._update_header()

    def _add_row(self, index: int, n: Notification):
        color = SEVERITY_COLORS.get(n.type, SEVERITY_COLORS["info"])
        row = ctk.CTkFrame(
            self._scroll,
            fg_color=("gray95", "gray17") if n.is_read else ("gray88", "gray22"),
            corner_radius=6,
        )
        row.grid(row=index, column=0, sticky="ew", pady=3, padx=2)
        row.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            row, text=self._svc.icon_for(n.type), text_color=color,
            font=ctk.CTkFont(size=18), width=30,
        ).grid(row=0, column=0, rowspan=2, padx=(8, 4), pady=6)

        ctk.CTkLabel(
            row, text=n.title,
            font=ctk.CTkFont(size=13, weight="normal" if n.is_read else "bold"),
            text_color=color, anchor="w",
        ).grid(row=0, column=1, sticky="ew", padx=(0, 4), pady=(6, 0))

        ctk.CTkLabel(
            row, text=n.message,
            font=ctk.CTkFont(size=11),
            text_color=("gray40", "gray70"),
            anchor="w", wraplength=560, justify="left",
        ).grid(row=1, column=1, sticky="ew", padx=(0, 4), pady=(0, 6))

        time_lbl = ctk.CTkLabel(row, text=smart_label(n.timestamp) or "",
                                text_color="gray60", font=ctk.CTkFont(size=11))
        time_lbl.grid(row=0, column=2, padx=(4, 8), pady=(6, 0), sticky="e")

        if not n.is_read:
            ctk.CTkButton(
                row, text="✓", width=28, height=24,
                fg_color="transparent",
                text_color=("gray10", "gray90"),
                hover_color=("gray80", "gray30"),
                command=lambda nid=n.id: self._mark_one(nid),
            ).grid(row=1, column=2, padx=(4, 8), pady=(0, 6), sticky="e")

        self._rows[n.id] = (row, time_lbl, n)

    def _update_header(self):
        unread = self._svc.unread_count()
        self._title.configure(text=f"Notifications ({unread} unread)" if unread else "Notifications")
        self._mark_all_btn.configure(state="normal" if unread else "disabled")

    def _mark_one(self, notification_id):
        if self._svc.mark_read(notification_id):
            self._changed()

    def _mark_all(self):
        if self._svc.mark_all_read():
            self._changed()

    def _changed(self):
        self.render()
        if self._on_change:
            self._on_change()
