import customtkinter as ctk

from utils.constants import SEVERITY_COLORS, SEVERITY_ICONS

TOAST_MS = 5000


class AlertBanner(ctk.CTkFrame):
    """A dismissible colored banner for non-blocking messages.

    With `timeout_ms` set the banner closes itself; errors are usually shown
    without a timeout so they stay until dismissed.
    """

    def __init__(self, master, message: str, severity: str = "info",
                 action_text: str | None = None, action_cmd=None,
                 timeout_ms: int | None = TOAST_MS, **kwargs):
        color = SEVERITY_COLORS.get(severity, SEVERITY_COLORS["info"])
        super().__init__(master, fg_color=color, corner_radius=6, **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self._timer = None

        icon = SEVERITY_ICONS.get(severity, "")
        ctk.CTkLabel(
            self, text=f"{icon}  {message}" if icon else message, text_color="white",
            anchor="w", padx=10, pady=6
        ).grid(row=0, column=0, sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=0, column=1, padx=(0, 4))

        if action_text and action_cmd:
            ctk.CTkButton(
                btn_frame, text=action_text, width=60, height=24,
                fg_color="transparent", border_width=1, border_color="white",
                hover_color=color,
                text_color="white", command=action_cmd,
            ).pack(side="left", padx=2)

        ctk.CTkButton(
            btn_frame, text="✕", width=28, height=24,
            fg_color="transparent",
            hover_color=color,
            text_color="white",
            command=self.destroy,
        ).pack(side="left")

        if timeout_ms:
            self._timer = self.after(timeout_ms, self._expire)

    def _expire(self):
        self._timer = None
        self.destroy()

    def destroy(self):
        if self._timer is not None:
            self.after_cancel(self._timer)
            self._timer = None
        super().destroy()
