import logging

import customtkinter as ctk
from tkinter import TclError, colorchooser

from database.api_client import ApiError
from models.category import Category
from services.category_service import CategoryService, ValidationError
from utils.constants import CATEGORY_NAME_MAX_LENGTH, CATEGORY_TYPES, DEFAULT_CATEGORY_COLOR, EXPENSE

logger = logging.getLogger(__name__)


class CategoryForm(ctk.CTkToplevel):
    """Add or edit a category. Validation errors show under the offending field."""

    def __init__(
        self,
        master,
        category_service: CategoryService,
        category: Category | None = None,
        existing: list[Category] | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = category_service
        self._category = category
        self._existing = existing
        self.saved = False

        self.title("Edit Category" if category else "New Category")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0

        # Name
        ctk.CTkLabel(self, text="Name:").grid(
            row=r, column=0, padx=(16, 8), pady=(16, 0), sticky="e"
        )
        self._name_var = ctk.StringVar(value=category.name if category else "")
        self._name_entry = ctk.CTkEntry(self, textvariable=self._name_var, width=240)
        self._name_entry.grid(row=r, column=1, padx=(0, 16), pady=(16, 0), sticky="ew")
        self._name_var.trace_add("write", self._on_name_changed)
        r += 1

        self._name_error = ctk.CTkLabel(self, text="", text_color="#F44336", anchor="w",
                                        font=ctk.CTkFont(size=11))
        self._name_error.grid(row=r, column=1, padx=(0, 16), sticky="w")
        self._char_count = ctk.CTkLabel(self, text="", text_color="gray60",
                                        font=ctk.CTkFont(size=11))
        self._char_count.grid(row=r, column=1, padx=(0, 16), sticky="e")
        r += 1

        # Type
        ctk.CTkLabel(self, text="Type:").grid(
            row=r, column=0, padx=(16, 8), pady=(4, 0), sticky="e"
        )
        self._type_var = ctk.StringVar(value=category.type if category else EXPENSE)
        ctk.CTkComboBox(
            self, values=CATEGORY_TYPES, variable=self._type_var,
            width=240, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=(4, 0), sticky="ew")
        r += 1

        self._type_error = ctk.CTkLabel(self, text="", text_color="#F44336", anchor="w",
                                        font=ctk.CTkFont(size=11))
        self._type_error.grid(row=r, column=1, padx=(0, 16), sticky="w")
        r += 1

        # Color
        ctk.CTkLabel(self, text="Color:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        color_row = ctk.CTkFrame(self, fg_color="transparent")
        color_row.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")

        self._color_var = ctk.StringVar(value=category.color if category else DEFAULT_CATEGORY_COLOR)
        self._color_entry = ctk.CTkEntry(color_row, textvariable=self._color_var, width=100)
        self._color_entry.pack(side="left")
        self._color_entry.bind("<FocusOut>", self._sync_swatch)

        self._swatch = ctk.CTkLabel(
            color_row, text="", width=32, height=24, corner_radius=4,
            fg_color=self._color_var.get(),
        )
        self._swatch.pack(side="left", padx=(8, 0))

        ctk.CTkButton(
            color_row, text="Pick", width=60,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._pick_color,
        ).pack(side="left", padx=(8, 0))
        r += 1

        if category and category.is_default:
            ctk.CTkLabel(
                self, text="Default category. It cannot be archived.",
                text_color="gray60", anchor="w",
            ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
            r += 1

        # Form-level error (network, server)
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=320, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        self._save_btn = ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save)
        self._save_btn.pack(side="right")

        self._on_name_changed()
        self.bind("<Return>", lambda _e: self._on_save())
        self.transient(master)
        self.grab_set()
        self._center()
        self._name_entry.focus_set()

    def _on_name_changed(self, *_args):
        length = len(self._name_var.get().strip())
        self._char_count.configure(
            text=f"{length}/{CATEGORY_NAME_MAX_LENGTH}",
            text_color="#F44336" if length > CATEGORY_NAME_MAX_LENGTH else "gray60",
        )
        self._name_error.configure(text="")

    def _pick_color(self):
        result = colorchooser.askcolor(
            color=self._color_var.get(), parent=self, title="Pick Category Color"
        )
        if result and result[1]:
            self._color_var.set(result[1])
            self._swatch.configure(fg_color=result[1])

    def _sync_swatch(self, _event=None):
        color = self._color_var.get().strip()
        if color.startswith("#") and len(color) in (4, 7):
            try:
                self._swatch.configure(fg_color=color)
            except TclError:
                pass  # not a color Tk understands; keep the old swatch

    def _clear_errors(self):
        self._name_error.configure(text="")
        self._type_error.configure(text="")
        self._error_var.set("")

    def _on_save(self):
        self._clear_errors()
        name = self._name_var.get()
        type_ = self._type_var.get()
        color = self._color_var.get().strip() or DEFAULT_CATEGORY_COLOR
        if not color.startswith("#"):
            color = "#" + color

        self._save_btn.configure(state="disabled", text="Saving...")
        try:
            if self._category:
                self._svc.validate(name, type_, exclude_id=self._category.id, existing=self._existing)
                self._svc.update(self._category.id, name, type_, color)
            else:
                self._svc.validate(name, type_, existing=self._existing)
                self._svc.create(name, type_, color)
        except ValidationError as e:
            target = self._type_error if e.field == "type" else self._name_error
            target.configure(text=str(e))
        except ApiError as e:
            logger.warning("Saving category failed: %s", e)
            self._error_var.set(str(e))
        else:
            self.saved = True
            self.destroy()
            return
        self._save_btn.configure(state="normal", text="Save")

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
