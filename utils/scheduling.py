"""Cancelable one-shot timers.

`Scheduler` is the seam the smart time refresher schedules through:
`call_later` returns a handle, `cancel` drops it. The Tk implementation maps
onto `widget.after` / `after_cancel` so callbacks run on the UI thread.
"""
from typing import Any, Callable


class Scheduler:
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> Any:
        raise NotImplementedError

    def cancel(self, handle: Any) -> None:
        raise NotImplementedError


class TkScheduler(Scheduler):
    def __init__(self, widget):
        self._widget = widget

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> str:
        return self._widget.after(max(0, int(delay_seconds * 1000)), callback)

    def cancel(self, handle: str) -> None:
        try:
            self._widget.after_cancel(handle)
        except Exception:
            pass  # widget already destroyed
