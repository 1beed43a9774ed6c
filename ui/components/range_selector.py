"""Range Selector — fixed lookback windows as a button group."""

from typing import Callable, Dict

from nicegui import ui

from ui.services.price_types import RangeSelection

RANGE_CHOICES = list(RangeSelection)


class RangeSelector:
    """Button group; clicking any button, including the active one, fires on_select."""

    def __init__(self, value: RangeSelection,
                 on_select: Callable[[RangeSelection], None]):
        self._on_select = on_select
        self._buttons: Dict[RangeSelection, ui.button] = {}
        with ui.row().classes("range-selector gap-1 p-1 no-wrap"):
            for choice in RANGE_CHOICES:
                btn = ui.button(
                    choice.label,
                    on_click=lambda c=choice: self._on_select(c),
                ).props("flat dense no-caps").classes("range-btn")
                self._buttons[choice] = btn
        self.set_active(value)

    def set_active(self, value: RangeSelection) -> None:
        for choice, btn in self._buttons.items():
            if choice is value:
                btn.classes(add="range-btn-active")
            else:
                btn.classes(remove="range-btn-active")


def render_range_selector(value: RangeSelection = RangeSelection.THIRTY_DAYS,
                          on_select=None) -> RangeSelector:
    """Render the range selector. Returns the selector."""
    return RangeSelector(value, on_select or (lambda _: None))
