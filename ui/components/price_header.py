"""Price Header — title, price readout, signed change line and error banner."""

from nicegui import ui

from ui.services.chart_state import ChartState
from ui.services.price_derive import chart_palette, format_change, format_usd


class PriceHeader:
    def __init__(self):
        with ui.column().classes("gap-0"):
            ui.label("Bitcoin (BTC)").classes("text-xl font-bold")
            self.price_label = ui.label(format_usd(0)).classes(
                "text-4xl font-bold monospace")
            self.change_label = ui.label("").classes("text-sm monospace")

    def update(self, state: ChartState) -> None:
        self.price_label.set_text(format_usd(state.display_price))
        if state.summary is None:
            self.change_label.set_text("")
            return
        self.change_label.set_text(format_change(state.summary))
        self.change_label.style(f"color: {chart_palette(state.summary)['text']}")


class ErrorBanner:
    """Visible only while the state carries an error message."""

    def __init__(self):
        with ui.card().classes("w-full p-3 accent-red error-banner") as card:
            with ui.row().classes("w-full items-center justify-center gap-2"):
                ui.icon("warning", color="red").classes("text-xl")
                self.message = ui.label("").classes("text-red-400 font-bold")
        self.card = card
        self.card.set_visibility(False)

    def update(self, state: ChartState) -> None:
        self.message.set_text(state.error or "")
        self.card.set_visibility(bool(state.error))
