"""Price Chart — ECharts line chart; hover only reports the sample index."""

from typing import Callable, Optional

from nicegui import ui

from ui.services.chart_options import build_chart_options, hover_index_from_event
from ui.services.chart_state import ChartState
from ui.services.price_derive import chart_palette, POSITIVE_PALETTE


class PriceChart:
    def __init__(self, on_hover: Callable[[Optional[int]], None],
                 on_leave: Callable[[], None]):
        self._series = None
        self._palette = None
        self.progress = ui.linear_progress(show_value=False).props(
            "indeterminate color=grey-6 size=2px")
        self.progress.set_visibility(False)
        with ui.element("div").classes("w-full").style("height: 400px") as box:
            self.placeholder = ui.label("Loading chart data...").classes(
                "text-gray-400 p-4")
            self.chart = ui.echart(
                build_chart_options([], [], POSITIVE_PALETTE)
            ).classes("w-full h-full")
        self.chart.set_visibility(False)
        self.chart.on("chart:highlight", lambda e: on_hover(hover_index_from_event(e.args)))
        self.chart.on("chart:globalout", lambda e: on_leave())
        box.on("mouseleave", lambda e: on_leave())

    def update(self, state: ChartState) -> None:
        """Redraw only when the series or its colour changes (not on hover)."""
        self.progress.set_visibility(state.loading)
        if not state.has_data:
            return
        self.chart.style(f"opacity: {0.6 if state.refreshing else 1}")
        palette = chart_palette(state.summary)
        if state.series is self._series and palette == self._palette:
            return
        self._series = state.series
        self._palette = palette
        self.chart.options.clear()
        self.chart.options.update(build_chart_options(state.labels, state.prices, palette))
        self.chart.update()
        self.placeholder.set_visibility(False)
        self.chart.set_visibility(True)
