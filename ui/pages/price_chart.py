"""Price Chart page — range selector, price header, error banner and chart."""

import logging
import os
from typing import Optional

from nicegui import ui

from ui.components.price_chart import PriceChart
from ui.components.price_header import ErrorBanner, PriceHeader
from ui.components.range_selector import render_range_selector
from ui.services.chart_controller import PriceChartController
from ui.services.chart_state import ChartState
from ui.services.price_types import DEFAULT_RANGE, RangeSelection

logger = logging.getLogger(__name__)


def initial_range() -> RangeSelection:
    """Range shown on page load; BTC_CHART_DEFAULT_RANGE overrides."""
    raw = os.environ.get("BTC_CHART_DEFAULT_RANGE")
    if not raw:
        return DEFAULT_RANGE
    return RangeSelection.parse(raw)


def price_chart_page(controller: Optional[PriceChartController] = None):
    """Bitcoin price history widget."""
    controller = controller or PriceChartController(initial=initial_range())

    def _select(selection: RangeSelection) -> None:
        controller.select_range(selection)

    with ui.column().classes("w-full max-w-4xl mx-auto p-4"):
        banner = ErrorBanner()

        with ui.row().classes("w-full items-center justify-between my-4"):
            header = PriceHeader()
            selector = render_range_selector(controller.state.selection, _select)

        chart = PriceChart(on_hover=controller.pointer_moved,
                           on_leave=controller.pointer_left)

    def _render(state: ChartState) -> None:
        banner.update(state)
        header.update(state)
        selector.set_active(state.selection)
        chart.update(state)

    controller.subscribe(_render)
    _render(controller.state)

    ui.context.client.on_disconnect(controller.close)
    ui.timer(0.1, lambda: _select(controller.state.selection), once=True)
    return controller
