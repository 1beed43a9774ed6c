"""Chart controller — owns the chart state and runs fetches on the event loop."""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from ui.services.chart_state import (
    ChartEvent,
    ChartState,
    FetchFailed,
    FetchSucceeded,
    PointerLeft,
    PointerMoved,
    RangeChanged,
    reduce,
)
from ui.services.market_data import GENERIC_ERROR_MESSAGE, MarketChartClient
from ui.services.price_types import (
    DEFAULT_RANGE,
    PriceFetchError,
    RangeSelection,
    Series,
)

logger = logging.getLogger(__name__)

Fetcher = Callable[[RangeSelection], Awaitable[Series]]
Listener = Callable[[ChartState], None]


class PriceChartController:
    """Single owner of ``ChartState``.

    State only changes through ``dispatch``. Fetch errors are resolved into
    ``FetchFailed`` here and never propagate to the caller.
    """

    def __init__(self, fetcher: Optional[Fetcher] = None,
                 initial: RangeSelection = DEFAULT_RANGE):
        self._fetch = fetcher or MarketChartClient().fetch_series
        self.state = ChartState(selection=RangeSelection.parse(initial))
        self._listeners: List[Listener] = []
        self._task: Optional[asyncio.Task] = None

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def dispatch(self, event: ChartEvent) -> ChartState:
        new_state = reduce(self.state, event)
        if new_state is not self.state:
            self.state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self.state

    # -- range selection ----------------------------------------------------

    def select_range(self, selection) -> asyncio.Task:
        """Switch to *selection* and start fetching it.

        Must be called from a running event loop. Any previous in-flight
        fetch is cancelled. Returns the fetch task.
        """
        selection = RangeSelection.parse(selection)
        if self._task is not None and not self._task.done():
            self._task.cancel()
        state = self.dispatch(RangeChanged(selection))
        self._task = asyncio.create_task(self._load(state.request_id, selection))
        return self._task

    async def _load(self, request_id: int, selection: RangeSelection) -> None:
        try:
            series = await self._fetch(selection)
            if request_id != self.state.request_id:
                logger.info("Discarding stale %s response (request %d, current %d)",
                            selection.label, request_id, self.state.request_id)
            self.dispatch(FetchSucceeded(request_id, selection, series))
        except PriceFetchError as e:
            message = str(e) or GENERIC_ERROR_MESSAGE
            logger.error("Error fetching data: %s", message)
            self.dispatch(FetchFailed(request_id, selection, message))
        except Exception:
            # CancelledError is not an Exception subclass and still propagates.
            logger.exception("Unexpected error fetching %s", selection.label)
            self.dispatch(FetchFailed(request_id, selection, GENERIC_ERROR_MESSAGE))

    def close(self) -> None:
        """Cancel any in-flight fetch (page closed)."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._listeners.clear()

    # -- hover --------------------------------------------------------------

    def pointer_moved(self, index: Optional[int]) -> None:
        if index is not None:
            self.dispatch(PointerMoved(index))

    def pointer_left(self) -> None:
        self.dispatch(PointerLeft())
