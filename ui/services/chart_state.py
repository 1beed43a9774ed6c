"""Chart state record and reducer.

All widget state lives in one immutable ``ChartState``; ``reduce`` is the
only way to produce the next state. Fetch completions carry the request id
and selection they were issued for, and are dropped unless both still match,
so a slow response for an older selection can never overwrite newer data.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Union

from ui.services.price_derive import derive_summary, format_labels
from ui.services.price_types import DEFAULT_RANGE, RangeSelection, Series, Summary


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RangeChanged:
    selection: RangeSelection


@dataclass(frozen=True)
class FetchSucceeded:
    request_id: int
    selection: RangeSelection
    series: Series


@dataclass(frozen=True)
class FetchFailed:
    request_id: int
    selection: RangeSelection
    message: str


@dataclass(frozen=True)
class PointerMoved:
    index: int


@dataclass(frozen=True)
class PointerLeft:
    pass


ChartEvent = Union[RangeChanged, FetchSucceeded, FetchFailed, PointerMoved, PointerLeft]


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChartState:
    selection: RangeSelection = DEFAULT_RANGE
    request_id: int = 0
    loading: bool = False
    series: Series = ()
    series_selection: Optional[RangeSelection] = None   # range the series was fetched for
    summary: Optional[Summary] = None
    hover_price: Optional[float] = None
    error: Optional[str] = None

    @property
    def display_price(self) -> float:
        """Hovered price while hovering, otherwise the latest price."""
        if self.hover_price is not None:
            return self.hover_price
        return self.summary.latest_price if self.summary else 0.0

    @property
    def labels(self) -> List[str]:
        if not self.series or self.series_selection is None:
            return []
        return format_labels(self.series, self.series_selection)

    @property
    def prices(self) -> List[float]:
        return [p.price for p in self.series]

    @property
    def has_data(self) -> bool:
        return bool(self.series)

    @property
    def refreshing(self) -> bool:
        """A newer fetch is in flight while older data is still on screen."""
        return self.loading and self.has_data


def _is_current(state: ChartState, request_id: int, selection: RangeSelection) -> bool:
    return request_id == state.request_id and selection is state.selection


def reduce(state: ChartState, event: ChartEvent) -> ChartState:
    """Return the state after *event*. Never mutates *state*."""
    if isinstance(event, RangeChanged):
        # Re-selecting the current range still starts a new request.
        return replace(
            state,
            selection=RangeSelection.parse(event.selection),
            request_id=state.request_id + 1,
            loading=True,
            error=None,
        )

    if isinstance(event, FetchSucceeded):
        if not _is_current(state, event.request_id, event.selection) or not event.series:
            return state
        return replace(
            state,
            loading=False,
            series=tuple(event.series),
            series_selection=event.selection,
            summary=derive_summary(event.series),
            hover_price=None,
            error=None,
        )

    if isinstance(event, FetchFailed):
        if not _is_current(state, event.request_id, event.selection):
            return state
        # Prior series and summary stay on screen.
        return replace(state, loading=False, error=event.message)

    if isinstance(event, PointerMoved):
        if 0 <= event.index < len(state.series):
            return replace(state, hover_price=state.series[event.index].price)
        return state

    if isinstance(event, PointerLeft):
        if state.hover_price is None:
            return state
        return replace(state, hover_price=None)

    raise TypeError(f"unknown chart event: {event!r}")
