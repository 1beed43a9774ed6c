"""Pure derivations over a price series: summary, labels, colours, readouts."""

import math
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ui.services.price_types import PricePoint, RangeSelection, Summary

# Styling palettes keyed by sign of the period change.
POSITIVE_PALETTE = {
    "line": "#4CAF50",
    "fill": "rgba(76, 175, 80, 0.2)",
    "text": "green",
}
NEGATIVE_PALETTE = {
    "line": "#FF5252",
    "fill": "rgba(255, 82, 82, 0.2)",
    "text": "red",
}


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def derive_summary(series: Sequence[PricePoint]) -> Summary:
    """Latest price, absolute change and percent change over *series*.

    Percent change is rounded to 2 decimals and is None when the first price
    is zero. Non-finite prices are rejected.
    """
    if not series:
        raise ValueError("cannot summarise an empty series")
    if not all(math.isfinite(p.price) for p in series):
        raise ValueError("cannot summarise a series with non-finite prices")
    first = series[0].price
    latest = series[-1].price
    change = latest - first
    percent = None if first == 0 else round(change / first * 100, 2)
    return Summary(latest_price=latest, change_absolute=change, change_percent=percent)


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

def format_label(timestamp_ms: int, selection: RangeSelection) -> str:
    """Locale time-of-day for the 1D view, locale calendar date otherwise."""
    selection = RangeSelection.parse(selection)
    dt = datetime.fromtimestamp(timestamp_ms / 1000)
    return dt.strftime("%X") if selection.is_intraday else dt.strftime("%x")


def format_labels(series: Sequence[PricePoint], selection: RangeSelection) -> List[str]:
    return [format_label(p.timestamp_ms, selection) for p in series]


# ---------------------------------------------------------------------------
# Sign, colour and text readouts
# ---------------------------------------------------------------------------

def is_gain(summary: Summary) -> bool:
    """Single sign predicate shared by the chart colours and the change text."""
    return summary.change_absolute >= 0


def chart_palette(summary: Summary) -> Dict[str, str]:
    return dict(POSITIVE_PALETTE if is_gain(summary) else NEGATIVE_PALETTE)


def format_usd(value: Optional[float]) -> str:
    """``$67,012.35`` style currency text."""
    if value is None:
        value = 0.0
    return f"${value:,.2f}"


def format_percent(percent: Optional[float]) -> str:
    return "n/a" if percent is None else f"{percent:.2f}%"


def format_change(summary: Summary) -> str:
    """Signed change readout, e.g. ``+$1,234.56 (1.85%)``."""
    sign = "+" if is_gain(summary) else "-"
    return (f"{sign}{format_usd(abs(summary.change_absolute))} "
            f"({format_percent(summary.change_percent)})")
