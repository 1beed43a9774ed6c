"""Price chart types — PricePoint, Summary, RangeSelection and fetch errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class InvalidRangeError(ValueError):
    """Raised when a value is not one of the selectable lookback windows."""


class PriceFetchError(Exception):
    """Base class for failures surfaced to the user as an error banner."""


class TransportError(PriceFetchError):
    """Network failure, non-2xx status or malformed payload."""


class EmptyResultError(PriceFetchError):
    """Well-formed response that carries zero samples."""


# ---------------------------------------------------------------------------
# Range selection
# ---------------------------------------------------------------------------

class RangeSelection(Enum):
    ONE_DAY = "1"
    SEVEN_DAYS = "7"
    FOURTEEN_DAYS = "14"
    THIRTY_DAYS = "30"
    NINETY_DAYS = "90"
    HALF_YEAR = "180"
    ONE_YEAR = "365"

    @property
    def days(self) -> int:
        return int(self.value)

    @property
    def label(self) -> str:
        return "1Y" if self is RangeSelection.ONE_YEAR else f"{self.value}D"

    @property
    def is_intraday(self) -> bool:
        """True for the 1D view, which is fetched as today's local window."""
        return self is RangeSelection.ONE_DAY

    @classmethod
    def parse(cls, value: Union["RangeSelection", str, int]) -> "RangeSelection":
        """Accept a member, a value ("7"), a label ("7D") or a day count (7)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidRangeError(f"invalid range: {value!r}")
        if isinstance(value, int):
            value = str(value)
        if isinstance(value, str):
            key = value.strip().upper()
            for member in cls:
                if key in (member.value, member.label):
                    return member
        raise InvalidRangeError(f"invalid range: {value!r}")


DEFAULT_RANGE = RangeSelection.THIRTY_DAYS


# ---------------------------------------------------------------------------
# Samples and summary
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PricePoint:
    """One (timestamp, price) sample."""
    timestamp_ms: int   # epoch milliseconds
    price: float        # USD


Series = Tuple[PricePoint, ...]


@dataclass(frozen=True)
class Summary:
    latest_price: float
    change_absolute: float
    change_percent: Optional[float]   # None when the first price is zero
