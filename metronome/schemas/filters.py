from datetime import timedelta
from enum import Enum
from typing import Optional


class TimeFilter(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    SEMIANNUAL = "semiannual"
    YEAR = "year"
    ALL = "all"

    @property
    def lookback(self) -> Optional[timedelta]:
        return _LOOKBACKS[self]

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, token: Optional[str]) -> Optional["TimeFilter"]:
        """Map an alias to a filter. Empty means ALL; unknown tokens give None."""
        if token is None or not token.strip():
            return cls.ALL
        return _ALIASES.get(token.strip().lower())


_LOOKBACKS = {
    TimeFilter.DAY: timedelta(days=1),
    TimeFilter.WEEK: timedelta(weeks=1),
    TimeFilter.MONTH: timedelta(days=30),
    TimeFilter.QUARTER: timedelta(weeks=13),
    TimeFilter.SEMIANNUAL: timedelta(weeks=26),
    TimeFilter.YEAR: timedelta(days=365),
    TimeFilter.ALL: None,
}

_LABELS = {
    TimeFilter.DAY: "Filtering events to those started in the last day",
    TimeFilter.WEEK: "Filtering events to those started in the last week",
    TimeFilter.MONTH: "Filtering events to those started in the last 30 days",
    TimeFilter.QUARTER: "Filtering events to those started in the last quarter (13 weeks)",
    TimeFilter.SEMIANNUAL: "Filtering events to those started in the last 6 months (26 weeks)",
    TimeFilter.YEAR: "Filtering events to those started in the last year (365 days)",
    TimeFilter.ALL: "No filter will be applied",
}

_ALIASES = {
    "d": TimeFilter.DAY,
    "day": TimeFilter.DAY,
    "w": TimeFilter.WEEK,
    "week": TimeFilter.WEEK,
    "m": TimeFilter.MONTH,
    "month": TimeFilter.MONTH,
    "q": TimeFilter.QUARTER,
    "quarter": TimeFilter.QUARTER,
    "s": TimeFilter.SEMIANNUAL,
    "semi": TimeFilter.SEMIANNUAL,
    "semiannual": TimeFilter.SEMIANNUAL,
    "y": TimeFilter.YEAR,
    "year": TimeFilter.YEAR,
    "all": TimeFilter.ALL,
}

# Closed set of tokens a presentation layer may offer.
FILTER_CHOICES = tuple(_ALIASES)
