"""Relative time windows used to restrict list and total queries.

A window is selected by a short or long alias (``d``/``day``, ``w``/``week``,
...) and resolved against "now" into an absolute cutoff: only records whose
start time is strictly greater than the cutoff are kept.
"""
import logging
from typing import NamedTuple, Optional, Union

from ..schemas.filters import TimeFilter

logger = logging.getLogger(__name__)

UNRECOGNIZED_LABEL = "Filter not recognized. No filter will be applied."


class FilterWindow(NamedTuple):
    filter: TimeFilter
    cutoff: int  # unix seconds, 0 = no lower bound
    recognized: bool
    label: str


def resolve(selector: Union[TimeFilter, str, None], now: int) -> FilterWindow:
    if isinstance(selector, TimeFilter):
        parsed: Optional[TimeFilter] = selector
    else:
        parsed = TimeFilter.parse(selector)

    if parsed is None:
        logger.warning("Unrecognized time filter %r; no filter will be applied", selector)
        return FilterWindow(TimeFilter.ALL, 0, False, UNRECOGNIZED_LABEL)

    lookback = parsed.lookback
    cutoff = 0 if lookback is None else int(now - lookback.total_seconds())
    return FilterWindow(parsed, cutoff, True, parsed.label)
