from datetime import datetime
from typing import Optional

from dateutil import tz

EMPTY = "-"


def format_timestamp(ts: Optional[int], fmt: str = "%c") -> str:
    """Render a unix timestamp in the local timezone."""
    if ts is None:
        return EMPTY
    return datetime.fromtimestamp(int(ts), tz=tz.tzlocal()).strftime(fmt)
