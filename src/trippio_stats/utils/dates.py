"""Calendar windows expressed in the caller's local time zone."""

from __future__ import annotations

import calendar
from datetime import datetime, time
from typing import Tuple


def local_now() -> datetime:
    return datetime.now().astimezone()


def month_to_date_window(now: datetime) -> Tuple[datetime, datetime]:
    """Return (first day of ``now``'s month at midnight, ``now``)."""

    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return start, now


def month_window(
    year: int, month: int, tz_source: datetime
) -> Tuple[datetime, datetime]:
    """Full calendar month, borrowing the time zone of ``tz_source``."""

    if not 1 <= month <= 12:
        raise ValueError("month must be between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    tzinfo = tz_source.tzinfo
    start = datetime(year, month, 1, tzinfo=tzinfo)
    end = datetime.combine(
        start.replace(day=last_day).date(), time.max, tzinfo=tzinfo
    )
    return start, end
