"""Sources of "today" for defaulting the expense date."""

from collections.abc import Callable
from datetime import date, datetime
from zoneinfo import ZoneInfo

Clock = Callable[[], date]


def system_clock(tz_name: str | None = None) -> Clock:
    """Server-local date, or today in ``tz_name`` when one is configured."""
    if not tz_name:
        return date.today
    zone = ZoneInfo(tz_name)
    return lambda: datetime.now(zone).date()


def fixed_clock(day: date) -> Clock:
    return lambda: day
