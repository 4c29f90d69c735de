"""
Calendar helpers shared by the ledgers.

Dates are keyed as ISO strings (YYYY-MM-DD) in the configured time zone.
"""

from datetime import date, datetime, timedelta
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from wonbyte.config import load_settings

# Monday-first, matching date.weekday()
WEEKDAY_LABELS = ["월", "화", "수", "목", "금", "토", "일"]

Clock = Callable[[], datetime]


def system_clock(timezone: Optional[str] = None) -> Clock:
    """Return a clock reading the wall time in the given (or configured) zone."""
    zone = ZoneInfo(timezone or load_settings().timezone)
    return lambda: datetime.now(zone)


def date_key(value: date | datetime) -> str:
    """Format a date as YYYY-MM-DD."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_date_key(key: str) -> date:
    return date.fromisoformat(key)


def last_n_days(today: date, n: int) -> list[date]:
    """The last n calendar days, oldest first, today inclusive."""
    return [today - timedelta(days=offset) for offset in range(n - 1, -1, -1)]


def weekday_label(day: date) -> str:
    return WEEKDAY_LABELS[day.weekday()]


def iso_week_key(day: date) -> str:
    """Period key for weekly quests, e.g. 2026-W42."""
    year, week, _ = day.isocalendar()
    return f"{year}-W{week:02d}"
