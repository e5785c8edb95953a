from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into time."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_local(moment: datetime, tz_name: str) -> datetime:
    """Convert an aware timestamp to the configured zone; naive ones are already local."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(ZoneInfo(tz_name))


def is_known_timezone(name: str) -> bool:
    """True when `name` resolves to an IANA zone."""
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError, OSError):
        return False
    return True


def minutes_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def month_context(moment: date) -> str:
    """Year-month tag used as the uniqueness context of monthly badges."""
    return f"{moment.year:04d}-{moment.month:02d}"


def month_bounds(moment: date) -> tuple[date, date]:
    first = moment.replace(day=1)
    if first.month == 12:
        next_first = first.replace(year=first.year + 1, month=1)
    else:
        next_first = first.replace(month=first.month + 1)
    return first, next_first - timedelta(days=1)


def week_bounds(moment: date) -> tuple[date, date]:
    """Monday..Sunday week containing the given day."""
    start = moment - timedelta(days=moment.weekday())
    return start, start + timedelta(days=6)


def js_weekday(moment: date) -> int:
    """Weekday number in the stored working-day convention (0 = Sunday .. 6 = Saturday)."""
    return (moment.weekday() + 1) % 7


@dataclass(frozen=True)
class QuarterWindow:
    tag: str
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def quarter_tag(moment: date) -> str:
    return f"{moment.year}-Q{(moment.month - 1) // 3 + 1}"


def quarter_window(moment: date) -> QuarterWindow:
    q = (moment.month - 1) // 3 + 1
    start = date(moment.year, (q - 1) * 3 + 1, 1)
    _, end = month_bounds(date(moment.year, q * 3, 1))
    return QuarterWindow(tag=quarter_tag(moment), start=start, end=end)


def count_in_range(days: Iterable[date], start: date, end: date) -> int:
    return sum(1 for d in days if start <= d <= end)


def as_date(value: Optional[object]) -> Optional[date]:
    """Normalize DATE/DATETIME/str column values to date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value)[:10])
