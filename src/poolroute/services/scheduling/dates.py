"""Calendar arithmetic used by the schedule resolver.

All helpers work on calendar days. Weeks are Monday-aligned and week numbers
follow ISO-8601 (week 1 contains the first Thursday of the year).
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Callable, Optional
from zoneinfo import ZoneInfo

LAST_OCCURRENCE = -1


def week_start(value: date) -> date:
    """Monday of the week containing ``value``."""
    return value - timedelta(days=value.weekday())


def weeks_between(start: date, end: date) -> int:
    """Whole weeks from the week of ``start`` to the week of ``end``.

    Negative when ``end`` falls in an earlier week than ``start``.
    """
    return (week_start(end) - week_start(start)).days // 7


def iso_week_number(value: date) -> int:
    return value.isocalendar().week


def next_weekday_on_or_after(value: date, weekday: int) -> date:
    return value + timedelta(days=(weekday - value.weekday()) % 7)


def weekday_ordinal(value: date) -> int:
    """1-based occurrence of ``value``'s weekday within its month (1..5)."""
    return (value.day - 1) // 7 + 1


def is_last_weekday_of_month(value: date) -> bool:
    days_in_month = calendar.monthrange(value.year, value.month)[1]
    return value.day + 7 > days_in_month


def monthly_slot(value: date) -> int:
    """Ordinal slot of ``value`` within its month.

    Returns ``LAST_OCCURRENCE`` when ``value`` is the final occurrence of its
    weekday in the month, otherwise its 1-based ordinal (1..4).
    """
    if is_last_weekday_of_month(value):
        return LAST_OCCURRENCE
    return weekday_ordinal(value)


def resolve_timezone(name: str) -> tzinfo:
    if name.strip().upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


@dataclass(slots=True, frozen=True)
class CalendarContext:
    """Company-local calendar used to turn instants into service days.

    ``clock`` returns the current aware instant; tests inject a fixed one.
    """

    tz: tzinfo = timezone.utc
    clock: Optional[Callable[[], datetime]] = None

    @classmethod
    def for_timezone(cls, name: str, clock: Optional[Callable[[], datetime]] = None) -> "CalendarContext":
        return cls(tz=resolve_timezone(name), clock=clock)

    def now(self) -> datetime:
        instant = self.clock() if self.clock else datetime.now(timezone.utc)
        return self.localize(instant)

    def today(self) -> date:
        return self.now().date()

    def localize(self, instant: datetime) -> datetime:
        if instant.tzinfo is None:
            return instant.replace(tzinfo=self.tz)
        return instant.astimezone(self.tz)

    def local_date(self, value: date | datetime) -> date:
        if isinstance(value, datetime):
            return self.localize(value).date()
        return value


def as_calendar_date(value: date | datetime, context: CalendarContext | None = None) -> date:
    """Reduce ``value`` to a calendar day, ignoring time of day."""
    if context is not None:
        return context.local_date(value)
    if isinstance(value, datetime):
        return value.date()
    return value
