"""Recurring route scheduling."""

from .assignments import build_daily_assignments
from .dates import CalendarContext, iso_week_number, week_start, weeks_between
from .resolver import DEFAULT_HORIZON_WEEKS, Occurrences, is_due, next_due_date, occurrences_in_range
from .validation import InvalidRouteConfiguration, route_from_record, validate_route

__all__ = [
    "DEFAULT_HORIZON_WEEKS",
    "CalendarContext",
    "InvalidRouteConfiguration",
    "Occurrences",
    "build_daily_assignments",
    "is_due",
    "iso_week_number",
    "next_due_date",
    "occurrences_in_range",
    "route_from_record",
    "validate_route",
    "week_start",
    "weeks_between",
]
