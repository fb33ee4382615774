"""Cadence tests deciding whether a week (or month slot) is in rotation."""

from __future__ import annotations

from datetime import date

from ...models.domain import Frequency, Route
from .dates import (
    LAST_OCCURRENCE,
    is_last_weekday_of_month,
    monthly_slot,
    next_weekday_on_or_after,
    weekday_ordinal,
    weeks_between,
)
from .validation import InvalidRouteConfiguration


def _weekly_rotation(route: Route, on_date: date, period: int) -> bool:
    elapsed = weeks_between(route.effective_anchor, on_date)
    return (elapsed + route.week_offset) % period == 0


def anchor_monthly_slot(route: Route) -> int:
    aligned = next_weekday_on_or_after(route.effective_anchor, route.day_of_week.weekday)
    return monthly_slot(aligned)


def _monthly(route: Route, on_date: date) -> bool:
    slot = anchor_monthly_slot(route)
    if slot == LAST_OCCURRENCE:
        return is_last_weekday_of_month(on_date)
    return weekday_ordinal(on_date) == slot


def cadence_matches(route: Route, on_date: date) -> bool:
    """Return True when ``on_date`` falls in a week the route's cadence selects.

    Assumes ``on_date`` is already on the route's weekday.
    """
    match route.frequency:
        case Frequency.WEEKLY:
            return True
        case Frequency.BIWEEKLY:
            return _weekly_rotation(route, on_date, 2)
        case Frequency.MONTHLY:
            return _monthly(route, on_date)
        case Frequency.CUSTOM:
            return _weekly_rotation(route, on_date, route.skip_weeks + 1)
        case _:
            raise InvalidRouteConfiguration(f"Unknown frequency {route.frequency!r}.", field="frequency")
