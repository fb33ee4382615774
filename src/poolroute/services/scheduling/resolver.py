"""Resolve when a recurring route is due for service.

Every function here is a pure function of its arguments: no clock is read and
nothing is cached, so results are safe to compute concurrently for any number
of routes.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta
from typing import Iterator, Optional

from ...models.domain import Route
from .cadence import cadence_matches
from .dates import CalendarContext, as_calendar_date, iso_week_number

DEFAULT_HORIZON_WEEKS = 104


def _shift(value: date, days: int) -> Optional[date]:
    """``value`` moved forward by ``days``, or None past the last representable date."""
    if (date.max - value).days < days:
        return None
    return value + timedelta(days=days)


def is_due(route: Route, on_date: date | datetime, context: CalendarContext | None = None) -> bool:
    """Return True when ``route`` should be serviced on ``on_date``.

    Time of day is ignored. When ``context`` is given, aware datetimes are first
    converted to the company's local calendar day.
    """
    day = as_calendar_date(on_date, context)
    if not route.active:
        return False
    if day.weekday() != route.day_of_week.weekday:
        return False
    if day < route.start_on:
        return False
    if route.stop_after is not None and day > route.stop_after:
        return False
    if iso_week_number(day) in route.skip_week_numbers:
        return False
    return cadence_matches(route, day)


def next_due_date(
    route: Route,
    from_date: date | datetime,
    *,
    inclusive: bool = False,
    horizon_weeks: int = DEFAULT_HORIZON_WEEKS,
    context: CalendarContext | None = None,
) -> Optional[date]:
    """Earliest due date after ``from_date`` (or on it when ``inclusive``).

    Returns ``None`` when the route is inactive, has stopped, or has no due date
    within ``horizon_weeks`` of ``from_date``.
    """
    origin = as_calendar_date(from_date, context)
    if not route.active:
        return None

    horizon_end = _shift(origin, horizon_weeks * 7) or date.max
    candidate = origin if inclusive else _shift(origin, 1)
    if candidate is None:
        return None
    if candidate < route.start_on:
        candidate = route.start_on
    candidate = _shift(candidate, (route.day_of_week.weekday - candidate.weekday()) % 7)

    while candidate is not None and candidate <= horizon_end:
        if route.stop_after is not None and candidate > route.stop_after:
            return None
        if is_due(route, candidate):
            return candidate
        candidate = _shift(candidate, 7)

    logging.debug(
        f"No due date for route {route.route_id or '<unsaved>'} within {horizon_weeks} weeks of {origin.isoformat()}"
    )
    return None


class Occurrences:
    """Due dates of a route within an inclusive date range.

    Iteration is lazy and each ``iter()`` walks the range again from the start.
    """

    def __init__(
        self,
        route: Route,
        start_date: date,
        end_date: date,
        *,
        horizon_weeks: int = DEFAULT_HORIZON_WEEKS,
    ) -> None:
        self.route = route
        self.start_date = start_date
        self.end_date = end_date
        self.horizon_weeks = horizon_weeks

    def __iter__(self) -> Iterator[date]:
        if self.start_date > self.end_date:
            return
        current = next_due_date(
            self.route,
            self.start_date,
            inclusive=True,
            horizon_weeks=self._weeks_to_end(self.start_date),
        )
        while current is not None and current <= self.end_date:
            yield current
            current = next_due_date(self.route, current, horizon_weeks=self._weeks_to_end(current))

    def _weeks_to_end(self, cursor: date) -> int:
        # The search must reach end_date however sparse the cadence is.
        return max(self.horizon_weeks, math.ceil((self.end_date - cursor).days / 7))

    def __repr__(self) -> str:
        return (
            f"Occurrences(route_id={self.route.route_id!r}, "
            f"start_date={self.start_date.isoformat()}, end_date={self.end_date.isoformat()})"
        )


def occurrences_in_range(
    route: Route,
    start_date: date | datetime,
    end_date: date | datetime,
    *,
    horizon_weeks: int = DEFAULT_HORIZON_WEEKS,
    context: CalendarContext | None = None,
) -> Occurrences:
    return Occurrences(
        route,
        as_calendar_date(start_date, context),
        as_calendar_date(end_date, context),
        horizon_weeks=horizon_weeks,
    )
