"""Route invariant checks and record-to-Route conversion."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from ...models.domain import DayOfWeek, Frequency, Route

MIN_ISO_WEEK = 1
MAX_ISO_WEEK = 53


class InvalidRouteConfiguration(Exception):
    """Raised when a Route violates its scheduling invariants.

    This signals an upstream bug (the record should have passed input
    validation already), so callers report it as a server error.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


def _require_non_negative_int(value: Any, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRouteConfiguration(f"{field} must be an integer, got {value!r}.", field=field)
    if value < 0:
        raise InvalidRouteConfiguration(f"{field} must be 0 or greater, got {value}.", field=field)


def validate_route(route: Route) -> None:
    if not isinstance(route.day_of_week, DayOfWeek):
        raise InvalidRouteConfiguration(f"Unknown day of week {route.day_of_week!r}.", field="day_of_week")
    if not isinstance(route.frequency, Frequency):
        raise InvalidRouteConfiguration(f"Unknown frequency {route.frequency!r}.", field="frequency")
    for field_name in ("start_on", "stop_after", "anchor_date"):
        value = getattr(route, field_name)
        if value is None and field_name != "start_on":
            continue
        if isinstance(value, datetime) or not isinstance(value, date):
            raise InvalidRouteConfiguration(f"{field_name} must be a calendar date, got {value!r}.", field=field_name)
    _require_non_negative_int(route.skip_weeks, "skip_weeks")
    _require_non_negative_int(route.week_offset, "week_offset")
    if route.stop_after is not None and route.stop_after < route.start_on:
        raise InvalidRouteConfiguration(
            f"stop_after ({route.stop_after.isoformat()}) is before start_on ({route.start_on.isoformat()}).",
            field="stop_after",
        )
    for week in route.skip_week_numbers:
        if isinstance(week, bool) or not isinstance(week, int) or not MIN_ISO_WEEK <= week <= MAX_ISO_WEEK:
            raise InvalidRouteConfiguration(
                f"skip_week_numbers entries must be ISO week numbers {MIN_ISO_WEEK}-{MAX_ISO_WEEK}, got {week!r}.",
                field="skip_week_numbers",
            )


def _coerce_enum(enum_cls, value: Any, field: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError as exc:
        raise InvalidRouteConfiguration(f"Unknown {field} {value!r}.", field=field) from exc


def _coerce_date(value: Any, field: str) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as exc:
        raise InvalidRouteConfiguration(f"Unable to parse {field} from value {value!r}.", field=field) from exc


_TRUE_STRINGS = {"true", "1", "yes", "y", "t"}
_FALSE_STRINGS = {"false", "0", "no", "n", "f", ""}


def _coerce_count(value: Any, field: str) -> Any:
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise InvalidRouteConfiguration(f"Unable to parse {field} from value {value!r}.", field=field) from exc
    return value


def _coerce_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
    raise InvalidRouteConfiguration(f"Unable to parse {field} from value {value!r}.", field=field)


def _first(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def route_from_record(record: Mapping[str, Any]) -> Route:
    """Build a validated Route from a stored record.

    Accepts both snake_case and the camelCase keys used by the route store
    (``dayOfWeek``, ``startOn``, ...).
    """
    start_on = _coerce_date(_first(record, "start_on", "startOn"), "start_on")
    if start_on is None:
        raise InvalidRouteConfiguration("start_on is required.", field="start_on")
    skip_week_numbers: Iterable[Any] = _first(record, "skip_week_numbers", "skipWeekNumbers", default=())
    return Route(
        day_of_week=_coerce_enum(DayOfWeek, _first(record, "day_of_week", "dayOfWeek"), "day_of_week"),
        frequency=_coerce_enum(Frequency, _first(record, "frequency"), "frequency"),
        start_on=start_on,
        stop_after=_coerce_date(_first(record, "stop_after", "stopAfter"), "stop_after"),
        skip_weeks=_coerce_count(_first(record, "skip_weeks", "skipWeeks", default=0), "skip_weeks"),
        anchor_date=_coerce_date(_first(record, "anchor_date", "anchorDate"), "anchor_date"),
        week_offset=_coerce_count(_first(record, "week_offset", "weekOffset", default=0), "week_offset"),
        skip_week_numbers=frozenset(_coerce_count(week, "skip_week_numbers") for week in skip_week_numbers),
        active=_coerce_bool(_first(record, "active", default=True), "active"),
        route_id=_first(record, "route_id", "id"),
        pool_id=_first(record, "pool_id", "poolId"),
        tech_id=_first(record, "tech_id", "techId"),
    )
