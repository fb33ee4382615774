"""Domain models for recurring pool-service routes and visits."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @property
    def weekday(self) -> int:
        """Index compatible with ``date.weekday()`` (Monday is 0)."""
        return _WEEKDAY_INDEX[self]

    @classmethod
    def from_date(cls, value: date) -> "DayOfWeek":
        return _WEEKDAYS[value.weekday()]


_WEEKDAYS = tuple(DayOfWeek)
_WEEKDAY_INDEX = {day: index for index, day in enumerate(_WEEKDAYS)}


class Frequency(str, Enum):
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    CUSTOM = "CUSTOM"

    @property
    def label(self) -> str:
        return _FREQUENCY_LABELS[self]


_FREQUENCY_LABELS = {
    Frequency.WEEKLY: "Weekly",
    Frequency.BIWEEKLY: "Bi-weekly",
    Frequency.MONTHLY: "Monthly",
    Frequency.CUSTOM: "Custom",
}


class ServiceStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass(slots=True, frozen=True)
class Route:
    """Recurring assignment of a technician to a pool on a fixed weekday.

    Construction validates the scheduling invariants and raises
    ``InvalidRouteConfiguration`` on violation, so every ``Route`` that reaches
    the resolver is well formed.
    """

    day_of_week: DayOfWeek
    frequency: Frequency
    start_on: date
    stop_after: Optional[date] = None
    skip_weeks: int = 0
    anchor_date: Optional[date] = None
    week_offset: int = 0
    skip_week_numbers: frozenset[int] = field(default_factory=frozenset)
    active: bool = True
    route_id: Optional[str] = None
    pool_id: Optional[str] = None
    tech_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.skip_week_numbers, frozenset):
            object.__setattr__(self, "skip_week_numbers", frozenset(self.skip_week_numbers))
        from ..services.scheduling.validation import validate_route

        validate_route(self)

    @property
    def effective_anchor(self) -> date:
        return self.anchor_date or self.start_on


@dataclass(slots=True, frozen=True)
class ServiceVisit:
    """A recorded (or scheduled) service visit for a route on a given day."""

    route_id: str
    service_date: date
    status: ServiceStatus = ServiceStatus.PENDING
    technician_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass(slots=True)
class DailyAssignment:
    route_id: Optional[str]
    pool_id: Optional[str]
    tech_id: Optional[str]
    service_date: date
    status: ServiceStatus
    serviced_by: Optional[str] = None
    notes: Optional[str] = None
