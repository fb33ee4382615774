"""Route schedule request/response schemas."""

from __future__ import annotations

import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, model_validator

from ..models.domain import DayOfWeek, Frequency, Route, ServiceStatus, ServiceVisit


class RouteModel(BaseModel):
    id: Optional[str] = Field(default=None, description="Route identifier from the route store.")
    pool_id: Optional[str] = None
    tech_id: Optional[str] = Field(default=None, description="Assigned technician, if any.")
    day_of_week: DayOfWeek
    frequency: Frequency
    start_on: datetime.date
    stop_after: Optional[datetime.date] = None
    skip_weeks: int = Field(default=0, ge=0)
    anchor_date: Optional[datetime.date] = Field(
        default=None,
        description="Reference date for biweekly/monthly/custom cadence; defaults to start_on.",
    )
    week_offset: int = Field(default=0, ge=0)
    skip_week_numbers: List[Annotated[int, Field(ge=1, le=53)]] = Field(
        default_factory=list,
        description="ISO week numbers (1-53) with no service, e.g. holiday weeks.",
    )
    active: bool = True

    @model_validator(mode="after")
    def _check_stop_after(self) -> "RouteModel":
        if self.stop_after is not None and self.stop_after < self.start_on:
            raise ValueError("stop_after must be on or after start_on")
        return self

    def to_domain(self) -> Route:
        return Route(
            day_of_week=self.day_of_week,
            frequency=self.frequency,
            start_on=self.start_on,
            stop_after=self.stop_after,
            skip_weeks=self.skip_weeks,
            anchor_date=self.anchor_date,
            week_offset=self.week_offset,
            skip_week_numbers=frozenset(self.skip_week_numbers),
            active=self.active,
            route_id=self.id,
            pool_id=self.pool_id,
            tech_id=self.tech_id,
        )


class ServiceVisitModel(BaseModel):
    route_id: str
    service_date: datetime.date
    status: ServiceStatus = ServiceStatus.PENDING
    technician_id: Optional[str] = None
    notes: Optional[str] = None

    def to_domain(self) -> ServiceVisit:
        return ServiceVisit(
            route_id=self.route_id,
            service_date=self.service_date,
            status=self.status,
            technician_id=self.technician_id,
            notes=self.notes,
        )


class DueCheckRequest(BaseModel):
    route: RouteModel
    date: Optional[datetime.date] = Field(default=None, description="Day to check; defaults to today in the company timezone.")


class DueCheckResponse(BaseModel):
    route_id: Optional[str]
    date: datetime.date
    due: bool


class NextDueRequest(BaseModel):
    route: RouteModel
    from_date: Optional[datetime.date] = None
    inclusive: bool = Field(default=False, description="Whether from_date itself may be returned.")


class NextDueResponse(BaseModel):
    route_id: Optional[str]
    from_date: datetime.date
    next_due_date: Optional[datetime.date]
    frequency_label: str


class CalendarRequest(BaseModel):
    route: RouteModel
    start_date: datetime.date
    end_date: datetime.date


class OccurrenceModel(BaseModel):
    route_id: Optional[str] = None
    pool_id: Optional[str] = None
    tech_id: Optional[str] = None
    date: datetime.date
    day_of_week: DayOfWeek
    iso_week: int
    frequency: Frequency


class CalendarResponse(BaseModel):
    route_id: Optional[str]
    start_date: datetime.date
    end_date: datetime.date
    count: int
    occurrences: List[OccurrenceModel]


class DailyAssignmentsRequest(BaseModel):
    technician_id: Optional[str] = None
    date: Optional[datetime.date] = None
    routes: List[RouteModel]
    service_history: List[ServiceVisitModel] = Field(default_factory=list)


class DailyAssignmentModel(BaseModel):
    route_id: Optional[str]
    pool_id: Optional[str]
    tech_id: Optional[str]
    service_date: datetime.date
    status: ServiceStatus
    serviced_by: Optional[str] = None
    notes: Optional[str] = None


class DailyAssignmentsResponse(BaseModel):
    date: datetime.date
    technician_id: Optional[str]
    assignments: List[DailyAssignmentModel]
