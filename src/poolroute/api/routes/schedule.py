"""Route schedule endpoints."""

from __future__ import annotations

import logging
from datetime import date
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import PlainTextResponse

from ...config import settings
from ...schemas.schedule import (
    CalendarRequest,
    CalendarResponse,
    DailyAssignmentModel,
    DailyAssignmentsRequest,
    DailyAssignmentsResponse,
    DueCheckRequest,
    DueCheckResponse,
    NextDueRequest,
    NextDueResponse,
    OccurrenceModel,
)
from ...services.outputs.calendar_formatter import calendar_to_csv, calendar_to_json
from ...services.scheduling import (
    CalendarContext,
    InvalidRouteConfiguration,
    build_daily_assignments,
    is_due,
    next_due_date,
    occurrences_in_range,
)

router = APIRouter(prefix="/schedule", tags=["schedule"])


def _today() -> date:
    return CalendarContext.for_timezone(settings.company_timezone).today()


def _configuration_error(exc: InvalidRouteConfiguration) -> HTTPException:
    logging.exception(f"Invalid route configuration ({exc.field or 'route'}): {exc}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Invalid route configuration: {exc}",
    )


@router.post("/due", response_model=DueCheckResponse, status_code=status.HTTP_200_OK)
def check_due(payload: DueCheckRequest) -> DueCheckResponse:
    """Report whether a route is due on a given day (today by default)."""
    try:
        route = payload.route.to_domain()
        on_date = payload.date or _today()
        return DueCheckResponse(route_id=route.route_id, date=on_date, due=is_due(route, on_date))
    except InvalidRouteConfiguration as exc:
        raise _configuration_error(exc) from exc


@router.post("/next", response_model=NextDueResponse, status_code=status.HTTP_200_OK)
def get_next_due(payload: NextDueRequest) -> NextDueResponse:
    """Next service date for display, e.g. "next service: 2024-03-18"."""
    try:
        route = payload.route.to_domain()
        from_date = payload.from_date or _today()
        upcoming = next_due_date(
            route,
            from_date,
            inclusive=payload.inclusive,
            horizon_weeks=settings.search_horizon_weeks,
        )
        return NextDueResponse(
            route_id=route.route_id,
            from_date=from_date,
            next_due_date=upcoming,
            frequency_label=route.frequency.label,
        )
    except InvalidRouteConfiguration as exc:
        raise _configuration_error(exc) from exc


@router.post("/calendar", response_model=CalendarResponse, status_code=status.HTTP_200_OK)
def get_route_calendar(
    payload: CalendarRequest,
    format: Literal["json", "csv"] = Query(default="json", description="Response format."),
):
    if payload.end_date < payload.start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must be on or after start_date.",
        )
    span_days = (payload.end_date - payload.start_date).days + 1
    if span_days > settings.max_calendar_days:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Calendar range of {span_days} days exceeds the limit of {settings.max_calendar_days} days.",
        )
    try:
        route = payload.route.to_domain()
        occurrences = list(
            occurrences_in_range(
                route,
                payload.start_date,
                payload.end_date,
                horizon_weeks=settings.search_horizon_weeks,
            )
        )
    except InvalidRouteConfiguration as exc:
        raise _configuration_error(exc) from exc

    if format == "csv":
        return PlainTextResponse(calendar_to_csv(route, occurrences), media_type="text/csv")
    return CalendarResponse(
        route_id=route.route_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        count=len(occurrences),
        occurrences=[OccurrenceModel(**row) for row in calendar_to_json(route, occurrences)],
    )


@router.post("/today", response_model=DailyAssignmentsResponse, status_code=status.HTTP_200_OK)
def get_daily_assignments(payload: DailyAssignmentsRequest) -> DailyAssignmentsResponse:
    """Routes due for a technician on a day, with any recorded visit status."""
    try:
        routes = [route.to_domain() for route in payload.routes]
        service_date = payload.date or _today()
        assignments = build_daily_assignments(
            routes,
            service_date,
            technician_id=payload.technician_id,
            service_history=[visit.to_domain() for visit in payload.service_history],
        )
    except InvalidRouteConfiguration as exc:
        raise _configuration_error(exc) from exc

    return DailyAssignmentsResponse(
        date=service_date,
        technician_id=payload.technician_id,
        assignments=[
            DailyAssignmentModel(
                route_id=assignment.route_id,
                pool_id=assignment.pool_id,
                tech_id=assignment.tech_id,
                service_date=assignment.service_date,
                status=assignment.status,
                serviced_by=assignment.serviced_by,
                notes=assignment.notes,
            )
            for assignment in assignments
        ],
    )
