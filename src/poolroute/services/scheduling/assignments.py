"""Build a technician's service list for a given day."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Sequence

from ...models.domain import DailyAssignment, Route, ServiceStatus, ServiceVisit
from .resolver import is_due


def _filter_routes(routes: Iterable[Route], technician_id: str | None) -> list[Route]:
    if not technician_id:
        return list(routes)
    return [route for route in routes if route.tech_id == technician_id]


def _history_by_route(visits: Iterable[ServiceVisit], service_date: date) -> dict[str, ServiceVisit]:
    history: dict[str, ServiceVisit] = {}
    for visit in visits:
        if visit.service_date == service_date:
            history[visit.route_id] = visit
    return history


def build_daily_assignments(
    routes: Sequence[Route],
    service_date: date,
    *,
    technician_id: str | None = None,
    service_history: Iterable[ServiceVisit] = (),
) -> list[DailyAssignment]:
    """Return the routes due on ``service_date`` with their visit status.

    Routes without a recorded visit that day are reported as PENDING.
    """
    candidates = _filter_routes(routes, technician_id)
    history = _history_by_route(service_history, service_date)

    assignments: list[DailyAssignment] = []
    for route in candidates:
        if not is_due(route, service_date):
            continue
        visit = history.get(route.route_id) if route.route_id else None
        assignments.append(
            DailyAssignment(
                route_id=route.route_id,
                pool_id=route.pool_id,
                tech_id=route.tech_id,
                service_date=service_date,
                status=visit.status if visit else ServiceStatus.PENDING,
                serviced_by=visit.technician_id if visit else None,
                notes=visit.notes if visit else None,
            )
        )

    logging.info(
        f"{len(assignments)} of {len(candidates)} routes due on {service_date.isoformat()}"
        + (f" for technician {technician_id}" if technician_id else "")
    )
    return assignments
