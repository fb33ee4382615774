"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings
from ...services.scheduling import CalendarContext

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/calendar", status_code=status.HTTP_200_OK)
def health_calendar() -> dict:
    """Report the company calendar day the scheduler is currently using."""
    context = CalendarContext.for_timezone(settings.company_timezone)
    return {
        "timezone": settings.company_timezone,
        "today": context.today().isoformat(),
        "search_horizon_weeks": settings.search_horizon_weeks,
    }
