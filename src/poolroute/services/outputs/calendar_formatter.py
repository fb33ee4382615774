"""Serializers for route calendar outputs."""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable

from ...models.domain import Route
from ..scheduling.dates import iso_week_number


def _occurrence_row(route: Route, occurrence: date) -> dict:
    return {
        "route_id": route.route_id,
        "pool_id": route.pool_id,
        "tech_id": route.tech_id,
        "date": occurrence.isoformat(),
        "day_of_week": route.day_of_week.value,
        "iso_week": iso_week_number(occurrence),
        "frequency": route.frequency.value,
    }


def calendar_to_json(route: Route, occurrences: Iterable[date]) -> list[dict]:
    return [_occurrence_row(route, occurrence) for occurrence in occurrences]


def calendar_to_csv(route: Route, occurrences: Iterable[date]) -> str:
    buffer = io.StringIO()
    fieldnames = ["route_id", "pool_id", "tech_id", "date", "day_of_week", "iso_week", "frequency"]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for occurrence in occurrences:
        writer.writerow(_occurrence_row(route, occurrence))
    return buffer.getvalue()
