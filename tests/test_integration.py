from datetime import date, datetime, timezone

import pytest
from fastapi.testclient import TestClient

from src.poolroute.main import create_app
from src.poolroute.services.scheduling import InvalidRouteConfiguration


def _route_payload(**overrides) -> dict:
    payload = {
        "id": "route-1",
        "pool_id": "pool-1",
        "tech_id": "tech-1",
        "day_of_week": "MONDAY",
        "frequency": "BIWEEKLY",
        "start_on": "2024-01-01",
        "anchor_date": "2024-01-01",
        "skip_weeks": 0,
        "week_offset": 0,
        "skip_week_numbers": [],
        "active": True,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def fixed_today(monkeypatch: pytest.MonkeyPatch) -> date:
    from src.poolroute.api.routes import schedule as schedule_routes

    today = date(2024, 1, 15)
    monkeypatch.setattr(schedule_routes, "_today", lambda: today)
    return today


def test_health_endpoint(api_client: TestClient):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_due_endpoint_biweekly(api_client: TestClient):
    due = api_client.post("/api/schedule/due", json={"route": _route_payload(), "date": "2024-01-15"})
    off = api_client.post("/api/schedule/due", json={"route": _route_payload(), "date": "2024-01-22"})

    assert due.status_code == 200
    assert due.json() == {"route_id": "route-1", "date": "2024-01-15", "due": True}
    assert off.json()["due"] is False


def test_due_endpoint_defaults_to_company_today(api_client: TestClient, fixed_today: date):
    response = api_client.post("/api/schedule/due", json={"route": _route_payload()})

    assert response.status_code == 200
    assert response.json()["date"] == fixed_today.isoformat()
    assert response.json()["due"] is True


def test_next_endpoint_returns_iso_date(api_client: TestClient):
    response = api_client.post(
        "/api/schedule/next",
        json={"route": _route_payload(), "from_date": "2024-03-01"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["next_due_date"] == "2024-03-11"
    assert payload["frequency_label"] == "Bi-weekly"


def test_next_endpoint_returns_null_when_route_has_ended(api_client: TestClient):
    response = api_client.post(
        "/api/schedule/next",
        json={"route": _route_payload(stop_after="2024-01-20"), "from_date": "2024-01-15"},
    )

    assert response.status_code == 200
    assert response.json()["next_due_date"] is None


def test_next_endpoint_handles_dates_near_calendar_end(api_client: TestClient):
    response = api_client.post(
        "/api/schedule/next",
        json={"route": _route_payload(frequency="WEEKLY"), "from_date": "9999-12-01"},
    )

    assert response.status_code == 200
    assert response.json()["next_due_date"].startswith("9999-12-")


def test_next_endpoint_uses_configured_horizon(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from src.poolroute.api.routes import schedule as schedule_routes

    monkeypatch.setattr(schedule_routes.settings, "search_horizon_weeks", 1)
    response = api_client.post(
        "/api/schedule/next",
        json={"route": _route_payload(frequency="MONTHLY"), "from_date": "2024-01-01"},
    )

    assert response.status_code == 200
    assert response.json()["next_due_date"] is None


def test_calendar_endpoint_json(api_client: TestClient):
    response = api_client.post(
        "/api/schedule/calendar",
        json={
            "route": _route_payload(frequency="CUSTOM", skip_weeks=2),
            "start_date": "2024-01-01",
            "end_date": "2024-02-29",
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == 3
    assert [item["date"] for item in payload["occurrences"]] == ["2024-01-01", "2024-01-22", "2024-02-12"]
    assert payload["occurrences"][1]["iso_week"] == 4


def test_calendar_endpoint_csv(api_client: TestClient):
    response = api_client.post(
        "/api/schedule/calendar?format=csv",
        json={"route": _route_payload(), "start_date": "2024-01-01", "end_date": "2024-01-31"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0] == "route_id,pool_id,tech_id,date,day_of_week,iso_week,frequency"
    assert len(lines) == 4
    assert lines[1].startswith("route-1,pool-1,tech-1,2024-01-01,MONDAY,1,BIWEEKLY")


def test_calendar_endpoint_rejects_reversed_range(api_client: TestClient):
    response = api_client.post(
        "/api/schedule/calendar",
        json={"route": _route_payload(), "start_date": "2024-02-01", "end_date": "2024-01-01"},
    )

    assert response.status_code == 400


def test_calendar_endpoint_rejects_oversized_range(api_client: TestClient):
    response = api_client.post(
        "/api/schedule/calendar",
        json={"route": _route_payload(), "start_date": "2024-01-01", "end_date": "2030-01-01"},
    )

    assert response.status_code == 400
    assert "exceeds" in response.json()["detail"]


def test_today_endpoint_joins_history(api_client: TestClient, fixed_today: date):
    routes = [
        _route_payload(id="R1", frequency="WEEKLY"),
        _route_payload(id="R2", frequency="WEEKLY"),
        _route_payload(id="R3", frequency="WEEKLY", tech_id="tech-2"),
        _route_payload(id="R4", week_offset=1),
    ]
    history = [
        {
            "route_id": "R2",
            "service_date": "2024-01-15",
            "status": "COMPLETED",
            "technician_id": "tech-9",
            "notes": "Filter cleaned",
        }
    ]

    response = api_client.post(
        "/api/schedule/today",
        json={"technician_id": "tech-1", "routes": routes, "service_history": history},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["date"] == fixed_today.isoformat()
    statuses = {item["route_id"]: item["status"] for item in payload["assignments"]}
    assert statuses == {"R1": "PENDING", "R2": "COMPLETED"}
    details = {item["route_id"]: (item["serviced_by"], item["notes"]) for item in payload["assignments"]}
    assert details == {"R1": (None, None), "R2": ("tech-9", "Filter cleaned")}


@pytest.mark.parametrize(
    "overrides",
    [
        {"skip_weeks": -1},
        {"week_offset": -1},
        {"frequency": "QUARTERLY"},
        {"skip_week_numbers": [60]},
        {"stop_after": "2023-12-01"},
    ],
)
def test_invalid_route_input_is_rejected_by_schema(api_client: TestClient, overrides: dict):
    response = api_client.post(
        "/api/schedule/due",
        json={"route": _route_payload(**overrides), "date": "2024-01-15"},
    )

    assert response.status_code == 422


def test_invalid_route_configuration_maps_to_server_error(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from src.poolroute.api.routes import schedule as schedule_routes

    def _broken(route, on_date):
        raise InvalidRouteConfiguration("week_offset must be 0 or greater, got -1.", field="week_offset")

    monkeypatch.setattr(schedule_routes, "is_due", _broken)
    response = api_client.post("/api/schedule/due", json={"route": _route_payload(), "date": "2024-01-15"})

    assert response.status_code == 500
    assert "Invalid route configuration" in response.json()["detail"]


def test_health_calendar_reports_company_day(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from src.poolroute.api.routes import health as health_routes
    from src.poolroute.services.scheduling import CalendarContext

    instant = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    monkeypatch.setattr(
        health_routes.CalendarContext,
        "for_timezone",
        classmethod(lambda cls, name, clock=None: CalendarContext(clock=lambda: instant)),
    )
    response = api_client.get("/api/health/calendar")

    assert response.status_code == 200
    assert response.json()["today"] == "2024-01-15"
