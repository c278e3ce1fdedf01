"""Integration tests for /budget routes."""

from typing import Any

from fastapi.testclient import TestClient


def _trip_with_spend(client: TestClient, costs: list[tuple[str, float]]) -> str:
    trip = client.post(
        "/trips",
        json={
            "name": "Budget trip",
            "start_date": "2025-08-01",
            "end_date": "2025-08-04",
            "budget": {
                "total": 1000.0,
                "breakdown": {"accommodation": 300.0, "activities": 999.0},
            },
        },
    ).json()
    for on, cost in costs:
        body: dict[str, Any] = {
            "trip_id": trip["trip_id"],
            "destination": {"city": "Paris", "country": "France"},
            "title": f"Spend {cost}",
            "date": on,
            "start_time": "10:00",
            "end_time": "11:00",
            "cost": {"amount": cost},
        }
        assert client.post("/activities", json=body).status_code == 201
    return trip["trip_id"]


def test_get_budget_recomputes_activities(client: TestClient) -> None:
    trip_id = _trip_with_spend(client, [("2025-08-01", 40.0), ("2025-08-02", 60.0)])

    response = client.get(f"/budget/{trip_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["breakdown"]["activities"] == 100.0
    assert data["total"] == 400.0
    assert data["trip_days"] == 3
    assert data["daily_breakdown"]["2025-08-01"]["accommodation"] == 100.0
    assert data["daily_breakdown"]["2025-08-02"]["total"] == 160.0


def test_update_budget_ignores_activities(client: TestClient) -> None:
    trip_id = _trip_with_spend(client, [])

    response = client.put(
        f"/budget/{trip_id}",
        json={"total": 1200.0, "breakdown": {"food": 90.0, "activities": 5000.0}},
    )

    assert response.status_code == 200
    assert response.json()["total"] == 1200.0
    assert response.json()["breakdown"]["food"] == 90.0
    assert response.json()["breakdown"]["activities"] == 0.0
    assert client.get(f"/budget/{trip_id}").json()["breakdown"]["activities"] == 0.0


def test_update_budget_rejects_negative_total(client: TestClient) -> None:
    trip_id = _trip_with_spend(client, [])

    response = client.put(f"/budget/{trip_id}", json={"total": -5})

    assert response.status_code == 422


def test_forecast(client: TestClient) -> None:
    trip_id = _trip_with_spend(client, [("2025-08-01", 500.0), ("2025-08-01", 550.0)])

    response = client.get(f"/budget/{trip_id}/forecast")

    assert response.status_code == 200
    data = response.json()
    assert data["remaining_budget"] == -50.0
    assert [r["type"] for r in data["recommendations"]] == [
        "warning",
        "danger",
        "info",
        "success",
    ]
    assert data["free_days"] == 2


def test_export(client: TestClient) -> None:
    trip_id = _trip_with_spend(client, [("2025-08-02", 30.0), ("2025-08-01", 10.0)])

    response = client.get(f"/budget/{trip_id}/export")

    assert response.status_code == 200
    data = response.json()
    assert [a["date"] for a in data["activities"]] == ["2025-08-01", "2025-08-02"]
    assert data["summary"] == {
        "total_activities": 2,
        "total_cost": 40.0,
        "average_cost_per_activity": 20.0,
    }
    assert data["budget"]["breakdown"]["activities"] == 40.0
