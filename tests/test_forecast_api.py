from __future__ import annotations

from funnelmetrics.schemas.forecast import GoalSettings


def test_forecast_defaults(client, fake_service):
    response = client.get("/api/v1/accounts/acct-1/forecast")
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["months"][0] == {
        "year": 2025,
        "month": 4,
        "inquiries": 0,
        "callsBooked": 0,
        "callsTaken": 0,
        "closes": 2,
        "bookings": 100000,
    }
    assert payload["data"]["summary"]["horizonMonths"] == 1
    assert payload["meta"]["timeWindow"] == "past12Months"
    assert fake_service.calls[0][2:4] == ("past12Months", 6)


def test_forecast_rejects_horizon_beyond_configured_limit(client):
    response = client.get("/api/v1/accounts/acct-1/forecast", params={"horizon_months": 24})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "bad_request"


def test_forecast_validates_horizon_bounds(client):
    response = client.get("/api/v1/accounts/acct-1/forecast", params={"horizon_months": 0})
    assert response.status_code == 422


def test_goal_pacing_fills_unset_goals_from_defaults(client, fake_service):
    response = client.get("/api/v1/accounts/acct-1/goal-pacing", params={"bookings_goal": 80})
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["goals"]["bookingsGoal"] == 80
    assert payload["data"]["goals"]["callToBooking"] == 35.0
    assert payload["meta"]["timeWindow"] == "ytd"
    _, account_id, goals, _ = fake_service.calls[0]
    assert account_id == "acct-1"
    assert goals == GoalSettings(bookings_goal=80)


def test_goal_pacing_rejects_rates_above_one_hundred(client):
    response = client.get("/api/v1/accounts/acct-1/goal-pacing", params={"call_to_booking": 120})
    assert response.status_code == 422
