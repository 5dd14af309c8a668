from __future__ import annotations

from datetime import date

TODAY = date(2025, 3, 15)


def test_funnel_metrics_envelope(client, fake_service):
    response = client.get("/api/v1/accounts/acct-1/funnel", params={"range": "past6Months"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["range"]["selector"] == "past6Months"
    assert payload["data"]["months"][0]["monthIndex"] == 2025 * 12
    assert payload["data"]["metrics"]["rates"]["inquiryToClose"] == "12.9"
    assert payload["data"]["metrics"]["revenuePerCallTaken"] == 207839
    assert payload["meta"]["timeWindow"] == "past6Months"
    assert payload["meta"]["rangeStart"] == "2024-10"
    assert payload["meta"]["rangeEnd"] == "2025-03"
    assert payload["meta"]["currencyUnit"] == "cents"
    assert fake_service.calls == [("get_funnel", "acct-1", "past6Months", TODAY)]


def test_funnel_defaults_to_current_year(client, fake_service):
    response = client.get("/api/v1/accounts/acct-1/funnel")
    assert response.status_code == 200
    assert response.json()["meta"]["rangeStart"] == "2025-01"
    assert fake_service.calls[0][2] == "currentYear"


def test_save_funnel_month(client):
    response = client.put(
        "/api/v1/accounts/acct-1/funnel/2025/2",
        json={"inquiries": 12, "closes": 3, "closesManual": True},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["year"] == 2025
    assert payload["data"]["month"] == 2
    assert payload["data"]["closesManual"] is True
    assert payload["data"]["bookingsManual"] is False
    assert payload["meta"]["timeWindow"] == "2025-02"


def test_save_funnel_month_validates_path_and_body(client):
    response = client.put("/api/v1/accounts/acct-1/funnel/2025/13", json={})
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"

    response = client.put("/api/v1/accounts/acct-1/funnel/2025/1", json={"inquiries": -1})
    assert response.status_code == 422


def test_range_selectors(client):
    response = client.get("/api/v1/accounts/acct-1/range-selectors")
    assert response.status_code == 200
    assert response.json()["data"][-1] == "allTime"
