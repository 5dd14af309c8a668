from __future__ import annotations


def test_lead_sources(client):
    response = client.get("/api/v1/accounts/acct-1/lead-sources", params={"range": "year-2024"})
    assert response.status_code == 200
    payload = response.json()
    breakdown = payload["data"]["breakdown"]
    assert breakdown["totalCount"] == 3
    assert breakdown["byCountDesc"][0]["pctCount"] == 100
    assert payload["meta"]["timeWindow"] == "year-2024"
    assert payload["meta"]["rangeEnd"] == "2024-12"


def test_advertising_reports_missing_roi_as_null(client):
    response = client.get("/api/v1/accounts/acct-1/advertising")
    assert response.status_code == 200
    attribution = response.json()["data"]["attribution"]
    assert attribution["overallRoi"] is None
    assert attribution["totalAdSpend"] == 0
    assert attribution["leadSources"] == []


def test_service_type_revenue_defaults_to_current_year(client):
    response = client.get("/api/v1/accounts/acct-1/service-type-revenue")
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["year"] == 2025
    assert payload["data"]["serviceTypes"][0]["serviceTypeName"] == "Weddings"
    assert payload["meta"]["timeWindow"] == "2025"


def test_service_type_revenue_for_explicit_year(client):
    response = client.get("/api/v1/accounts/acct-1/service-type-revenue", params={"year": 2024})
    assert response.status_code == 200
    assert response.json()["data"]["year"] == 2024
