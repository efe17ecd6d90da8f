from __future__ import annotations


def test_health_reports_database(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "healthy"
    assert payload["database"] == "ok"
    assert payload["service"] == "skillswap-api"
    assert payload["timestamp"].endswith("Z")


def test_prometheus_exposition(client) -> None:
    client.get("/health")

    response = client.get("/metrics/prometheus")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    body = response.text
    assert "skillswap_http_requests_total" in body
    assert "skillswap_scheduling_conflicts_total" in body


def test_unknown_route_is_problem_json(client) -> None:
    response = client.get("/api/v1/nowhere")

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.json()["status"] == 404
