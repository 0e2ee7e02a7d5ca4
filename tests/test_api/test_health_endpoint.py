"""Tests for health and metrics endpoints."""

from starlette.testclient import TestClient


def test_health_reports_provider_chain(test_app_client: TestClient) -> None:
    """Health lists the providers built at startup."""
    response = test_app_client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["providers"] == ["nominatim"]
    assert body["version"] == "0.1.0"
    assert body["correlation_id"] == response.headers["X-Request-ID"]


def test_health_degraded_without_providers(test_settings, test_app_client) -> None:
    """Health is degraded when no provider is configured."""
    state = test_app_client.app.state.resources
    state.geocode_service.providers.clear()

    response = test_app_client.get("/api/v1/health")

    assert response.json()["status"] == "degraded"


def test_health_unhealthy_before_startup(test_app) -> None:
    """Without the lifespan there are no resources."""
    client = TestClient(test_app)

    response = client.get("/api/v1/health")

    assert response.json()["status"] == "unhealthy"


def test_metrics_endpoint(test_app_client: TestClient) -> None:
    """Prometheus metrics are exposed."""
    test_app_client.get("/api/v1/health")

    response = test_app_client.get("/metrics")

    assert response.status_code == 200
    assert "app_http_requests_total" in response.text
    assert "geocode_requests_total" in response.text
    assert "geocode_provider_outcomes_total" in response.text


def test_root_redirects_to_docs(test_app_client: TestClient) -> None:
    response = test_app_client.get("/", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/api/v1/docs"


def test_openapi_documents_geocode(test_app_client: TestClient) -> None:
    response = test_app_client.get("/api/v1/openapi.json")

    assert response.status_code == 200
    assert "/api/v1/geocode" in response.json()["paths"]
