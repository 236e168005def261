"""Tests for the health endpoint and app factory."""

from __future__ import annotations

from zcash_analytics.errors.dashboard_errors import UpstreamError


def test_health_endpoint(test_client):
    """GET /health should return 200 with status ok."""
    response = test_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"


def test_app_has_openapi(test_client):
    """The app should serve an OpenAPI schema."""
    response = test_client.get("/openapi.json")
    assert response.status_code == 200
    schema = response.json()
    assert schema["info"]["title"] == "zcash-analytics"


def test_openapi_lists_api_routes(test_client):
    paths = test_client.get("/openapi.json").json()["paths"]
    assert "/api/nillion/store" in paths
    assert "/api/zcash" in paths
    assert "/api/stats" in paths
    assert "/api/explorer/tx/{txid}/privacy" in paths


def test_dashboard_error_envelope(test_client, mock_engine):
    """DashboardError subclasses render as {code, message} with their status."""
    mock_engine.stats.get_zcash_stats.side_effect = UpstreamError(
        "BlockChair API error: 503", status_code=503
    )
    response = test_client.get("/api/stats")
    assert response.status_code == 503
    assert response.json() == {"code": "upstream-error", "message": "BlockChair API error: 503"}
