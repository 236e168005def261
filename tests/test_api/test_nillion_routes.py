"""Tests for the confidential analytics endpoints."""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from zcash_analytics.api.app import create_app
from zcash_analytics.errors.dashboard_errors import VaultError

_RECORD = {
    "userId": "user-1",
    "timestamp": "2025-01-01T00:00:00Z",
    "pageViews": 12,
    "sessionDuration": 300,
    "interactions": 4,
    "category": "explorer",
    "platform": "web",
}


# ---------------------------------------------------------------------------
# Health checks
# ---------------------------------------------------------------------------


class TestHealthChecks:
    @pytest.mark.parametrize(("path", "name"), [("init", "Init"), ("store", "Store"), ("aggregate", "Aggregate")])
    def test_get(self, test_client, path: str, name: str) -> None:
        resp = test_client.get(f"/api/nillion/{path}")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["message"] == f"Nillion {name} API is available"
        assert body["config"]["hasPrivateKey"] is False
        assert body["usage"].startswith("POST")

    def test_store_lists_required_fields(self, test_client) -> None:
        body = test_client.get("/api/nillion/store").json()
        assert set(body["requiredFields"]) == set(_RECORD)


# ---------------------------------------------------------------------------
# POST
# ---------------------------------------------------------------------------


class TestInit:
    def test_demo(self, test_client, mock_engine) -> None:
        mock_engine.analytics.initialize.return_value = {
            "success": True,
            "demo": True,
            "message": "Using demo mode - no builder private key configured",
        }
        resp = test_client.post("/api/nillion/init")
        assert resp.status_code == 200
        assert resp.json()["demo"] is True

    def test_vault_error_status(self, test_client, mock_engine) -> None:
        mock_engine.analytics.initialize.side_effect = VaultError("node down", status_code=502)
        resp = test_client.post("/api/nillion/init")
        assert resp.status_code == 502
        assert resp.json() == {"success": False, "error": "node down"}

    def test_unexpected_error_is_500(self, test_client, mock_engine) -> None:
        mock_engine.analytics.initialize.side_effect = RuntimeError("kaboom")
        resp = test_client.post("/api/nillion/init")
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "kaboom"}

    def test_execution_budget(self, app_config, mock_engine) -> None:
        app_config.nillion.execution_timeout = 0.05

        async def slow():
            await asyncio.sleep(5)

        mock_engine.analytics.initialize.side_effect = slow
        app = create_app(config=app_config)
        app.state.engine = mock_engine

        resp = TestClient(app, raise_server_exceptions=False).post("/api/nillion/init")
        assert resp.status_code == 504
        assert resp.json()["success"] is False
        assert "timed out" in resp.json()["error"]


class TestStore:
    def test_stores_record(self, test_client, mock_engine) -> None:
        mock_engine.analytics.store.return_value = {"success": True, "id": "d1", "demo": True}
        resp = test_client.post("/api/nillion/store", json=_RECORD)
        assert resp.status_code == 200
        assert resp.json()["id"] == "d1"
        record = mock_engine.analytics.store.await_args.args[0]
        assert record.user_id == "user-1"

    def test_share_envelopes_accepted(self, test_client, mock_engine) -> None:
        mock_engine.analytics.store.return_value = {"success": True, "id": "d2"}
        payload = {**_RECORD, "pageViews": {"%allot": 12}}
        assert test_client.post("/api/nillion/store", json=payload).status_code == 200

    def test_missing_field(self, test_client, mock_engine) -> None:
        payload = dict(_RECORD)
        del payload["category"]
        resp = test_client.post("/api/nillion/store", json=payload)
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Invalid analytics record: category"}
        mock_engine.analytics.store.assert_not_awaited()

    def test_not_json(self, test_client, mock_engine) -> None:
        resp = test_client.post(
            "/api/nillion/store", content=b"not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Request body must be JSON"
        mock_engine.analytics.store.assert_not_awaited()


class TestAggregate:
    def test_aggregate(self, test_client, mock_engine) -> None:
        mock_engine.analytics.aggregate.return_value = {
            "success": True,
            "data": {"totalRecords": 2, "totalPageViews": 24},
        }
        resp = test_client.post("/api/nillion/aggregate")
        assert resp.status_code == 200
        assert resp.json()["data"]["totalRecords"] == 2
