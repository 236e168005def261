"""Tests for the network statistics endpoints."""

from __future__ import annotations

_STATS = {
    "data": {"blocks": 2_800_000, "market_price_usd": 40.0, "market_price_btc": 0.0006},
    "changes": {"market_price_usd": 1.5},
}


class TestStatsRoutes:
    def test_stats(self, test_client, mock_engine):
        mock_engine.stats.get_zcash_stats.return_value = _STATS
        resp = test_client.get("/api/stats")
        assert resp.status_code == 200
        assert resp.json() == _STATS

    def test_metric_cards(self, test_client, mock_engine):
        mock_engine.stats.get_zcash_stats.return_value = _STATS
        cards = test_client.get("/api/stats/metrics").json()
        assert len(cards) == 7
        price = next(c for c in cards if c["title"] == "Market Price (USD)")
        assert price["value"] == "$40.00"
        assert price["change"] == 1.5

    def test_refresh(self, test_client, mock_engine):
        mock_engine.stats.refresh.return_value = _STATS
        resp = test_client.post("/api/stats/refresh")
        assert resp.status_code == 200
        mock_engine.stats.refresh.assert_awaited_once()
