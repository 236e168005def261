"""Tests for the block explorer endpoints."""

from __future__ import annotations

from zcash_analytics.explorer.classifier import classify_transaction
from zcash_analytics.explorer.models import Block, Transaction


class TestBlocks:
    def test_latest(self, test_client, mock_engine):
        mock_engine.explorer.get_latest_block_height.return_value = 2_500_000
        resp = test_client.get("/api/explorer/blocks/latest")
        assert resp.status_code == 200
        assert resp.json() == {"height": 2_500_000, "network": "testnet"}

    def test_block(self, test_client, mock_engine):
        mock_engine.explorer.get_block.return_value = Block(hash="00ab", height=10, tx=["t1"])
        resp = test_client.get("/api/explorer/blocks/10")
        assert resp.status_code == 200
        assert resp.json()["hash"] == "00ab"
        mock_engine.explorer.get_block.assert_awaited_once_with("10")

    def test_block_not_found(self, test_client):
        resp = test_client.get("/api/explorer/blocks/999999999")
        assert resp.status_code == 404
        assert resp.json()["code"] == "block-not-found"


class TestTransactions:
    def test_transaction(self, test_client, mock_engine):
        mock_engine.explorer.get_transaction.return_value = Transaction(txid="ab", vin=[{}])
        resp = test_client.get("/api/explorer/tx/ab")
        assert resp.status_code == 200
        assert resp.json()["txid"] == "ab"
        assert resp.json()["hasShielded"] is False

    def test_transaction_not_found(self, test_client):
        resp = test_client.get("/api/explorer/tx/missing")
        assert resp.status_code == 404
        assert resp.json()["code"] == "transaction-not-found"

    def test_privacy(self, test_client, mock_engine):
        tx = Transaction(txid="cd", v_shielded_spend=[{}], v_shielded_output=[{}])
        mock_engine.explorer.get_transaction.return_value = tx
        mock_engine.explorer.verify_transaction_privacy.side_effect = classify_transaction

        body = test_client.get("/api/explorer/tx/cd/privacy").json()
        assert body["txid"] == "cd"
        assert body["isPrivate"] is True
        assert body["level"] == "full"

    def test_privacy_not_found(self, test_client):
        assert test_client.get("/api/explorer/tx/missing/privacy").status_code == 404


class TestAddressTransactions:
    def test_default_limit(self, test_client, mock_engine):
        mock_engine.explorer.search_transactions_by_address.return_value = [{"txid": "ab"}]
        resp = test_client.get("/api/explorer/address/t1abc/transactions")
        assert resp.status_code == 200
        assert resp.json() == [{"txid": "ab"}]
        mock_engine.explorer.search_transactions_by_address.assert_awaited_once_with(
            "t1abc", limit=10
        )

    def test_limit_bounds(self, test_client):
        assert test_client.get("/api/explorer/address/t1abc/transactions?limit=0").status_code == 422
        assert test_client.get("/api/explorer/address/t1abc/transactions?limit=101").status_code == 422
