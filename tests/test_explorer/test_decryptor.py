"""Tests for the simulated shielded-transaction decryptor.

Amounts, memos and addresses are random placeholders, so only their shape
is checked.
"""

from __future__ import annotations

import random

import pytest

from zcash_analytics.explorer.decryptor import (
    PLACEHOLDER_MEMOS,
    SimulatedDecryptor,
    direction_of,
    pool_for_key,
)
from zcash_analytics.explorer.models import ShieldedDirection, ShieldedPool, Transaction
from zcash_analytics.keys.viewing_keys import ViewingKey, ViewingKeyType

SAPLING = ViewingKey(ViewingKeyType.SAPLING, "zxviews" + "a" * 95)
ORCHARD = ViewingKey(ViewingKeyType.ORCHARD, "orchard" + "b" * 95)
UNIFIED = ViewingKey(ViewingKeyType.UNIFIED, "uview1" + "c" * 141)


class TestPoolAndDirection:
    @pytest.mark.parametrize(
        ("key_type", "pool"),
        [
            (ViewingKeyType.ORCHARD, ShieldedPool.ORCHARD),
            (ViewingKeyType.SAPLING, ShieldedPool.SAPLING),
            (ViewingKeyType.UNIFIED, ShieldedPool.SAPLING),
        ],
    )
    def test_pool_for_key(self, key_type: ViewingKeyType, pool: ShieldedPool) -> None:
        assert pool_for_key(key_type) is pool

    def test_spend_means_sent(self) -> None:
        assert direction_of(Transaction(v_shielded_spend=["s"])) is ShieldedDirection.SENT

    def test_output_only_means_received(self) -> None:
        assert direction_of(Transaction(v_shielded_output=["o"])) is ShieldedDirection.RECEIVED


class TestSimulatedDecryptor:
    def test_shape(self) -> None:
        tx = Transaction(txid="cd" * 32, height=100, time=1_700_000_000, v_shielded_output=["o"])
        result = SimulatedDecryptor().decrypt(tx, ORCHARD)

        assert result is not None
        assert result.txid == tx.txid
        assert result.block_height == 100
        assert result.timestamp == 1_700_000_000
        assert 0 <= result.amount < 10
        assert result.memo in PLACEHOLDER_MEMOS
        assert result.address.startswith("zs1...")
        assert len(result.address) == len("zs1...") + 6
        assert result.type is ShieldedDirection.RECEIVED
        assert result.pool is ShieldedPool.ORCHARD
        assert result.decrypted is True

    def test_seeded_rng_is_reproducible(self) -> None:
        tx = Transaction(txid="ef" * 32, v_shielded_spend=["s"])
        first = SimulatedDecryptor(random.Random(7)).decrypt(tx, SAPLING)
        second = SimulatedDecryptor(random.Random(7)).decrypt(tx, SAPLING)
        assert first == second
        assert first.type is ShieldedDirection.SENT

    def test_missing_txid(self) -> None:
        assert SimulatedDecryptor().decrypt(Transaction(), UNIFIED) is None

    def test_to_dict_uses_camel_case(self) -> None:
        tx = Transaction(txid="01" * 32, height=5, v_shielded_output=["o"])
        data = SimulatedDecryptor().decrypt(tx, UNIFIED).to_dict()
        assert data["blockHeight"] == 5
        assert data["pool"] == "sapling"
        assert data["type"] == "received"
