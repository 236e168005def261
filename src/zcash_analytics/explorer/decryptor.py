"""Shielded transaction "decryption" — a simulated stand-in.

Nothing in this module performs note decryption. Amount, memo and address
are placeholders drawn from a random source and bear no relation to the
key or the transaction; only the direction (spend present => sent) and the
pool (taken from the key type) are derived from real inputs. A real
implementation needs Sapling/Orchard trial decryption and would plug in
behind :class:`Decryptor` without touching callers.
"""

from __future__ import annotations

import logging
import random
import string
from typing import TYPE_CHECKING, Protocol

from zcash_analytics.explorer.models import ShieldedDirection, ShieldedPool, ShieldedTransaction
from zcash_analytics.keys.viewing_keys import ViewingKeyType

if TYPE_CHECKING:
    from zcash_analytics.explorer.models import Transaction
    from zcash_analytics.keys.viewing_keys import ViewingKey

logger = logging.getLogger(__name__)

PLACEHOLDER_MEMOS: tuple[str | None, ...] = (
    "Payment for services",
    "Monthly subscription",
    "Donation",
    "Personal transfer",
    None,
)

_BASE36 = string.digits + string.ascii_lowercase


class Decryptor(Protocol):
    """Turns a shielded transaction plus a viewing key into a display record."""

    def decrypt(self, tx: Transaction, key: ViewingKey) -> ShieldedTransaction | None: ...


def pool_for_key(key_type: ViewingKeyType) -> ShieldedPool:
    """Orchard keys see the Orchard pool; everything else maps to Sapling."""
    match key_type:
        case ViewingKeyType.ORCHARD:
            return ShieldedPool.ORCHARD
        case ViewingKeyType.SAPLING | ViewingKeyType.UNIFIED:
            return ShieldedPool.SAPLING


def direction_of(tx: Transaction) -> ShieldedDirection:
    return ShieldedDirection.SENT if tx.v_shielded_spend else ShieldedDirection.RECEIVED


class SimulatedDecryptor:
    """Placeholder decryptor producing random amounts, memos and addresses.

    Args:
        rng: Random source; pass a seeded ``random.Random`` for reproducible output.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()  # noqa: S311

    def decrypt(self, tx: Transaction, key: ViewingKey) -> ShieldedTransaction | None:
        if not tx.txid:
            logger.warning("Cannot decrypt a transaction without txid")
            return None
        return ShieldedTransaction(
            txid=tx.txid,
            block_height=tx.height,
            timestamp=tx.time,
            amount=self._rng.random() * 10,
            memo=self._rng.choice(PLACEHOLDER_MEMOS),
            address=f"zs1...{''.join(self._rng.choices(_BASE36, k=6))}",
            type=direction_of(tx),
            pool=pool_for_key(key.type),
            decrypted=True,
        )
