"""Explorer data models — Block, Transaction, PrivacyReport, ShieldedTransaction.

Blocks and transactions are fetched from public explorers and never owned
by this service; they are parsed leniently (missing arrays are empty).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class PrivacyLevel(enum.StrEnum):
    """Shielding level of a transaction."""

    FULL = "full"
    PARTIAL = "partial"
    TRANSPARENT = "transparent"


class ShieldedDirection(enum.StrEnum):
    RECEIVED = "received"
    SENT = "sent"


class ShieldedPool(enum.StrEnum):
    SAPLING = "sapling"
    ORCHARD = "orchard"


# ---------------------------------------------------------------------------
# Chain data
# ---------------------------------------------------------------------------


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


def _txid_of(entry: Any) -> str:
    # Some explorers inline full transactions in the block body.
    if isinstance(entry, dict):
        return str(entry.get("txid", ""))
    return str(entry)


@dataclass
class Block:
    """A block as reported by the explorer API.

    Attributes:
        hash: Block hash (hex).
        height: Block height.
        time: Block timestamp (unix seconds).
        tx: Transaction ids in the block.
    """

    hash: str = ""
    height: int = 0
    time: int = 0
    tx: list[str] = field(default_factory=list)
    size: int = 0
    difficulty: float = 0.0
    chainwork: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Block:
        """Create from explorer JSON."""
        return cls(
            hash=data.get("hash", ""),
            height=data.get("height", 0),
            time=data.get("time", 0),
            tx=[_txid_of(t) for t in _as_list(data.get("tx"))],
            size=data.get("size", 0),
            difficulty=data.get("difficulty", 0.0),
            chainwork=data.get("chainwork", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "height": self.height,
            "time": self.time,
            "tx": list(self.tx),
            "size": self.size,
            "difficulty": self.difficulty,
            "chainwork": self.chainwork,
        }


@dataclass
class Transaction:
    """A transaction as reported by the explorer API.

    Attributes:
        txid: Transaction id (hex).
        vin / vout: Transparent inputs and outputs.
        v_shielded_spend / v_shielded_output: Sapling spends and outputs.
        v_join_split: Legacy Sprout joinsplits.
        value_balance: Net value leaving the shielded pool.
    """

    txid: str = ""
    version: int = 0
    locktime: int = 0
    height: int = 0
    time: int = 0
    vin: list[Any] = field(default_factory=list)
    vout: list[Any] = field(default_factory=list)
    v_shielded_spend: list[Any] = field(default_factory=list)
    v_shielded_output: list[Any] = field(default_factory=list)
    v_join_split: list[Any] = field(default_factory=list)
    value_balance: float = 0.0

    @property
    def has_transparent(self) -> bool:
        return bool(self.vin or self.vout)

    @property
    def has_sapling(self) -> bool:
        return bool(self.v_shielded_spend or self.v_shielded_output)

    @property
    def has_sprout(self) -> bool:
        return bool(self.v_join_split)

    @property
    def has_shielded(self) -> bool:
        """True if any shielded component (Sapling or Sprout) is present."""
        return self.has_sapling or self.has_sprout

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        """Create from explorer JSON (camelCase field names)."""
        return cls(
            txid=data.get("txid", ""),
            version=data.get("version", 0),
            locktime=data.get("locktime", 0),
            height=data.get("height", data.get("blockheight", 0)) or 0,
            time=data.get("time", data.get("blocktime", 0)) or 0,
            vin=_as_list(data.get("vin")),
            vout=_as_list(data.get("vout")),
            v_shielded_spend=_as_list(data.get("vShieldedSpend")),
            v_shielded_output=_as_list(data.get("vShieldedOutput")),
            v_join_split=_as_list(data.get("vJoinSplit")),
            value_balance=data.get("valueBalance", 0.0) or 0.0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "txid": self.txid,
            "version": self.version,
            "locktime": self.locktime,
            "height": self.height,
            "time": self.time,
            "vin": list(self.vin),
            "vout": list(self.vout),
            "vShieldedSpend": list(self.v_shielded_spend),
            "vShieldedOutput": list(self.v_shielded_output),
            "vJoinSplit": list(self.v_join_split),
            "valueBalance": self.value_balance,
            "hasShielded": self.has_shielded,
        }


# ---------------------------------------------------------------------------
# Derived records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PrivacyReport:
    """Classifier output for a single transaction."""

    is_private: bool
    level: PrivacyLevel
    details: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "isPrivate": self.is_private,
            "level": str(self.level),
            "details": list(self.details),
        }


@dataclass(frozen=True)
class ShieldedTransaction:
    """A display record for a shielded transaction seen through a viewing key.

    Produced per request and never persisted.
    """

    txid: str
    block_height: int
    timestamp: int
    amount: float
    address: str
    type: ShieldedDirection
    pool: ShieldedPool
    memo: str | None = None
    decrypted: bool = True

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "txid": self.txid,
            "blockHeight": self.block_height,
            "timestamp": self.timestamp,
            "amount": self.amount,
            "address": self.address,
            "type": str(self.type),
            "pool": str(self.pool),
            "decrypted": self.decrypted,
        }
        if self.memo is not None:
            data["memo"] = self.memo
        return data
