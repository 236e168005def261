"""Viewing key validation and the session-scoped key store.

Viewing keys grant read-only visibility into shielded transactions. They are
held only in session storage for the lifetime of one session and are never
synced to a server; listings expose ``{id, type, label}`` and nothing else.

Key identity is the first 16 characters of the key string. Two keys that
share that prefix map to the same id, and the later ``add`` overwrites the
earlier entry. This is a known weakness of the identity scheme and is kept
as-is: ids are stable across reloads and other code relies on that.
"""

from __future__ import annotations

import enum
import json
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from zcash_analytics.keys.session import SessionStorage

logger = logging.getLogger(__name__)

SESSION_STORAGE_KEY = "zcash_viewing_keys"
KEY_ID_LENGTH = 16


class ViewingKeyType(enum.StrEnum):
    """Supported viewing key encodings."""

    UNIFIED = "unified"
    SAPLING = "sapling"
    ORCHARD = "orchard"

    @property
    def pattern(self) -> re.Pattern[str]:
        """Anchored, case-insensitive pattern for this key encoding."""
        match self:
            case ViewingKeyType.UNIFIED:
                return _UNIFIED_PATTERN
            case ViewingKeyType.SAPLING:
                return _SAPLING_PATTERN
            case ViewingKeyType.ORCHARD:
                return _ORCHARD_PATTERN


_UNIFIED_PATTERN = re.compile(r"uview1[a-z0-9]{141}", re.IGNORECASE)
_SAPLING_PATTERN = re.compile(r"zxviews[a-z0-9]{95}", re.IGNORECASE)
_ORCHARD_PATTERN = re.compile(r"orchard[a-z0-9]{95}", re.IGNORECASE)


@dataclass(frozen=True)
class ViewingKey:
    """A user-supplied viewing key.

    Attributes:
        type: Key encoding.
        key: Raw key material (opaque).
        label: Optional display name.
    """

    type: ViewingKeyType
    key: str
    label: str | None = None

    @property
    def id(self) -> str:
        return key_id(self.key)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for session storage (``label`` omitted when unset)."""
        data: dict[str, Any] = {"type": str(self.type), "key": self.key}
        if self.label is not None:
            data["label"] = self.label
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ViewingKey:
        """Deserialize a session storage entry.

        Raises:
            ValueError: On unknown type or missing key material.
        """
        key = data["key"]
        if not isinstance(key, str):
            msg = "viewing key must be a string"
            raise ValueError(msg)
        label = data.get("label")
        return cls(
            type=ViewingKeyType(data["type"]),
            key=key,
            label=label if isinstance(label, str) else None,
        )

    def __repr__(self) -> str:
        # Key material stays out of logs and tracebacks.
        return f"ViewingKey(type={self.type!s}, id={self.id!r}, label={self.label!r})"


def key_id(key: str) -> str:
    """Return the display identity of *key*: its first 16 characters."""
    return key[:KEY_ID_LENGTH]


def validate_viewing_key(key: str, key_type: ViewingKeyType | str) -> bool:
    """Check *key* against the pattern registered for *key_type*.

    Never raises: unknown types and non-string keys are simply invalid.
    """
    if not isinstance(key, str):
        return False
    try:
        kind = ViewingKeyType(key_type)
    except (ValueError, TypeError):
        return False
    return kind.pattern.fullmatch(key) is not None


class ViewingKeyStore:
    """Validates, stores, lists and removes viewing keys for one session.

    Usage::

        store = ViewingKeyStore(MemorySessionStorage())
        store.load_from_session()
        if store.add(raw_key, ViewingKeyType.SAPLING, label="cold wallet"):
            for entry in store.list():
                print(entry["id"], entry["type"])
    """

    def __init__(self, storage: SessionStorage) -> None:
        """Initialize an empty store bound to *storage*.

        Args:
            storage: Session storage used for persistence.
        """
        self._storage = storage
        self._keys: dict[str, ViewingKey] = {}

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key_id_: object) -> bool:
        return key_id_ in self._keys

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(self, key: str, key_type: ViewingKeyType | str, label: str | None = None) -> bool:
        """Validate and store a viewing key.

        Returns:
            False (and no change) if the key is malformed for its type.
        """
        if not validate_viewing_key(key, key_type):
            return False
        entry = ViewingKey(type=ViewingKeyType(key_type), key=key, label=label)
        ident = entry.id
        if ident in self._keys:
            logger.warning("Viewing key %s replaces an existing entry with the same id", ident)
        self._keys[ident] = entry
        self._save_to_session()
        return True

    def list(self) -> list[dict[str, str | None]]:
        """List stored keys as ``{id, type, label}`` in insertion order."""
        return [
            {"id": ident, "type": str(entry.type), "label": entry.label}
            for ident, entry in self._keys.items()
        ]

    def get(self, key_id_: str) -> ViewingKey | None:
        """Return the full key for in-process scanning, or None."""
        return self._keys.get(key_id_)

    def remove(self, key_id_: str) -> None:
        """Remove a key; unknown ids are ignored."""
        self._keys.pop(key_id_, None)
        self._save_to_session()

    def clear(self) -> None:
        """Remove every key and the persisted session state."""
        self._keys.clear()
        self._storage.remove_item(SESSION_STORAGE_KEY)

    def load_from_session(self) -> None:
        """Repopulate the store from session storage.

        Missing state leaves the store empty; corrupt state is discarded.
        """
        stored = self._storage.get_item(SESSION_STORAGE_KEY)
        if stored is None:
            self._keys = {}
            return
        try:
            self._keys = _decode_entries(stored)
        except (ValueError, TypeError, KeyError, RecursionError) as exc:
            logger.warning("Discarding corrupt viewing key session state: %s", exc)
            self._keys = {}
            self._storage.remove_item(SESSION_STORAGE_KEY)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _save_to_session(self) -> None:
        entries = [[ident, entry.to_dict()] for ident, entry in self._keys.items()]
        self._storage.set_item(SESSION_STORAGE_KEY, json.dumps(entries))


def _decode_entries(stored: str) -> dict[str, ViewingKey]:
    """Parse the persisted ``[[id, {type, key, label}], ...]`` array."""
    raw = json.loads(stored)
    if not isinstance(raw, list):
        msg = "session state is not a list"
        raise TypeError(msg)
    keys: dict[str, ViewingKey] = {}
    for item in raw:
        ident, data = item
        if not isinstance(ident, str) or not isinstance(data, dict):
            msg = "malformed viewing key entry"
            raise TypeError(msg)
        keys[ident] = ViewingKey.from_dict(data)
    return keys
