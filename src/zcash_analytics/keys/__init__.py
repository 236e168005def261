"""Viewing keys — validation and the session-scoped key store."""

from zcash_analytics.keys.session import MemorySessionStorage, SessionStorage
from zcash_analytics.keys.viewing_keys import (
    SESSION_STORAGE_KEY,
    ViewingKey,
    ViewingKeyStore,
    ViewingKeyType,
    validate_viewing_key,
)

__all__ = [
    "SESSION_STORAGE_KEY",
    "MemorySessionStorage",
    "SessionStorage",
    "ViewingKey",
    "ViewingKeyStore",
    "ViewingKeyType",
    "validate_viewing_key",
]
