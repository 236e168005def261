"""Session-scoped key/value storage for the viewing key store.

Mirrors the browser ``sessionStorage`` contract: string keys, string values,
lifetime bounded by one session. Nothing here touches disk or the network.
"""

from __future__ import annotations

from typing import Protocol


class SessionStorage(Protocol):
    """Protocol for session storage backends."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class MemorySessionStorage:
    """Process-local session storage.

    State lives exactly as long as this object: a new session starts empty.
    """

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        """Drop everything (end of session)."""
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)
