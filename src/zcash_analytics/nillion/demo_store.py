"""Local stand-in for nilDB used when the confidential network refuses us.

Documents live in process memory only and vanish on restart.
"""

from __future__ import annotations

from typing import Any


class DemoDataStore:
    """Insertion-ordered in-memory document store keyed by ``_id``."""

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def put(self, document: dict[str, Any]) -> str:
        """Store *document* under its ``_id`` and return the id."""
        doc_id = str(document["_id"])
        self._documents[doc_id] = document
        return doc_id

    def get(self, doc_id: str) -> dict[str, Any] | None:
        return self._documents.get(doc_id)

    def values(self) -> list[dict[str, Any]]:
        return list(self._documents.values())

    def clear(self) -> None:
        self._documents.clear()
