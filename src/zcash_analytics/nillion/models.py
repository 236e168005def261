"""Privacy-preserving analytics data models and aggregation.

Records arrive from the dashboard with their sensitive counters either as
plain integers or wrapped in secret-sharing envelopes (``{"%share": n}`` or
``{"%allot": n}``). Stored documents carry the flattened integer.
"""

from __future__ import annotations

import math
import uuid
from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_FIELDS = (
    "userId",
    "timestamp",
    "pageViews",
    "sessionDuration",
    "interactions",
    "category",
    "platform",
)


class ShareEnvelope(BaseModel):
    """A counter marked for secret sharing."""

    model_config = ConfigDict(populate_by_name=True)

    share: int | None = Field(default=None, alias="%share")
    allot: int | None = Field(default=None, alias="%allot")

    def value(self) -> int:
        """Flattened value: ``%share`` first, then ``%allot``, else 0."""
        return self.share or self.allot or 0


def _flatten(value: int | ShareEnvelope) -> int:
    return value.value() if isinstance(value, ShareEnvelope) else value


class AnalyticsRecord(BaseModel):
    """POST /api/nillion/store — one user's usage counters."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    timestamp: str
    page_views: int | ShareEnvelope = Field(alias="pageViews")
    session_duration: int | ShareEnvelope = Field(alias="sessionDuration")
    interactions: int | ShareEnvelope
    category: str
    platform: str

    def to_document(self, document_id: str | None = None) -> dict[str, Any]:
        """Build the stored document (flattened counters, ``_id``, ``storedAt``)."""
        return {
            "_id": document_id or str(uuid.uuid4()),
            "userId": self.user_id,
            "timestamp": self.timestamp,
            "pageViews": _flatten(self.page_views),
            "sessionDuration": _flatten(self.session_duration),
            "interactions": _flatten(self.interactions),
            "category": self.category,
            "platform": self.platform,
            "storedAt": datetime.now(tz=UTC).isoformat(),
        }


def collection_schema(collection_id: str, name: str) -> dict[str, Any]:
    """Schema of the standard analytics collection."""
    return {
        "_id": collection_id,
        "type": "standard",
        "name": name,
        "schema": {
            "_id": {"type": "string"},
            "userId": {"type": "string"},
            "timestamp": {"type": "string"},
            "pageViews": {"type": "integer"},
            "sessionDuration": {"type": "integer"},
            "interactions": {"type": "integer"},
            "category": {"type": "string"},
            "platform": {"type": "string"},
        },
    }


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def aggregate_documents(documents: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Totals, mean session duration and category/platform breakdowns.

    An empty input yields zeros and empty breakdowns.
    """
    docs = list(documents)
    if not docs:
        return {
            "totalRecords": 0,
            "totalPageViews": 0,
            "avgSessionDuration": 0,
            "totalInteractions": 0,
            "categoryBreakdown": {},
            "platformBreakdown": {},
        }

    total_session = sum(d.get("sessionDuration") or 0 for d in docs)
    return {
        "totalRecords": len(docs),
        "totalPageViews": sum(d.get("pageViews") or 0 for d in docs),
        "avgSessionDuration": _round_half_up(total_session / len(docs)),
        "totalInteractions": sum(d.get("interactions") or 0 for d in docs),
        "categoryBreakdown": dict(Counter(str(d.get("category")) for d in docs)),
        "platformBreakdown": dict(Counter(str(d.get("platform")) for d in docs)),
    }
