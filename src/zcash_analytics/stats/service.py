"""Network statistics with a short-lived cache and change tracking.

Each fresh Blockchair snapshot is compared with the previous one to get a
percentage change per headline metric. If Blockchair is down the last
snapshot is served even when it has expired.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from zcash_analytics.errors.dashboard_errors import UpstreamError

if TYPE_CHECKING:
    from zcash_analytics.cache.client import CacheNamespace
    from zcash_analytics.config.settings import BlockchairConfig
    from zcash_analytics.stats.client import BlockchairClient

logger = logging.getLogger(__name__)

STATS_KEY = "zcash_stats"
PREVIOUS_KEY = "zcash_previous"

CHANGE_FIELDS = (
    "market_price_usd",
    "transactions_24h",
    "volume_24h",
    "blocks_24h",
    "market_cap_usd",
    "hashrate_24h",
)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _number(value: Any) -> float:
    """Best-effort numeric coercion; Blockchair sends hashrate as a string."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def calculate_change(current: Any, previous: Any) -> float:
    """Percentage change from *previous* to *current*; 0 without a baseline."""
    prev = _number(previous)
    if prev == 0:
        return 0.0
    return ((_number(current) - prev) / prev) * 100


class StatsService:
    """Cached Zcash network statistics.

    Args:
        config: Blockchair configuration (``stats_ttl_seconds``).
        client: Connected Blockchair client.
        cache: Cache namespace for snapshots.
    """

    def __init__(
        self, config: BlockchairConfig, client: BlockchairClient, cache: CacheNamespace
    ) -> None:
        self._config = config
        self._client = client
        self._cache = cache

    async def get_zcash_stats(self) -> dict[str, Any]:
        """Return the latest stats envelope with a ``changes`` map.

        Raises:
            UpstreamError: If Blockchair fails and nothing is cached.
        """
        cached = await self._cache.get_json(STATS_KEY)
        if cached is not None and not self._is_expired(cached.get("timestamp", 0)):
            logger.debug("Using cached Blockchair data")
            return cached["data"]

        try:
            logger.info("Fetching fresh data from Blockchair")
            current = await self._client.get_stats()
        except UpstreamError as exc:
            logger.error("Error fetching Blockchair data: %s", exc.message)
            if cached is not None:
                logger.info("Using expired cache as fallback")
                return cached["data"]
            raise

        enhanced = await self._enhance_with_changes(current)
        await self._store(enhanced)
        return enhanced

    async def refresh(self) -> dict[str, Any]:
        """Drop the cached snapshot and fetch a fresh one."""
        await self._cache.delete(STATS_KEY)
        return await self.get_zcash_stats()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _enhance_with_changes(self, current: dict[str, Any]) -> dict[str, Any]:
        previous = await self._cache.get_json(PREVIOUS_KEY)
        if not isinstance(previous, dict) or not isinstance(previous.get("data"), dict):
            return {**current, "changes": {}}

        cur = current.get("data") or {}
        prev = previous["data"]
        changes = {name: calculate_change(cur.get(name), prev.get(name)) for name in CHANGE_FIELDS}
        return {**current, "changes": changes, "timestamp": _now_ms()}

    async def _store(self, data: dict[str, Any]) -> None:
        # No TTL: expired snapshots stay around as the outage fallback.
        await self._cache.set_json(STATS_KEY, {"data": data, "timestamp": _now_ms()})
        await self._cache.set_json(PREVIOUS_KEY, data)

    def _is_expired(self, timestamp: int) -> bool:
        return _now_ms() - timestamp > self._config.stats_ttl_seconds * 1000
