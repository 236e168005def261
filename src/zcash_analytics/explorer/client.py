"""Zcash block explorer client — blocks, transactions, chain tip, key scans.

Async HTTP client for the public Zcash explorers:
- GET <primary>/block/<height|hash>
- GET <primary>/tx/<txid>
- GET <primary>/status
- GET <primary>/v2/mainnet/accounts/<address>/recv

When the primary explorer cannot be reached at all (transport error), the
network's fallback explorer is tried once. Upstream failures never reach the
caller: they are logged and reported as ``None`` / ``0`` / ``[]``. Blocks and
transactions are immutable once mined, so successful lookups are cached
without expiry. Task cancellation is never swallowed.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from zcash_analytics.config.settings import Network
from zcash_analytics.explorer.classifier import classify_transaction
from zcash_analytics.explorer.decryptor import SimulatedDecryptor
from zcash_analytics.explorer.models import Block, Transaction

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from zcash_analytics.cache.client import CacheNamespace
    from zcash_analytics.config.settings import ExplorerConfig
    from zcash_analytics.explorer.decryptor import Decryptor
    from zcash_analytics.explorer.models import PrivacyReport, ShieldedTransaction
    from zcash_analytics.keys.viewing_keys import ViewingKey
    from zcash_analytics.metrics.collector import EngineMetrics

    ProgressCallback = Callable[[int, int], Awaitable[None] | None]

logger = logging.getLogger(__name__)

_SERVICE = "explorer"


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExplorerEndpoints:
    """URL templates for one explorer deployment."""

    block: str
    tx: str
    status: str


def _primary_endpoints(base: str) -> ExplorerEndpoints:
    base = base.rstrip("/")
    return ExplorerEndpoints(
        block=f"{base}/block/{{id}}",
        tx=f"{base}/tx/{{id}}",
        status=f"{base}/status",
    )


_DEFAULT_PRIMARY: dict[Network, str] = {
    Network.TESTNET: "https://testnet.zcashexplorer.app/api",
    Network.MAINNET: "https://api.zcha.in",
}

_DEFAULT_FALLBACK: dict[Network, ExplorerEndpoints] = {
    Network.TESTNET: _primary_endpoints("https://explorer.testnet.z.cash/api"),
    Network.MAINNET: ExplorerEndpoints(
        block="https://api.zcha.in/v2/mainnet/blocks/{id}",
        tx="https://api.zcha.in/v2/mainnet/transactions/{id}",
        status="https://api.zcha.in/v2/mainnet/blocks?limit=1&sort=height&direction=descending",
    ),
}


def _height_from_status(data: Any) -> int:
    """Pick the chain height out of the several status formats in the wild.

    A height that is not a number counts as no answer (0).
    """
    try:
        if isinstance(data, dict):
            if data.get("blocks"):
                return int(data["blocks"])
            blockbook = data.get("blockbook")
            if isinstance(blockbook, dict) and blockbook.get("bestHeight"):
                return int(blockbook["bestHeight"])
            return 0
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return int(data[0].get("height") or 0)
    except (TypeError, ValueError):
        logger.warning("Explorer status carried a non-numeric height: %r", data)
    return 0


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class ZcashBlockExplorer:
    """Async client for public Zcash block explorers.

    Usage::

        explorer = ZcashBlockExplorer(config.explorer, cache.namespace("explorer"))
        await explorer.connect()
        try:
            tx = await explorer.get_transaction(txid)
            if tx is not None:
                report = explorer.verify_transaction_privacy(tx)
        finally:
            await explorer.close()
    """

    def __init__(
        self,
        config: ExplorerConfig,
        cache: CacheNamespace,
        *,
        decryptor: Decryptor | None = None,
        metrics: EngineMetrics | None = None,
    ) -> None:
        """Initialize the explorer client.

        Args:
            config: Explorer configuration (network, urls, timeout).
            cache: Cache namespace for blocks and transactions.
            decryptor: Shielded transaction decryptor used by scans.
            metrics: Optional engine metrics.
        """
        self._config = config
        self._cache = cache
        self._decryptor: Decryptor = decryptor or SimulatedDecryptor()
        self._metrics = metrics
        self._base_url = (config.url or _DEFAULT_PRIMARY[config.network]).rstrip("/")
        self._primary = _primary_endpoints(self._base_url)
        self._fallback = (
            _primary_endpoints(config.fallback_url)
            if config.fallback_url
            else _DEFAULT_FALLBACK[config.network]
        )
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:  # noqa: ASYNC910
        """Create the underlying HTTP client."""
        self._client = httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=self._config.timeout,
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def testnet(self) -> bool:
        return self._config.testnet

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_block(self, height_or_hash: str | int) -> Block | None:
        """Get a block by height or hash, or None if it cannot be fetched."""
        cache_key = f"block_{height_or_hash}"
        cached = await self._cached(cache_key)
        if cached is not None:
            return Block.from_dict(cached)

        data = await self._fetch_json(
            self._primary.block.format(id=height_or_hash),
            self._fallback.block.format(id=height_or_hash),
            what=f"block {height_or_hash}",
        )
        if not isinstance(data, dict):
            return None
        await self._cache.set_json(cache_key, data)
        return Block.from_dict(data)

    async def get_transaction(self, txid: str) -> Transaction | None:
        """Get a transaction by id, or None if it cannot be fetched."""
        cache_key = f"tx_{txid}"
        cached = await self._cached(cache_key)
        if cached is not None:
            return Transaction.from_dict(cached)

        data = await self._fetch_json(
            self._primary.tx.format(id=txid),
            self._fallback.tx.format(id=txid),
            what=f"transaction {txid}",
        )
        if not isinstance(data, dict):
            return None
        await self._cache.set_json(cache_key, data)
        return Transaction.from_dict(data)

    async def get_latest_block_height(self) -> int:
        """Return the current chain height, or 0 if no explorer answers."""
        data = await self._fetch_json(
            self._primary.status,
            self._fallback.status,
            what="chain status",
        )
        return _height_from_status(data)

    async def search_transactions_by_address(
        self, address: str, limit: int = 10
    ) -> list[dict[str, Any]]:
        """List recent transactions received by a transparent address.

        Shielded addresses cannot be searched without a viewing key.
        """
        data = await self._fetch_json(
            f"{self._base_url}/v2/mainnet/accounts/{address}/recv",
            None,
            what=f"address {address}",
            params={"limit": limit, "sort": "timestamp", "direction": "descending"},
        )
        return data if isinstance(data, list) else []

    async def scan_for_shielded_transactions(
        self,
        viewing_key: ViewingKey,
        start_block: int,
        end_block: int,
        on_progress: ProgressCallback | None = None,
    ) -> list[ShieldedTransaction]:
        """Walk ``start_block..end_block`` and decrypt every shielded transaction.

        Args:
            viewing_key: Key handed to the decryptor; it never leaves the process.
            start_block: First height (inclusive).
            end_block: Last height (inclusive).
            on_progress: Called with ``(blocks_done, total_blocks)`` before each
                block; may be sync or async.

        Returns:
            Display records for every transaction the decryptor accepted.
        """
        found: list[ShieldedTransaction] = []
        total = end_block - start_block

        for height in range(start_block, end_block + 1):
            if on_progress is not None:
                result = on_progress(height - start_block, total)
                if inspect.isawaitable(result):
                    await result

            block = await self.get_block(height)
            if block is None:
                continue

            for txid in block.tx:
                tx = await self.get_transaction(txid)
                if tx is None or not tx.has_shielded:
                    continue
                decrypted = self._decryptor.decrypt(tx, viewing_key)
                if decrypted is not None:
                    found.append(decrypted)

        logger.info(
            "Scanned blocks %d-%d: %d shielded transactions", start_block, end_block, len(found)
        )
        return found

    def verify_transaction_privacy(self, tx: Transaction) -> PrivacyReport:
        """Classify *tx* as fully shielded, partially shielded or transparent."""
        return classify_transaction(tx)

    async def clear_cache(self) -> int:
        """Drop every cached block and transaction."""
        return await self._cache.clear()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _cached(self, key: str) -> Any | None:
        value = await self._cache.get_json(key)
        if self._metrics is not None:
            self._metrics.record_cache_lookup(_SERVICE, hit=value is not None)
        return value

    async def _fetch_json(
        self,
        url: str,
        fallback_url: str | None,
        *,
        what: str,
        params: dict[str, Any] | None = None,
    ) -> Any | None:
        """GET *url* (falling back to *fallback_url* on transport errors).

        Returns the decoded JSON body, or None on any upstream failure.
        """
        client = self._ensure_connected()
        try:
            try:
                response = await self._get(client, url, params)
            except httpx.TransportError as exc:
                if fallback_url is None:
                    raise
                logger.warning("Primary explorer unreachable for %s (%s), trying fallback", what, exc)
                response = await self._get(client, fallback_url, params)

            if not response.is_success:
                logger.warning("Explorer returned %d for %s", response.status_code, what)
                self._record_failure()
                return None
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Failed to fetch %s: %s", what, exc)
            self._record_failure()
            return None

    async def _get(
        self, client: httpx.AsyncClient, url: str, params: dict[str, Any] | None
    ) -> httpx.Response:
        if self._metrics is None:
            return await client.get(url, params=params)
        with self._metrics.track_upstream(_SERVICE):
            return await client.get(url, params=params)

    def _record_failure(self) -> None:
        if self._metrics is not None:
            self._metrics.record_upstream_failure(_SERVICE)

    def _ensure_connected(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "ZcashBlockExplorer is not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._client
