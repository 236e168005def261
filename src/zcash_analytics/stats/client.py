"""Blockchair REST client — network stats and the raw API proxy.

- GET <base>/stats        — market and chain statistics
- GET <base>/<endpoint>   — any other endpoint, proxied verbatim
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from zcash_analytics.errors.dashboard_errors import UpstreamError

if TYPE_CHECKING:
    from zcash_analytics.config.settings import BlockchairConfig
    from zcash_analytics.metrics.collector import EngineMetrics

logger = logging.getLogger(__name__)

_SERVICE = "blockchair"


@dataclass(frozen=True)
class ProxyResult:
    """Outcome of a proxied request, ready to be rendered as JSON."""

    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class BlockchairClient:
    """Async HTTP client for the Blockchair Zcash API.

    Usage::

        blockchair = BlockchairClient(config.blockchair)
        await blockchair.connect()
        try:
            stats = await blockchair.get_stats()
        finally:
            await blockchair.close()
    """

    def __init__(self, config: BlockchairConfig, *, metrics: EngineMetrics | None = None) -> None:
        self._config = config
        self._metrics = metrics
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:  # noqa: ASYNC910
        """Create the underlying HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._config.url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_stats(self) -> dict[str, Any]:
        """Fetch ``/stats``.

        Returns:
            The full Blockchair envelope (``{"data": {...}, "context": {...}}``).

        Raises:
            UpstreamError: On transport errors, non-2xx status or bad JSON.
        """
        try:
            response = await self._get("/stats")
        except httpx.HTTPError as exc:
            self._record_failure()
            msg = f"Blockchair stats request failed: {exc}"
            raise UpstreamError(msg) from exc

        if not response.is_success:
            self._record_failure()
            msg = f"BlockChair API error: {response.status_code}"
            raise UpstreamError(msg, status_code=response.status_code)
        try:
            data = response.json()
        except ValueError as exc:
            self._record_failure()
            msg = "Blockchair returned invalid JSON"
            raise UpstreamError(msg) from exc
        if not isinstance(data, dict):
            msg = "Blockchair stats payload is not an object"
            raise UpstreamError(msg)
        return data

    async def proxy(self, endpoint: str, params: dict[str, str] | None = None) -> ProxyResult:
        """Forward ``GET <base>/<endpoint>`` and mirror the upstream outcome.

        Never raises for upstream problems: a non-2xx answer becomes
        ``{error, details}`` with the upstream status, anything else a 500.
        """
        path = "/" + endpoint.lstrip("/")
        logger.info("Blockchair request: %s%s", self._config.url, path)
        try:
            response = await self._get(path, params=params)
        except httpx.HTTPError as exc:
            logger.error("Proxy error: %s", exc)
            self._record_failure()
            return ProxyResult(500, {"error": "Failed to fetch from Blockchair", "details": str(exc)})

        if not response.is_success:
            logger.error("Blockchair error: %d %s", response.status_code, response.text)
            self._record_failure()
            return ProxyResult(
                response.status_code,
                {
                    "error": f"Blockchair request failed: {response.status_code}",
                    "details": response.text,
                },
            )
        try:
            return ProxyResult(response.status_code, response.json())
        except ValueError as exc:
            logger.error("Proxy error: %s", exc)
            return ProxyResult(500, {"error": "Failed to fetch from Blockchair", "details": str(exc)})

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _get(self, path: str, params: dict[str, str] | None = None) -> httpx.Response:
        client = self._ensure_connected()
        if self._metrics is None:
            return await client.get(path, params=params)
        with self._metrics.track_upstream(_SERVICE):
            return await client.get(path, params=params)

    def _record_failure(self) -> None:
        if self._metrics is not None:
            self._metrics.record_upstream_failure(_SERVICE)

    def _ensure_connected(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "BlockchairClient is not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._client
