"""DashboardEngine — central engine client owning all services."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from zcash_analytics.cache.client import CacheClient
    from zcash_analytics.config.settings import AppConfig
    from zcash_analytics.explorer.client import ZcashBlockExplorer
    from zcash_analytics.explorer.decryptor import Decryptor
    from zcash_analytics.metrics.collector import EngineMetrics
    from zcash_analytics.nillion.demo_store import DemoDataStore
    from zcash_analytics.nillion.service import ConfidentialAnalyticsService
    from zcash_analytics.nillion.vault import VaultClient
    from zcash_analytics.stats.client import BlockchairClient
    from zcash_analytics.stats.service import StatsService

logger = logging.getLogger(__name__)

# Error messages
_ERR_NOT_INITIALIZED = "Engine not initialized. Call initialize() first."


class DashboardEngine:
    """Central engine that owns all services and infrastructure.

    Provides lifecycle management for the cache, the upstream HTTP clients
    and the services built on top of them.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        metrics: EngineMetrics | None = None,
        decryptor: Decryptor | None = None,
    ) -> None:
        """Initialize engine with configuration.

        Args:
            config: Application configuration.
            metrics: Engine metrics shared with the HTTP layer; created on
                initialize() when omitted.
            decryptor: Shielded transaction decryptor for explorer scans.
        """
        self._config = config
        self._initialized = False
        self._decryptor = decryptor

        # Infrastructure components
        self._cache: CacheClient | None = None
        self._metrics: EngineMetrics | None = metrics

        # Upstream clients
        self._explorer: ZcashBlockExplorer | None = None
        self._vault: VaultClient | None = None
        self._blockchair: BlockchairClient | None = None

        # Services
        self._demo_store: DemoDataStore | None = None
        self._analytics: ConfidentialAnalyticsService | None = None
        self._stats: StatsService | None = None

    async def initialize(self) -> None:
        """Connect the cache and upstream clients and build the services.

        Raises:
            RuntimeError: If already initialized.
        """
        if self._initialized:
            msg = "Engine already initialized"
            raise RuntimeError(msg)

        # Import here to avoid circular deps
        from zcash_analytics.cache.client import CacheClient
        from zcash_analytics.explorer.client import ZcashBlockExplorer
        from zcash_analytics.metrics.collector import EngineMetrics
        from zcash_analytics.nillion.demo_store import DemoDataStore
        from zcash_analytics.nillion.service import ConfidentialAnalyticsService
        from zcash_analytics.nillion.vault import VaultClient
        from zcash_analytics.stats.client import BlockchairClient
        from zcash_analytics.stats.service import StatsService

        if self._metrics is None:
            self._metrics = EngineMetrics()

        self._cache = CacheClient(self._config.cache)
        await self._cache.connect()

        self._explorer = ZcashBlockExplorer(
            self._config.explorer,
            self._cache.namespace("explorer"),
            decryptor=self._decryptor,
            metrics=self._metrics,
        )
        await self._explorer.connect()

        self._vault = VaultClient(self._config.nillion)
        await self._vault.connect()

        self._blockchair = BlockchairClient(self._config.blockchair, metrics=self._metrics)
        await self._blockchair.connect()

        self._demo_store = DemoDataStore()
        self._analytics = ConfidentialAnalyticsService(
            self._config.nillion, self._vault, self._demo_store, metrics=self._metrics
        )
        self._stats = StatsService(
            self._config.blockchair, self._blockchair, self._cache.namespace("stats")
        )

        if not self._config.nillion.has_private_key:
            logger.warning("No builder private key configured; confidential storage runs in demo mode")
        logger.info(
            "Engine initialized (explorer=%s network=%s cache=%s)",
            self._explorer.base_url,
            self._config.explorer.network,
            self._config.cache.engine,
        )
        self._initialized = True

    async def close(self) -> None:
        """Gracefully shut down all services and connections.

        Can be called multiple times (idempotent).
        """
        if not self._initialized:
            return

        self._stats = None
        self._analytics = None
        self._demo_store = None

        if self._blockchair is not None:
            await self._blockchair.close()
            self._blockchair = None

        if self._vault is not None:
            await self._vault.close()
            self._vault = None

        if self._explorer is not None:
            await self._explorer.close()
            self._explorer = None

        if self._cache is not None:
            await self._cache.close()
            self._cache = None

        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if the engine is initialized."""
        return self._initialized

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def metrics(self) -> EngineMetrics | None:
        return self._metrics

    @property
    def cache(self) -> CacheClient:
        if self._cache is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._cache

    @property
    def explorer(self) -> ZcashBlockExplorer:
        if self._explorer is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._explorer

    @property
    def blockchair(self) -> BlockchairClient:
        if self._blockchair is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._blockchair

    @property
    def analytics(self) -> ConfidentialAnalyticsService:
        if self._analytics is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._analytics

    @property
    def stats(self) -> StatsService:
        if self._stats is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._stats
