"""Shared test fixtures for the zcash-analytics test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from zcash_analytics.config.settings import CacheConfig, CacheEngine


@pytest.fixture
def app_config():
    """Provide a test AppConfig with safe defaults (memory cache, demo mode)."""
    from zcash_analytics.config.settings import AppConfig, NillionConfig

    return AppConfig(
        debug=True,
        cache=CacheConfig(engine=CacheEngine.MEMORY),
        nillion=NillionConfig(builder_private_key="", execution_timeout=1.0),
    )


@pytest.fixture
async def cache_client():
    """A connected in-memory cache client."""
    from zcash_analytics.cache.client import CacheClient

    client = CacheClient(CacheConfig(engine=CacheEngine.MEMORY))
    await client.connect()
    yield client
    await client.close()


def _mock_engine(config):
    """Create a mock engine with async service doubles."""
    engine = MagicMock()
    engine.config = config
    engine.explorer = MagicMock()
    engine.explorer.get_block = AsyncMock(return_value=None)
    engine.explorer.get_transaction = AsyncMock(return_value=None)
    engine.explorer.get_latest_block_height = AsyncMock(return_value=0)
    engine.explorer.search_transactions_by_address = AsyncMock(return_value=[])
    engine.analytics = MagicMock()
    engine.analytics.initialize = AsyncMock()
    engine.analytics.store = AsyncMock()
    engine.analytics.aggregate = AsyncMock()
    engine.analytics.status.return_value = {
        "hasPrivateKey": False,
        "nilchainUrl": config.nillion.nilchain_url,
        "nilauthUrl": config.nillion.nilauth_url,
        "nodeCount": len(config.nillion.nildb_nodes),
    }
    engine.blockchair = MagicMock()
    engine.blockchair.proxy = AsyncMock()
    engine.stats = MagicMock()
    engine.stats.get_zcash_stats = AsyncMock()
    engine.stats.refresh = AsyncMock()
    return engine


@pytest.fixture
def mock_engine(app_config):
    return _mock_engine(app_config)


@pytest.fixture
def test_client(app_config, mock_engine):
    """Provide a FastAPI TestClient with a mock engine on app.state."""
    from fastapi.testclient import TestClient

    from zcash_analytics.api.app import create_app

    app = create_app(config=app_config)
    app.state.engine = mock_engine
    return TestClient(app, raise_server_exceptions=False)
