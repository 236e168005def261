"""Confidential analytics service — store and aggregate through nilDB.

Falls back to the local :class:`DemoDataStore` whenever the confidential
network refuses to authenticate or authorize the builder (401 / 412 /
nilauth unreachable), when the analytics collection is missing, or when no
builder private key is configured at all. A demo response is a successful
response flagged ``demo: True``, not an error.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from zcash_analytics.errors.dashboard_errors import VaultAuthError, VaultError
from zcash_analytics.nillion.models import aggregate_documents, collection_schema

if TYPE_CHECKING:
    from zcash_analytics.config.settings import NillionConfig
    from zcash_analytics.metrics.collector import EngineMetrics
    from zcash_analytics.nillion.demo_store import DemoDataStore
    from zcash_analytics.nillion.models import AnalyticsRecord
    from zcash_analytics.nillion.vault import VaultClient

logger = logging.getLogger(__name__)

COMPUTE_METADATA = {
    "computeMethod": "nilCC confidential compute",
    "privacyGuarantee": "Individual data never exposed",
}


class CollectionNotFoundError(VaultError):
    """The analytics collection has not been created yet."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Collection {name} not found. Please initialize first.",
            status_code=404,
            code="collection-not-found",
        )


def _already_registered(exc: VaultError) -> bool:
    text = exc.message.lower()
    return exc.status_code in (400, 409) or "already registered" in text or "exists" in text


class ConfidentialAnalyticsService:
    """Builder-side analytics over nilDB with a demo-mode fallback.

    Args:
        config: Confidential storage configuration.
        vault: Connected vault client.
        demo_store: Local store used in demo mode.
        metrics: Optional engine metrics.
    """

    def __init__(
        self,
        config: NillionConfig,
        vault: VaultClient,
        demo_store: DemoDataStore,
        metrics: EngineMetrics | None = None,
    ) -> None:
        self._config = config
        self._vault = vault
        self._demo_store = demo_store
        self._metrics = metrics
        self._builder_did: str | None = None
        self._collection_id: str | None = None

    @property
    def builder_did(self) -> str | None:
        return self._builder_did

    @property
    def collection_id(self) -> str | None:
        return self._collection_id

    @property
    def demo_store(self) -> DemoDataStore:
        return self._demo_store

    def status(self) -> dict[str, Any]:
        """Configuration summary for health checks (no secrets)."""
        return {
            "hasPrivateKey": self._config.has_private_key,
            "nilchainUrl": self._config.nilchain_url,
            "nilauthUrl": self._config.nilauth_url,
            "nodeCount": len(self._config.nildb_nodes),
        }

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def initialize(self) -> dict[str, Any]:
        """Authenticate, register the builder and find or create the collection.

        Returns:
            ``{success, message, builderDid, collectionId}`` or a demo-mode
            ``{success: True, demo: True, message}``.

        Raises:
            VaultError: On non-auth failures before the collection step.
        """
        if not self._config.has_private_key:
            return self._demo("initialize", "Using demo mode - no builder private key configured")

        did = self._vault.builder_did()
        try:
            await self._vault.refresh_root_token()
        except VaultAuthError as exc:
            logger.warning("Authentication failed (%s), falling back to demo mode", exc.message)
            return self._demo("initialize", "Using demo mode - Nillion SDK authentication unavailable")

        try:
            await self._vault.register(did, self._config.builder_name)
            logger.info("Builder registered: %s", did)
        except VaultAuthError as exc:
            logger.warning("Builder registration unauthorized (%s), falling back to demo mode", exc.message)
            return self._demo("initialize", "Using demo mode - Nillion SDK authorization failed")
        except VaultError as exc:
            if not _already_registered(exc):
                raise
            logger.info("Builder already registered (continuing...)")

        try:
            collection_id = await self._find_or_create_collection()
        except VaultAuthError:
            logger.warning("Unauthorized accessing collections, falling back to demo mode")
            return self._demo("initialize", "Using demo mode - Nillion SDK authorization failed")
        except VaultError as exc:
            logger.warning("Collection access failed (%s), falling back to demo mode", exc.message)
            return self._demo("initialize", "Using demo mode - Nillion SDK collection access failed")

        self._builder_did = did
        self._collection_id = collection_id
        logger.info("Confidential analytics initialized (collection %s)", collection_id)
        return {
            "success": True,
            "message": "Nillion service initialized",
            "builderDid": did,
            "collectionId": collection_id,
        }

    async def store(self, record: AnalyticsRecord) -> dict[str, Any]:
        """Store one analytics record, in nilDB or the demo store."""
        document = record.to_document()

        if not self._config.has_private_key:
            return self._store_demo(document)

        try:
            collection_id = await self._existing_collection_id()
            results = await self._vault.create_data(collection_id, [document])
        except (VaultAuthError, CollectionNotFoundError) as exc:
            logger.warning("Falling back to demo storage: %s", exc.message)
            return self._store_demo(document)

        first = next(iter(results.values()), {})
        data = first.get("data") if isinstance(first, dict) else None
        if not isinstance(data, dict):
            data = {}
        logger.info(
            "Analytics stored in nilDB: id=%s category=%s nodes=%d",
            document["_id"],
            document["category"],
            len(results),
        )
        return {
            "success": True,
            "id": document["_id"],
            "created": data.get("created", []),
            "errors": data.get("errors", []),
            "message": "Analytics data encrypted and stored across nilDB nodes",
        }

    async def aggregate(self) -> dict[str, Any]:
        """Aggregate every stored record, in nilDB or the demo store."""
        if not self._config.has_private_key:
            return self._aggregate_demo()

        try:
            collection_id = await self._existing_collection_id()
            documents = await self._vault.find_data(collection_id)
        except (VaultAuthError, CollectionNotFoundError) as exc:
            logger.warning("Falling back to demo aggregation: %s", exc.message)
            return self._aggregate_demo()

        data = aggregate_documents(documents)
        logger.info("Computed aggregates over %d records", data["totalRecords"])
        result: dict[str, Any] = {"success": True, "data": data}
        if documents:
            result["metadata"] = dict(COMPUTE_METADATA)
        return result

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _find_or_create_collection(self) -> str:
        collections = await self._vault.read_collections()
        for collection in collections:
            if collection.get("name") == self._config.collection_name:
                logger.info("Found existing collection: %s", collection.get("id"))
                return str(collection.get("id"))

        collection_id = str(uuid.uuid4())
        logger.info("Collection not found, creating %s", collection_id)
        await self._vault.create_collection(
            collection_schema(collection_id, self._config.collection_name)
        )
        return collection_id

    async def _existing_collection_id(self) -> str:
        await self._vault.refresh_root_token()
        if self._collection_id is not None:
            return self._collection_id
        for collection in await self._vault.read_collections():
            if collection.get("name") == self._config.collection_name:
                self._collection_id = str(collection.get("id"))
                return self._collection_id
        raise CollectionNotFoundError(self._config.collection_name)

    def _demo(self, operation: str, message: str) -> dict[str, Any]:
        if self._metrics is not None:
            self._metrics.record_demo_fallback(operation)
        return {"success": True, "demo": True, "message": message}

    def _store_demo(self, document: dict[str, Any]) -> dict[str, Any]:
        doc_id = self._demo_store.put(document)
        result = self._demo("store", "Analytics data stored in demo mode")
        result["id"] = doc_id
        return result

    def _aggregate_demo(self) -> dict[str, Any]:
        result = self._demo("aggregate", "Aggregated from demo store")
        result["data"] = aggregate_documents(self._demo_store.values())
        return result
