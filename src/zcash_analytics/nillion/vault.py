"""nilDB / nilauth HTTP client — the confidential storage collaborator.

Thin async client over the builder-facing REST surface:
- POST <nilauth>/api/v1/nucs/create             — mint a root token for the builder key
- POST <node>/v1/builders/register              — register the builder DID
- GET  <node>/v1/collections                    — list the builder's collections
- POST <node>/v1/collections                    — create a collection
- POST <node>/v1/data/create                    — store documents
- POST <node>/v1/data/find                      — query documents

Writes go to every configured node; reads are served by the first one.
401 and 412 responses (and an unreachable nilauth) raise
:class:`VaultAuthError` so callers can fall back to demo mode; every other
failure raises :class:`VaultError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from ecdsa import SECP256k1, SigningKey

from zcash_analytics.errors.dashboard_errors import VaultAuthError, VaultError

if TYPE_CHECKING:
    from zcash_analytics.config.settings import NillionConfig

logger = logging.getLogger(__name__)

_AUTH_STATUSES = frozenset({401, 412})


def builder_public_key(private_key_hex: str) -> str:
    """Compressed secp256k1 public key (hex) for a builder private key.

    Raises:
        ValueError: If the key is not 32 bytes of hex (``0x`` prefix allowed).
    """
    raw = bytes.fromhex(private_key_hex.removeprefix("0x"))
    if len(raw) != 32:
        msg = f"builder private key must be 32 bytes, got {len(raw)}"
        raise ValueError(msg)
    vk = SigningKey.from_string(raw, curve=SECP256k1).get_verifying_key()
    return vk.to_string("compressed").hex()


class VaultClient:
    """Async HTTP client for nilauth and the nilDB node cluster.

    Usage::

        vault = VaultClient(config.nillion)
        await vault.connect()
        try:
            await vault.refresh_root_token()
            collections = await vault.read_collections()
        finally:
            await vault.close()
    """

    def __init__(self, config: NillionConfig) -> None:
        self._config = config
        self._client: httpx.AsyncClient | None = None
        self._token: str | None = None

    async def connect(self) -> None:  # noqa: ASYNC910
        """Create the underlying HTTP client."""
        self._client = httpx.AsyncClient(
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client and forget the token."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._token = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    @property
    def nodes(self) -> list[str]:
        return [node.rstrip("/") for node in self._config.nildb_nodes]

    def builder_did(self) -> str:
        """DID derived from the configured builder key.

        Raises:
            VaultError: If no usable private key is configured.
        """
        return f"did:nil:{self._public_key()}"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def refresh_root_token(self) -> None:
        """Mint a fresh root token from nilauth.

        Raises:
            VaultAuthError: On 401/412 or if nilauth cannot be reached.
        """
        client = self._ensure_connected()
        public_key = self._public_key()
        url = f"{self._config.nilauth_url.rstrip('/')}/api/v1/nucs/create"
        try:
            response = await client.post(url, json={"public_key": public_key})
        except httpx.HTTPError as exc:
            msg = f"nilauth unreachable: {exc}"
            raise VaultAuthError(msg, status_code=503) from exc

        body = self._check(response, "refresh_root_token")
        token = body.get("token") if isinstance(body, dict) else None
        if not token:
            msg = "nilauth returned no token"
            raise VaultAuthError(msg)
        self._token = token

    async def ensure_authenticated(self) -> None:
        if self._token is None:
            await self.refresh_root_token()

    # ------------------------------------------------------------------
    # Builder / collections / data
    # ------------------------------------------------------------------

    async def register(self, did: str, name: str) -> None:
        """Register the builder on every node."""
        await self._post_all("/v1/builders/register", {"did": did, "name": name}, "register")

    async def read_collections(self) -> list[dict[str, Any]]:
        """Collections owned by this builder (``[{id, name, ...}]``)."""
        body = await self._request("GET", self.nodes[0], "/v1/collections", None, "read_collections")
        data = body.get("data", []) if isinstance(body, dict) else []
        return data if isinstance(data, list) else []

    async def create_collection(self, schema: dict[str, Any]) -> None:
        await self._post_all("/v1/collections", schema, "create_collection")

    async def create_data(
        self, collection_id: str, documents: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Store *documents* on every node; returns responses keyed by node URL."""
        return await self._post_all(
            "/v1/data/create",
            {"collection": collection_id, "data": documents},
            "create_data",
        )

    async def find_data(
        self, collection_id: str, filter_: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        body = await self._request(
            "POST",
            self.nodes[0],
            "/v1/data/find",
            {"collection": collection_id, "filter": filter_ or {}},
            "find_data",
        )
        data = body.get("data", []) if isinstance(body, dict) else []
        return data if isinstance(data, list) else []

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _post_all(self, path: str, payload: Any, operation: str) -> dict[str, Any]:
        results: dict[str, Any] = {}
        for node in self.nodes:
            results[node] = await self._request("POST", node, path, payload, operation)
        return results

    async def _request(
        self, method: str, node: str, path: str, payload: Any, operation: str
    ) -> Any:
        client = self._ensure_connected()
        await self.ensure_authenticated()
        try:
            response = await client.request(
                method,
                f"{node}{path}",
                json=payload,
                headers={"Authorization": f"Bearer {self._token}"},
            )
        except httpx.HTTPError as exc:
            msg = f"nilDB {operation} failed on {node}: {exc}"
            raise VaultError(msg) from exc
        return self._check(response, operation)

    def _check(self, response: httpx.Response, operation: str) -> Any:
        """Decode a successful response or raise the matching vault error."""
        status = response.status_code
        if response.is_success:
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError as exc:
                msg = f"nilDB {operation} returned invalid JSON"
                raise VaultError(msg) from exc

        try:
            body = response.json()
            detail = body.get("message", body.get("error", response.text))
        except (ValueError, AttributeError):
            detail = response.text

        message = f"nilDB {operation} failed ({status}): {detail}"
        if status in _AUTH_STATUSES:
            self._token = None
            raise VaultAuthError(message, status_code=status)
        raise VaultError(message, status_code=status)

    def _public_key(self) -> str:
        try:
            return builder_public_key(self._config.builder_private_key)
        except ValueError as exc:
            msg = f"invalid builder private key: {exc}"
            raise VaultError(msg, status_code=500, code="invalid-builder-key") from exc

    def _ensure_connected(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "VaultClient not connected. Call connect() first."
            raise VaultError(msg, status_code=500)
        return self._client
