"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``ZCASH_ANALYTICS_``, nested via ``__``;
   the confidential-storage settings also read the plain ``NILLION_*`` and
   ``NILCHAIN_URL`` / ``NILAUTH_URL`` / ``NILDB_NODES`` variables)
2. YAML config file (``ZCASH_ANALYTICS_CONFIG_PATH`` env var)
3. Defaults defined here
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Annotated, Any, Self

import yaml
from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# ---------------------------------------------------------------------------
# Enums for validated choices
# ---------------------------------------------------------------------------


class CacheEngine(enum.StrEnum):
    """Supported cache backends."""

    MEMORY = "memory"
    REDIS = "redis"


class Network(enum.StrEnum):
    """Zcash network targeted by the block explorer."""

    MAINNET = "mainnet"
    TESTNET = "testnet"


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class ServerConfig(BaseSettings):
    """HTTP server settings."""

    model_config = SettingsConfigDict(
        env_prefix="ZCASH_ANALYTICS_SERVER__",
        case_sensitive=False,
    )

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    reload: bool = False


class CacheConfig(BaseSettings):
    """Cache settings."""

    model_config = SettingsConfigDict(
        env_prefix="ZCASH_ANALYTICS_CACHE__",
        case_sensitive=False,
    )

    engine: CacheEngine = Field(
        default=CacheEngine.MEMORY,
        description="Cache backend: memory or redis",
    )
    url: str = "redis://localhost:6379/0"
    max_connections: int = 10
    max_size: int = 10000


class ExplorerConfig(BaseSettings):
    """Block/transaction explorer settings.

    Empty URLs select the public explorer for the configured network.
    """

    model_config = SettingsConfigDict(
        env_prefix="ZCASH_ANALYTICS_EXPLORER__",
        case_sensitive=False,
    )

    network: Network = Network.TESTNET
    url: str = ""
    fallback_url: str = ""
    timeout: float = 30.0

    @property
    def testnet(self) -> bool:
        return self.network == Network.TESTNET


class BlockchairConfig(BaseSettings):
    """Blockchair public API settings (network stats and proxy)."""

    model_config = SettingsConfigDict(
        env_prefix="ZCASH_ANALYTICS_BLOCKCHAIR__",
        case_sensitive=False,
    )

    url: str = "https://api.blockchair.com/zcash"
    timeout: float = 30.0
    stats_ttl_seconds: int = 300


_DEFAULT_NILDB_NODES = [
    "https://nildb-stg-n1.nillion.network",
    "https://nildb-stg-n2.nillion.network",
    "https://nildb-stg-n3.nillion.network",
]


class NillionConfig(BaseSettings):
    """Confidential storage (nilDB / nilauth) settings.

    A missing ``builder_private_key`` puts the analytics service in demo mode.
    """

    model_config = SettingsConfigDict(
        env_prefix="ZCASH_ANALYTICS_NILLION__",
        case_sensitive=False,
        populate_by_name=True,
    )

    builder_private_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "builder_private_key",
            "ZCASH_ANALYTICS_NILLION__BUILDER_PRIVATE_KEY",
            "NILLION_BUILDER_PRIVATE_KEY",
        ),
    )
    nilchain_url: str = Field(
        default="http://rpc.testnet.nilchain-rpc-proxy.nilogy.xyz",
        validation_alias=AliasChoices(
            "nilchain_url", "ZCASH_ANALYTICS_NILLION__NILCHAIN_URL", "NILCHAIN_URL"
        ),
    )
    nilauth_url: str = Field(
        default="https://nilauth.sandbox.app-cluster.sandbox.nilogy.xyz",
        validation_alias=AliasChoices(
            "nilauth_url", "ZCASH_ANALYTICS_NILLION__NILAUTH_URL", "NILAUTH_URL"
        ),
    )
    nildb_nodes: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(_DEFAULT_NILDB_NODES),
        validation_alias=AliasChoices(
            "nildb_nodes", "ZCASH_ANALYTICS_NILLION__NILDB_NODES", "NILDB_NODES"
        ),
    )
    collection_name: str = "zcash-analytics-collection"
    builder_name: str = "zcash-privacy-analytics"
    execution_timeout: float = 60.0
    timeout: float = 30.0

    @field_validator("nildb_nodes", mode="before")
    @classmethod
    def _split_nodes(cls, value: Any) -> Any:
        """Accept a comma-separated node list as well as a real list."""
        if isinstance(value, str):
            return [node.strip() for node in value.split(",") if node.strip()]
        return value

    @property
    def has_private_key(self) -> bool:
        return bool(self.builder_private_key)


class MetricsConfig(BaseSettings):
    """Prometheus metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="ZCASH_ANALYTICS_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``ZCASH_ANALYTICS_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="ZCASH_ANALYTICS_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    config_path: str = ""

    server: ServerConfig = Field(default_factory=ServerConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    explorer: ExplorerConfig = Field(default_factory=ExplorerConfig)
    blockchair: BlockchairConfig = Field(default_factory=BlockchairConfig)
    nillion: NillionConfig = Field(default_factory=NillionConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                values[key] = {**val, **values[key]}
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))
