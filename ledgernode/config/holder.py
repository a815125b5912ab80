"""
Node Configuration Holder

NodeConfig owns one instance of every section plus the ``loaded`` flag and
delegates how values are obtained to a ConfigLoader. Consumers depend only on
the read-only accessors; pass the loaded holder into each subsystem rather
than keeping a module-level instance.

Accessors return whatever is stored, defaults included, regardless of the
flag. Callers must check ``is_loaded()`` before trusting them.

Not thread-safe: ``load()`` must not race with itself or with readers.
"""

from __future__ import annotations

from typing import Any, Dict

from ..logger import get_logger
from .loader import ConfigLoader
from .sections import (
    BlockchainOptions,
    BlockStorageConfig,
    ConfigSections,
    CryptographyConfig,
    PostgresConfig,
    RedisConfig,
    ToriiConfig,
)

logger = get_logger(__name__)


class NodeConfig:
    """
    Node configuration: section storage with a pluggable load strategy.

    Example:
        >>> config = NodeConfig(TomlConfigLoader("config.toml"))
        >>> config.load()
        >>> config.is_loaded()
        True
        >>> config.torii.listen_address()
        '0.0.0.0:50051'
    """

    def __init__(self, loader: ConfigLoader):
        self._loader = loader
        self._loaded = False
        self._sections = ConfigSections()

    def is_loaded(self) -> bool:
        """Return True once a load has completed successfully."""
        return self._loaded

    def load(self) -> None:
        """
        Populate every section from the loader.

        All sections are replaced together and the flag is set only after the
        loader returned a complete result. If the loader raises, the exception
        propagates and the stored sections and flag are left as they were.
        """
        try:
            sections = self._loader.load()
        except Exception:
            logger.error("Failed to load configuration from %s", self._loader.source)
            raise

        self._sections = sections
        self._loaded = True
        logger.info("Configuration loaded from %s", self._loader.source)

    # --- accessors ----------------------------------------------------------

    @property
    def redis(self) -> RedisConfig:
        return self._sections.redis

    @property
    def postgres(self) -> PostgresConfig:
        return self._sections.postgres

    @property
    def torii(self) -> ToriiConfig:
        return self._sections.torii

    @property
    def block_storage(self) -> BlockStorageConfig:
        return self._sections.block_storage

    @property
    def cryptography(self) -> CryptographyConfig:
        return self._sections.cryptography

    @property
    def blockchain_options(self) -> BlockchainOptions:
        return self._sections.blockchain_options

    # --- serialisation ------------------------------------------------------

    def to_dict(self, reveal_secrets: bool = False) -> Dict[str, Any]:
        """Serialize to dict (for diagnostics, secrets redacted by default)."""
        result = self._sections.to_dict(reveal_secrets)
        result["loaded"] = self._loaded
        return result

    def __repr__(self) -> str:
        return f"NodeConfig(source={self._loader.source!r}, loaded={self._loaded})"
