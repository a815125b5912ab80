"""
Ledger Node Configuration

Typed, read-only sections for the services a node talks to, a holder with an
explicit loaded flag, and the loaders that populate it from TOML, JSON, the
environment or an in-memory mapping. Environment variables override file
values.
"""

from .sections import (
    Endpoint,
    RedisConfig,
    PostgresConfig,
    ToriiConfig,
    BlockStorageConfig,
    CryptographyConfig,
    BlockchainOptions,
    ConfigSections,
)
from .loader import (
    ConfigLoader,
    DictConfigLoader,
    TomlConfigLoader,
    JsonConfigLoader,
    EnvConfigLoader,
    apply_env_overrides,
    loader_for_path,
    load_config,
)
from .holder import NodeConfig

__all__ = [
    "Endpoint",
    "RedisConfig",
    "PostgresConfig",
    "ToriiConfig",
    "BlockStorageConfig",
    "CryptographyConfig",
    "BlockchainOptions",
    "ConfigSections",
    "ConfigLoader",
    "DictConfigLoader",
    "TomlConfigLoader",
    "JsonConfigLoader",
    "EnvConfigLoader",
    "apply_env_overrides",
    "loader_for_path",
    "load_config",
    "NodeConfig",
]
