"""
Node Configuration Sections

One frozen dataclass per [section] of the node config file. Sections are plain
values: a loader builds them, the holder owns them, and nothing mutates them
afterwards. Derived values (connection options, listen address, keypair) are
computed on every call from the stored fields.

Layout of the source mapping:
    [redis]          host, port
    [postgres]       host, port, username, password
    [torii]          host, port
    [block_storage]  path
    [cryptography]   public_key, private_key
    [blockchain]     genesis_block
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from ..constants import MIN_PORT, MAX_PORT
from ..crypto.encoding import KeyEncoding, decode_key_material
from ..crypto.keys import Keypair, PrivateKey, PublicKey
from ..exceptions import ConfigurationError, InvalidKeyError

REDACTED = "***"

# ---------------------------------------------------------------------------
# Strict field readers
# ---------------------------------------------------------------------------


def _require(data: Mapping[str, Any], section: str, key: str) -> Any:
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"[{section}] must be a table, got {type(data).__name__}")
    if key not in data:
        raise ConfigurationError(f"[{section}] missing required key '{key}'")
    return data[key]


def _require_str(data: Mapping[str, Any], section: str, key: str) -> str:
    value = _require(data, section, key)
    if not isinstance(value, str):
        raise ConfigurationError(
            f"[{section}] '{key}' must be a string, got {type(value).__name__}"
        )
    return value


def _check_port(port: Any, where: str) -> int:
    # bool is an int subclass; `port = true` is a config mistake
    if isinstance(port, bool) or not isinstance(port, int):
        raise ConfigurationError(f"{where} port must be an integer, got {type(port).__name__}")
    if not MIN_PORT <= port <= MAX_PORT:
        raise ConfigurationError(f"{where} port {port} out of range [{MIN_PORT}, {MAX_PORT}]")
    return port


# ---------------------------------------------------------------------------
# Network services
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Endpoint:
    """Network service address shared by the service sections."""
    host: str = ""
    port: int = 0

    def __post_init__(self) -> None:
        _check_port(self.port, "endpoint")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], section: str) -> "Endpoint":
        host = _require_str(data, section, "host")
        port = _check_port(_require(data, section, "port"), f"[{section}]")
        return cls(host=host, port=port)

    def to_dict(self) -> Dict[str, Any]:
        return {"host": self.host, "port": self.port}


@dataclass(frozen=True)
class RedisConfig:
    """[redis] section."""
    endpoint: Endpoint = field(default_factory=Endpoint)

    @property
    def host(self) -> str:
        return self.endpoint.host

    @property
    def port(self) -> int:
        return self.endpoint.port

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RedisConfig":
        return cls(endpoint=Endpoint.from_dict(data, "redis"))

    def to_dict(self) -> Dict[str, Any]:
        return self.endpoint.to_dict()


@dataclass(frozen=True)
class PostgresConfig:
    """[postgres] section."""
    endpoint: Endpoint = field(default_factory=Endpoint)
    username: str = ""
    password: str = field(default="", repr=False)

    @property
    def host(self) -> str:
        return self.endpoint.host

    @property
    def port(self) -> int:
        return self.endpoint.port

    def options(self) -> str:
        """
        Preformatted connection options:
        host=<host> port=<port> user=<username> password=<password>

        Values are neither quoted nor escaped.
        """
        return (
            f"host={self.host} port={self.port} "
            f"user={self.username} password={self.password}"
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PostgresConfig":
        return cls(
            endpoint=Endpoint.from_dict(data, "postgres"),
            username=_require_str(data, "postgres", "username"),
            password=_require_str(data, "postgres", "password"),
        )

    def to_dict(self, reveal_secrets: bool = False) -> Dict[str, Any]:
        result = self.endpoint.to_dict()
        result["username"] = self.username
        result["password"] = self.password if reveal_secrets else REDACTED
        return result


@dataclass(frozen=True)
class ToriiConfig:
    """[torii] section: client-facing gateway."""
    endpoint: Endpoint = field(default_factory=Endpoint)

    @property
    def host(self) -> str:
        return self.endpoint.host

    @property
    def port(self) -> int:
        return self.endpoint.port

    def listen_address(self) -> str:
        """Listen address for the gateway server: host:port."""
        return f"{self.host}:{self.port}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ToriiConfig":
        return cls(endpoint=Endpoint.from_dict(data, "torii"))

    def to_dict(self) -> Dict[str, Any]:
        return self.endpoint.to_dict()


# ---------------------------------------------------------------------------
# Storage, identity, chain options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BlockStorageConfig:
    """[block_storage] section."""
    path: str = ""  # not checked for existence

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BlockStorageConfig":
        return cls(path=_require_str(data, "block_storage", "path"))

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path}


@dataclass(frozen=True)
class CryptographyConfig:
    """[cryptography] section: node identity keys as configured strings."""
    public_key: str = ""
    private_key: str = field(default="", repr=False)

    def keypair(self) -> Keypair:
        """
        Decode both key strings into a Keypair.

        Each key is tried as fixed-width hex first, then as raw bytes of the
        exact key width.

        Raises:
            InvalidKeyError: If either key is neither valid hex nor raw bytes
                of the required width
        """
        public = decode_key_material(self.public_key, PublicKey.SIZE)
        if public.encoding is KeyEncoding.INVALID:
            raise InvalidKeyError(
                f"public_key is neither {2 * PublicKey.SIZE}-digit hex "
                f"nor {PublicKey.SIZE} raw bytes"
            )
        private = decode_key_material(self.private_key, PrivateKey.SIZE)
        if private.encoding is KeyEncoding.INVALID:
            raise InvalidKeyError(
                f"private_key is neither {2 * PrivateKey.SIZE}-digit hex "
                f"nor {PrivateKey.SIZE} raw bytes"
            )
        return Keypair(PublicKey(public.data), PrivateKey(private.data))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CryptographyConfig":
        return cls(
            public_key=_require_str(data, "cryptography", "public_key"),
            private_key=_require_str(data, "cryptography", "private_key"),
        )

    def to_dict(self, reveal_secrets: bool = False) -> Dict[str, Any]:
        return {
            "public_key": self.public_key,
            "private_key": self.private_key if reveal_secrets else REDACTED,
        }


@dataclass(frozen=True)
class BlockchainOptions:
    """[blockchain] section: ledger control options."""
    genesis_block: str = ""  # path to the genesis block file

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BlockchainOptions":
        return cls(genesis_block=_require_str(data, "blockchain", "genesis_block"))

    def to_dict(self) -> Dict[str, Any]:
        return {"genesis_block": self.genesis_block}


# ---------------------------------------------------------------------------
# Complete set
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConfigSections:
    """Every section of the node config, as produced by a loader."""
    redis: RedisConfig = field(default_factory=RedisConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    torii: ToriiConfig = field(default_factory=ToriiConfig)
    block_storage: BlockStorageConfig = field(default_factory=BlockStorageConfig)
    cryptography: CryptographyConfig = field(default_factory=CryptographyConfig)
    blockchain_options: BlockchainOptions = field(default_factory=BlockchainOptions)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConfigSections":
        """Build all sections from a parsed config mapping. Every section is required."""
        return cls(
            redis=RedisConfig.from_dict(_require(data, "config", "redis")),
            postgres=PostgresConfig.from_dict(_require(data, "config", "postgres")),
            torii=ToriiConfig.from_dict(_require(data, "config", "torii")),
            block_storage=BlockStorageConfig.from_dict(_require(data, "config", "block_storage")),
            cryptography=CryptographyConfig.from_dict(_require(data, "config", "cryptography")),
            blockchain_options=BlockchainOptions.from_dict(_require(data, "config", "blockchain")),
        )

    def to_dict(self, reveal_secrets: bool = False) -> Dict[str, Any]:
        """Serialize to dict (for diagnostics)."""
        return {
            "redis": self.redis.to_dict(),
            "postgres": self.postgres.to_dict(reveal_secrets),
            "torii": self.torii.to_dict(),
            "block_storage": self.block_storage.to_dict(),
            "cryptography": self.cryptography.to_dict(reveal_secrets),
            "blockchain": self.blockchain_options.to_dict(),
        }
