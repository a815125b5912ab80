"""
Node Configuration Loaders

A loader knows how to obtain raw values from one kind of source and turn them
into a complete ConfigSections. The holder (NodeConfig) only ever talks to the
ConfigLoader interface, so new sources do not touch the section accessors.

Environment variable mapping (file loaders apply these on top of file values):
    [redis] host / port              → LEDGER_REDIS_HOST / LEDGER_REDIS_PORT
    [postgres] host / port           → LEDGER_PG_HOST / LEDGER_PG_PORT
    [postgres] username / password   → LEDGER_PG_USER / LEDGER_PG_PASSWORD
    [torii] host / port              → LEDGER_TORII_HOST / LEDGER_TORII_PORT
    [block_storage] path             → LEDGER_BLOCK_STORAGE_PATH
    [cryptography] public_key        → LEDGER_PUBLIC_KEY
    [cryptography] private_key       → LEDGER_PRIVATE_KEY
    [blockchain] genesis_block       → LEDGER_GENESIS_BLOCK

Keys and passwords are better kept in env vars than in the config file.
"""

from __future__ import annotations

import copy
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, NamedTuple, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # type: ignore[no-redef]

from ..constants import CONFIG_PATH_ENV, ENV_PREFIX, LEDGER_CONFIG
from ..exceptions import ConfigurationError
from ..logger import get_logger
from .sections import ConfigSections

if TYPE_CHECKING:
    from .holder import NodeConfig

logger = get_logger(__name__)


class EnvField(NamedTuple):
    section: str
    key: str
    variable: str
    is_port: bool = False


ENV_FIELDS: List[EnvField] = [
    EnvField("redis", "host", f"{ENV_PREFIX}REDIS_HOST"),
    EnvField("redis", "port", f"{ENV_PREFIX}REDIS_PORT", is_port=True),
    EnvField("postgres", "host", f"{ENV_PREFIX}PG_HOST"),
    EnvField("postgres", "port", f"{ENV_PREFIX}PG_PORT", is_port=True),
    EnvField("postgres", "username", f"{ENV_PREFIX}PG_USER"),
    EnvField("postgres", "password", f"{ENV_PREFIX}PG_PASSWORD"),
    EnvField("torii", "host", f"{ENV_PREFIX}TORII_HOST"),
    EnvField("torii", "port", f"{ENV_PREFIX}TORII_PORT", is_port=True),
    EnvField("block_storage", "path", f"{ENV_PREFIX}BLOCK_STORAGE_PATH"),
    EnvField("cryptography", "public_key", f"{ENV_PREFIX}PUBLIC_KEY"),
    EnvField("cryptography", "private_key", f"{ENV_PREFIX}PRIVATE_KEY"),
    EnvField("blockchain", "genesis_block", f"{ENV_PREFIX}GENESIS_BLOCK"),
]


def _env_value(env_field: EnvField, raw: str) -> Any:
    if not env_field.is_port:
        return raw
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{env_field.variable} must be an integer port, got {raw!r}"
        ) from e


def apply_env_overrides(
    data: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Return a copy of *data* with environment variable overrides applied.

    Empty variables are ignored. *data* itself is left untouched.
    """
    environ = os.environ if environ is None else environ
    result: Dict[str, Any] = copy.deepcopy(dict(data))
    for env_field in ENV_FIELDS:
        if v := environ.get(env_field.variable):
            section = result.setdefault(env_field.section, {})
            if not isinstance(section, dict):
                raise ConfigurationError(
                    f"[{env_field.section}] must be a table, got {type(section).__name__}"
                )
            section[env_field.key] = _env_value(env_field, v)
            logger.debug("Config override from %s", env_field.variable)
    return result


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class ConfigLoader(ABC):
    """
    Loading strategy for NodeConfig.

    ``load()`` either returns every section fully populated or raises
    ConfigurationError; it never returns a partial result.
    """

    @abstractmethod
    def load(self) -> ConfigSections:
        """Obtain raw values from the source and build all sections."""

    @property
    def source(self) -> str:
        """Human readable description of the source, for logs."""
        return type(self).__name__


class DictConfigLoader(ConfigLoader):
    """Loads from an already-parsed mapping of section tables."""

    def __init__(self, data: Mapping[str, Any]):
        self._data = data

    def load(self) -> ConfigSections:
        return ConfigSections.from_dict(self._data)

    @property
    def source(self) -> str:
        return "mapping"


class _FileConfigLoader(ConfigLoader):
    """Shared flow of the file-based loaders: read, parse, env overrides, build."""

    def __init__(self, path: str | os.PathLike, apply_env: bool = True):
        self.path = Path(path)
        self.apply_env = apply_env

    @property
    def source(self) -> str:
        return str(self.path)

    @abstractmethod
    def _parse(self, raw: bytes) -> Dict[str, Any]:
        """Parse file contents into a mapping of section tables."""

    def load(self) -> ConfigSections:
        try:
            with open(self.path, "rb") as f:
                raw = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {self.path}: {e}") from e

        data = self._parse(raw)
        if self.apply_env:
            data = apply_env_overrides(data)
        return ConfigSections.from_dict(data)


class TomlConfigLoader(_FileConfigLoader):
    """Loads a TOML config file."""

    def _parse(self, raw: bytes) -> Dict[str, Any]:
        try:
            return tomli.loads(raw.decode("utf-8"))
        except (tomli.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Malformed TOML in {self.path}: {e}") from e


class JsonConfigLoader(_FileConfigLoader):
    """Loads a JSON config file with the same layout as the TOML one."""

    def _parse(self, raw: bytes) -> Dict[str, Any]:
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Malformed JSON in {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{self.path}: top level must be an object")
        return data


class EnvConfigLoader(ConfigLoader):
    """
    Loads every field from environment variables only.

    All variables listed in ENV_FIELDS are required.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    @property
    def source(self) -> str:
        return "environment"

    def load(self) -> ConfigSections:
        environ = os.environ if self._environ is None else self._environ
        missing = [f.variable for f in ENV_FIELDS if f.variable not in environ]
        if missing:
            raise ConfigurationError(
                f"Missing environment variables: {', '.join(missing)}"
            )

        data: Dict[str, Dict[str, Any]] = {}
        for env_field in ENV_FIELDS:
            data.setdefault(env_field.section, {})[env_field.key] = _env_value(
                env_field, environ[env_field.variable]
            )
        return ConfigSections.from_dict(data)


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------


def loader_for_path(path: str | os.PathLike) -> ConfigLoader:
    """Pick a file loader by extension: ``.json`` is JSON, anything else TOML."""
    if Path(path).suffix.lower() == ".json":
        return JsonConfigLoader(path)
    return TomlConfigLoader(path)


def load_config(path: Optional[str] = None) -> "NodeConfig":
    """
    Build and load a NodeConfig.

    Resolution order:
        1. Explicit *path* argument
        2. LEDGER_CONFIG env var
        3. LEDGER_CONFIG from .env, default ./config.toml

    Raises:
        ConfigurationError: If the file cannot be read or is incomplete
    """
    from .holder import NodeConfig

    if path is None:
        path = os.environ.get(CONFIG_PATH_ENV) or str(LEDGER_CONFIG)

    config = NodeConfig(loader_for_path(path))
    config.load()
    return config
