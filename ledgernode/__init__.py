"""
Ledger Node Configuration Package

Core imports are lazily loaded so that importing a submodule does not pull in
the logging setup or file parsers. For direct module access, import from
submodules:

    from ledgernode.config import NodeConfig, TomlConfigLoader
    from ledgernode.crypto import Keypair, PublicKey, PrivateKey
    from ledgernode.exceptions import ConfigurationError
"""

# Lazy imports to avoid loading everything at package import
def __getattr__(name):
    """Lazy module loading."""
    if name == 'NodeConfig':
        from .config import NodeConfig
        return NodeConfig
    elif name == 'load_config':
        from .config import load_config
        return load_config
    elif name == 'ConfigurationError':
        from .exceptions import ConfigurationError
        return ConfigurationError
    raise AttributeError(f"module 'ledgernode' has no attribute {name!r}")

__all__ = ['NodeConfig', 'load_config', 'ConfigurationError']
