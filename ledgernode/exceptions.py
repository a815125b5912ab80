"""
Ledger Node Exceptions

Custom exception classes for the node configuration layer.
"""


class LedgerNodeException(Exception):
    """Base exception for the ledger node."""
    pass


class ConfigurationError(LedgerNodeException):
    """Configuration could not be loaded or holds an invalid value."""
    pass


class InvalidKeyError(LedgerNodeException):
    """Invalid cryptographic key material."""
    pass
