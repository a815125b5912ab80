"""
Node Key Types

Fixed-width containers for the node's ed25519 identity keys. These types only
hold and compare key bytes; they do no signing and do not check that the
private key matches the public key.
"""

from dataclasses import dataclass

from eth_utils import encode_hex

from ..constants import PUBLIC_KEY_SIZE, PRIVATE_KEY_SIZE
from ..exceptions import InvalidKeyError
from .encoding import hexstring_to_bytes, raw_string_to_bytes


class _FixedWidthKey:
    """Immutable byte blob of exactly ``SIZE`` bytes."""

    SIZE: int = 0
    __slots__ = ("_data",)

    def __init__(self, key_bytes: bytes):
        """
        Initialize from raw key bytes.

        Args:
            key_bytes: exactly ``SIZE`` bytes

        Raises:
            InvalidKeyError: If the type or length is wrong
        """
        if not isinstance(key_bytes, (bytes, bytearray)):
            raise InvalidKeyError(
                f"{type(self).__name__} requires bytes, got {type(key_bytes).__name__}"
            )
        if len(key_bytes) != self.SIZE:
            raise InvalidKeyError(
                f"{type(self).__name__} must be {self.SIZE} bytes, got {len(key_bytes)}"
            )
        self._data = bytes(key_bytes)

    @classmethod
    def from_hex(cls, hex_str: str):
        """
        Create from a hex string of exactly ``2 * SIZE`` digits, no prefix.

        Raises:
            InvalidKeyError: If the string is not fixed-width hex
        """
        data = hexstring_to_bytes(hex_str, cls.SIZE)
        if data is None:
            raise InvalidKeyError(
                f"{cls.__name__} hex must be {2 * cls.SIZE} hex digits, got {len(hex_str)} chars"
            )
        return cls(data)

    @classmethod
    def from_string(cls, raw: str):
        """
        Create from a string holding the raw key bytes, one byte per character.

        Raises:
            InvalidKeyError: If the string does not encode exactly ``SIZE`` bytes
        """
        data = raw_string_to_bytes(raw, cls.SIZE)
        if data is None:
            raise InvalidKeyError(
                f"{cls.__name__} raw string has incorrect length or characters. "
                f"Found: {len(raw)}, required: {cls.SIZE}"
            )
        return cls(data)

    def to_bytes(self) -> bytes:
        """Get raw key bytes."""
        return self._data

    def to_hex(self, with_prefix: bool = False) -> str:
        """
        Get hex-encoded key.

        Args:
            with_prefix: Include 0x prefix
        """
        hex_str = encode_hex(self._data)
        return hex_str if with_prefix else hex_str[2:]

    def __len__(self) -> int:
        return self.SIZE

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._data))


class PublicKey(_FixedWidthKey):
    """ed25519 public key."""

    SIZE = PUBLIC_KEY_SIZE
    __slots__ = ()

    def __repr__(self) -> str:
        return f"PublicKey({self.to_hex()})"


class PrivateKey(_FixedWidthKey):
    """ed25519 private key (expanded form)."""

    SIZE = PRIVATE_KEY_SIZE
    __slots__ = ()

    def __repr__(self) -> str:
        return f"PrivateKey({self.to_hex()[:8]}...)"


@dataclass(frozen=True)
class Keypair:
    """Public/private key pair of a node."""
    public_key: PublicKey
    private_key: PrivateKey

    def __repr__(self) -> str:
        return f"Keypair(public_key={self.public_key!r}, private_key=<redacted>)"
