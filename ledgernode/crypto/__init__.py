"""
Ledger Node Crypto Module

Key material handling for the node identity:
- Fixed-width ed25519 public/private key containers
- Hex-first, raw-fallback decoding of configured key strings
"""

from .keys import PublicKey, PrivateKey, Keypair
from .encoding import (
    KeyEncoding,
    DecodedKey,
    decode_key_material,
    hexstring_to_bytes,
    raw_string_to_bytes,
)

__all__ = [
    # Keys
    "PublicKey",
    "PrivateKey",
    "Keypair",
    # Encoding
    "KeyEncoding",
    "DecodedKey",
    "decode_key_material",
    "hexstring_to_bytes",
    "raw_string_to_bytes",
]
