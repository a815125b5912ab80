"""
Key Material Encoding

Decoding of key strings found in node configuration. A key may be written as
fixed-width hexadecimal or as the raw key bytes themselves; hex is always
tried first.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from eth_utils import decode_hex

from ..constants import VALID_HEX_PATTERN


class KeyEncoding(Enum):
    """How a key string was interpreted."""
    HEX = "hex"
    RAW = "raw"
    INVALID = "invalid"


@dataclass(frozen=True)
class DecodedKey:
    """Result of decoding one key string."""
    encoding: KeyEncoding
    data: Optional[bytes] = None

    @property
    def is_valid(self) -> bool:
        return self.encoding is not KeyEncoding.INVALID


def hexstring_to_bytes(value: str, size: int) -> Optional[bytes]:
    """
    Strictly decode a fixed-width hex string.

    Args:
        value: Hex string without ``0x`` prefix
        size: Expected number of decoded bytes

    Returns:
        Exactly ``size`` bytes, or None if ``value`` is not ``2 * size`` hex digits
    """
    if len(value) != 2 * size or not VALID_HEX_PATTERN.fullmatch(value):
        return None
    return decode_hex(value)


def raw_string_to_bytes(value: str, size: int) -> Optional[bytes]:
    """
    Interpret a string as raw key bytes, one byte per character.

    Returns None if a character does not fit in a byte or the width is wrong.
    """
    try:
        data = value.encode("latin-1")
    except UnicodeEncodeError:
        return None
    if len(data) != size:
        return None
    return data


def decode_key_material(value: str, size: int) -> DecodedKey:
    """
    Decode a configured key string into exactly ``size`` bytes.

    Hex decoding is attempted first, then the raw-bytes interpretation.
    Anything else (including an empty string) is INVALID; the input is never
    truncated or padded.
    """
    data = hexstring_to_bytes(value, size)
    if data is not None:
        return DecodedKey(KeyEncoding.HEX, data)

    data = raw_string_to_bytes(value, size)
    if data is not None:
        return DecodedKey(KeyEncoding.RAW, data)

    return DecodedKey(KeyEncoding.INVALID)
