"""
Unsigned LEB128 varints.

Every integer inside an operation body (fees, periods, type tags, lengths,
counts) is written with this encoding.
"""

from __future__ import annotations
from typing import Tuple

from ..runtime.errors import EncodingError, TruncatedVarint

U64_MAX = 0xFFFFFFFFFFFFFFFF

# ceil(64 / 7)
MAX_VARINT_LEN = 10


def encode_varint(value: int) -> bytes:
    """
    Encode an unsigned 64-bit integer as ULEB128.

    Args:
        value: Integer in [0, 2**64 - 1]

    Returns:
        Encoded bytes (1 to 10 bytes)

    Raises:
        EncodingError: If value is negative or wider than 64 bits
    """
    if value < 0:
        raise EncodingError("varint cannot be negative", details={"value": value})
    if value > U64_MAX:
        raise EncodingError("varint exceeds 64 bits", details={"value": value})

    result = bytearray()
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7
    result.append(value)
    return bytes(result)


def decode_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Decode a ULEB128 varint.

    Args:
        data: Bytes to read from
        offset: Starting offset

    Returns:
        Tuple of (value, new_offset)

    Raises:
        TruncatedVarint: If data ends before the final varint byte
        EncodingError: If the varint is longer than 10 bytes or exceeds u64
    """
    value = 0
    shift = 0
    pos = offset

    while pos < len(data):
        byte = data[pos]
        pos += 1

        value |= (byte & 0x7F) << shift
        if (byte & 0x80) == 0:
            if value > U64_MAX:
                raise EncodingError("varint exceeds 64 bits", details={"offset": offset})
            return value, pos

        shift += 7
        if pos - offset >= MAX_VARINT_LEN:
            raise EncodingError("varint too long", details={"offset": offset})

    raise TruncatedVarint("unexpected end of varint", details={"offset": offset, "length": len(data)})


__all__ = ["encode_varint", "decode_varint", "U64_MAX", "MAX_VARINT_LEN"]
