"""
Binary writer for operation bodies.

Accumulates varints and raw byte blobs in wire order.
"""

from typing import List

from .varint import encode_varint


class BinaryWriter:
    """
    Append-only byte buffer with the primitives used by operation bodies.

    Every integer is a ULEB128 varint and every variable-length blob is
    ``varint(len) || bytes``. The only fixed-width integer is the big-endian
    u64 chain id in the signable message.
    """

    def __init__(self):
        self._bb: List[int] = []

    def u8(self, v: int) -> None:
        """Write a single byte."""
        self._bb.append(v & 0xFF)

    def u64be(self, v: int) -> None:
        """Write an unsigned 64-bit integer, big-endian."""
        self._bb.extend(v.to_bytes(8, "big"))

    def bytes(self, v: bytes) -> None:
        """Write raw bytes without length prefix."""
        self._bb.extend(v)

    def len_prefixed_bytes(self, v: bytes) -> None:
        """Write ``varint(len(v)) || v``."""
        self.uvarint(len(v))
        self.bytes(v)

    def string_utf8(self, s: str) -> None:
        """Write a UTF-8 string with a varint length prefix."""
        self.len_prefixed_bytes(s.encode("utf-8"))

    def uvarint(self, v: int) -> None:
        """
        Write unsigned varint in ULEB128 format.

        Args:
            v: Unsigned integer value to encode as varint
        """
        self._bb.extend(encode_varint(v))

    def __len__(self) -> int:
        return len(self._bb)

    def to_bytes(self) -> bytes:
        """Return accumulated bytes as an immutable bytes object."""
        return bytes(self._bb)
