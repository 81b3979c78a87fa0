"""
Binary reader for operation bodies.

Inverse of BinaryWriter; used to inspect serialized operations.
"""

import builtins

from ..runtime.errors import EncodingError
from .varint import decode_varint


class BinaryReader:
    """Cursor over a byte buffer reading varints and length-prefixed blobs."""

    def __init__(self, buf: builtins.bytes):
        self._buf = buf
        self._off = 0

    @property
    def eof(self) -> bool:
        """True when every byte has been consumed."""
        return self._off >= len(self._buf)

    @property
    def offset(self) -> int:
        return self._off

    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._buf) - self._off

    def u8(self) -> int:
        if self._off >= len(self._buf):
            raise EncodingError("attempting to read beyond end", details={"offset": self._off})
        val = self._buf[self._off]
        self._off += 1
        return val

    def u64be(self) -> int:
        return int.from_bytes(self.bytes(8), "big")

    def uvarint(self) -> int:
        """Read an unsigned ULEB128 varint."""
        value, self._off = decode_varint(self._buf, self._off)
        return value

    def bytes(self, n: int) -> builtins.bytes:
        """
        Read n bytes from buffer.

        Raises:
            EncodingError: If fewer than n bytes remain
        """
        if self._off + n > len(self._buf):
            raise EncodingError(
                f"attempting to read {n} bytes beyond end",
                details={"offset": self._off, "length": len(self._buf)},
            )
        out = self._buf[self._off : self._off + n]
        self._off += n
        return out

    def len_prefixed_bytes(self) -> builtins.bytes:
        """Read ``varint(len) || bytes``."""
        n = self.uvarint()
        return self.bytes(n)

    def string_utf8(self) -> str:
        raw = self.len_prefixed_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError("Invalid UTF-8 string", cause=e)
