"""
Massa binary and text codecs.

Key components:
- varint.py: unsigned LEB128 encode/decode
- writer.py / reader.py: operation body buffers built on varints
- base58check.py: Base58 and checksum-verified Base58Check
- hashes.py: SHA-256 (checksums) and BLAKE3 (signing digest)
"""

from .base58check import (
    checksum,
    decode_base58,
    decode_base58check,
    encode_base58,
    encode_base58check,
)
from .hashes import blake3_256, double_sha256, sha256_bytes
from .reader import BinaryReader
from .varint import decode_varint, encode_varint
from .writer import BinaryWriter

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "encode_varint",
    "decode_varint",
    "encode_base58",
    "decode_base58",
    "encode_base58check",
    "decode_base58check",
    "checksum",
    "sha256_bytes",
    "double_sha256",
    "blake3_256",
]
