"""
Base58 and Base58Check codecs.

Base58 uses the Bitcoin alphabet. Base58Check appends the first four bytes
of SHA256(SHA256(payload)) before encoding and verifies them on decode.
Every decode path verifies the checksum.
"""

from __future__ import annotations

import hmac

import base58

from ..runtime.errors import ChecksumMismatch, InvalidCharacter
from .hashes import double_sha256

ALPHABET = base58.BITCOIN_ALPHABET.decode("ascii")
CHECKSUM_SIZE = 4

_ALPHABET_SET = frozenset(ALPHABET)


def encode_base58(data: bytes) -> str:
    """
    Encode bytes to Base58.

    Each leading zero byte becomes a leading ``'1'``.

    Args:
        data: Bytes to encode

    Returns:
        Base58 text
    """
    return base58.b58encode(bytes(data), alphabet=base58.BITCOIN_ALPHABET).decode("ascii")


def decode_base58(text: str) -> bytes:
    """
    Decode Base58 text to bytes.

    Args:
        text: Base58 text

    Returns:
        Decoded bytes, with one zero byte per leading ``'1'``

    Raises:
        InvalidCharacter: If text contains a character outside the alphabet
    """
    for position, character in enumerate(text):
        if character not in _ALPHABET_SET:
            raise InvalidCharacter(character, position)
    return base58.b58decode(text, alphabet=base58.BITCOIN_ALPHABET)


def checksum(payload: bytes) -> bytes:
    """First four bytes of SHA256(SHA256(payload))."""
    return double_sha256(payload)[:CHECKSUM_SIZE]


def encode_base58check(payload: bytes) -> str:
    """Encode ``payload || checksum(payload)`` to Base58."""
    return encode_base58(payload + checksum(payload))


def decode_base58check(text: str) -> bytes:
    """
    Decode Base58Check text and verify its checksum.

    Args:
        text: Base58Check text

    Returns:
        Payload with the trailing checksum removed

    Raises:
        InvalidCharacter: If text contains a character outside the alphabet
        ChecksumMismatch: If the blob is too short or the checksum is wrong
    """
    raw = decode_base58(text)
    if len(raw) < CHECKSUM_SIZE:
        raise ChecksumMismatch(
            "Base58Check payload shorter than checksum",
            details={"length": len(raw)},
        )
    payload, tail = raw[:-CHECKSUM_SIZE], raw[-CHECKSUM_SIZE:]
    if not hmac.compare_digest(tail, checksum(payload)):
        raise ChecksumMismatch("Base58Check checksum mismatch")
    return payload


__all__ = [
    "ALPHABET",
    "CHECKSUM_SIZE",
    "encode_base58",
    "decode_base58",
    "checksum",
    "encode_base58check",
    "decode_base58check",
]
