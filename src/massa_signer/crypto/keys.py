"""
Textual forms of keys and signatures.

Public key:  ``P`` + Base58Check(version || key32)
Private key: ``S`` + Base58Check(version || seed32), or 64 hex characters
Signature:   Base58Check(version || sig64), no marker

The versioned public key (``version || key32``, 33 bytes, no checksum) is
the form embedded in the signable message.
"""

from __future__ import annotations

import binascii
import string
from typing import Union

from ..codec.base58check import decode_base58check, encode_base58check
from ..runtime.errors import (
    InvalidPrivateKeyLength,
    InvalidPrivateKeyPrefix,
    InvalidPublicKeyLength,
    InvalidPublicKeyPrefix,
    InvalidSignature,
)
from .ed25519 import (
    PUBLIC_KEY_SIZE,
    SEED_SIZE,
    SIGNATURE_SIZE,
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

KEY_VERSION = 0
PUBLIC_KEY_MARKER = "P"
PRIVATE_KEY_MARKER = "S"

_HEX_DIGITS = frozenset(string.hexdigits)


def versioned_public_key(public_key: Union[bytes, Ed25519PublicKey]) -> bytes:
    """Return ``version || key32`` (33 bytes)."""
    raw = public_key.to_bytes() if isinstance(public_key, Ed25519PublicKey) else bytes(public_key)
    if len(raw) != PUBLIC_KEY_SIZE:
        raise InvalidPublicKeyLength(
            f"Public key must be {PUBLIC_KEY_SIZE} bytes, got {len(raw)}"
        )
    return bytes([KEY_VERSION]) + raw


def encode_public_key(public_key: Union[bytes, Ed25519PublicKey]) -> str:
    """Encode a 32-byte public key as ``P...``."""
    return PUBLIC_KEY_MARKER + encode_base58check(versioned_public_key(public_key))


def decode_public_key(text: str) -> bytes:
    """
    Decode ``P...`` text to the raw 32-byte public key.

    Raises:
        InvalidPublicKeyPrefix: If text does not start with ``P``
        InvalidPublicKeyLength: If the payload is not version + 32 bytes
        ChecksumMismatch / InvalidCharacter: From the Base58Check layer
    """
    if not text.startswith(PUBLIC_KEY_MARKER):
        raise InvalidPublicKeyPrefix(f"Public key must start with '{PUBLIC_KEY_MARKER}'")
    payload = decode_base58check(text[len(PUBLIC_KEY_MARKER):])
    if len(payload) != 1 + PUBLIC_KEY_SIZE:
        raise InvalidPublicKeyLength(
            "Invalid decoded public key length",
            details={"length": len(payload)},
        )
    return payload[1:]


def encode_private_key(seed: Union[bytes, Ed25519PrivateKey]) -> str:
    """Encode a 32-byte seed as ``S...``."""
    raw = seed.to_bytes() if isinstance(seed, Ed25519PrivateKey) else bytes(seed)
    if len(raw) != SEED_SIZE:
        raise InvalidPrivateKeyLength(f"Private key must be {SEED_SIZE} bytes")
    return PRIVATE_KEY_MARKER + encode_base58check(bytes([KEY_VERSION]) + raw)


def decode_private_key(text: str) -> bytes:
    """
    Decode private key text to its 32-byte seed.

    Accepts either 64 hex characters or ``S`` + Base58Check.

    Raises:
        InvalidPrivateKeyPrefix: If text is neither hex nor ``S``-prefixed
        InvalidPrivateKeyLength: If the decoded seed is not 32 bytes
    """
    text = text.strip()
    if text and all(c in _HEX_DIGITS for c in text):
        if len(text) != 2 * SEED_SIZE:
            raise InvalidPrivateKeyLength(
                f"Hex private key must be {2 * SEED_SIZE} characters",
                details={"length": len(text)},
            )
        try:
            return binascii.unhexlify(text)
        except binascii.Error as e:
            raise InvalidPrivateKeyLength("Malformed hex private key", cause=e)

    if not text.startswith(PRIVATE_KEY_MARKER):
        raise InvalidPrivateKeyPrefix(f"Private key must start with '{PRIVATE_KEY_MARKER}' or be hex")
    payload = decode_base58check(text[len(PRIVATE_KEY_MARKER):])
    if len(payload) < 1 + SEED_SIZE:
        raise InvalidPrivateKeyLength(
            "Invalid decoded private key length",
            details={"length": len(payload)},
        )
    return payload[1 : 1 + SEED_SIZE]


def load_private_key(text: str) -> Ed25519PrivateKey:
    """Decode private key text and build the signing key."""
    return Ed25519PrivateKey(decode_private_key(text))


def encode_signature(signature: bytes) -> str:
    """Encode a 64-byte signature as Base58Check(version || sig), without marker."""
    if len(signature) != SIGNATURE_SIZE:
        raise InvalidSignature(f"Signature must be {SIGNATURE_SIZE} bytes, got {len(signature)}")
    return encode_base58check(bytes([KEY_VERSION]) + bytes(signature))


def decode_signature(text: str) -> bytes:
    """Decode signature text to the raw 64-byte signature."""
    payload = decode_base58check(text)
    if len(payload) != 1 + SIGNATURE_SIZE:
        raise InvalidSignature(
            "Invalid decoded signature length",
            details={"length": len(payload)},
        )
    return payload[1:]


__all__ = [
    "KEY_VERSION",
    "PUBLIC_KEY_MARKER",
    "PRIVATE_KEY_MARKER",
    "versioned_public_key",
    "encode_public_key",
    "decode_public_key",
    "encode_private_key",
    "decode_private_key",
    "load_private_key",
    "encode_signature",
    "decode_signature",
]
