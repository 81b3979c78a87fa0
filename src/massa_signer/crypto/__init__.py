"""
Cryptographic primitives for Massa operations.

Ed25519 keys plus the chain's textual key and signature encodings.
"""

from .ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from .keys import (
    decode_private_key,
    decode_public_key,
    decode_signature,
    encode_private_key,
    encode_public_key,
    encode_signature,
    load_private_key,
    versioned_public_key,
)

__all__ = [
    "Ed25519PrivateKey",
    "Ed25519PublicKey",
    "decode_private_key",
    "decode_public_key",
    "decode_signature",
    "encode_private_key",
    "encode_public_key",
    "encode_signature",
    "load_private_key",
    "versioned_public_key",
]
