"""
Hash functions used by the chain.

SHA-256 backs the Base58Check checksum; BLAKE3 is the 256-bit hash the
chain signs over and uses for address derivation.
"""

import hashlib

from blake3 import blake3

HASH_SIZE = 32


def sha256_bytes(input_bytes: bytes) -> bytes:
    """Compute SHA-256 of input bytes (32 bytes)."""
    return hashlib.sha256(input_bytes).digest()


def double_sha256(data: bytes) -> bytes:
    """
    Calculate SHA256(SHA256(data)).

    Args:
        data: Data to hash

    Returns:
        32-byte digest
    """
    return sha256_bytes(sha256_bytes(data))


def blake3_256(data: bytes) -> bytes:
    """
    Compute the 32-byte BLAKE3 digest of data.

    This is the digest that operation signatures are computed over.
    """
    return blake3(data).digest()


__all__ = ["HASH_SIZE", "sha256_bytes", "double_sha256", "blake3_256"]
