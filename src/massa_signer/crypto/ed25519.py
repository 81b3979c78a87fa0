"""
Ed25519 key handling for Massa operations.

Wraps the ``cryptography`` Ed25519 primitives with the raw 32-byte seed and
public key forms the chain works with.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature as CryptoInvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey as CryptoEd25519PrivateKey,
    Ed25519PublicKey as CryptoEd25519PublicKey,
)

from ..runtime.errors import SigningError

PUBLIC_KEY_SIZE = 32
SEED_SIZE = 32
SIGNATURE_SIZE = 64


class Ed25519PublicKey:
    """
    Ed25519 public key.

    Provides verification and the raw 32-byte form.
    """

    def __init__(self, public_key_bytes: bytes):
        """
        Initialize from 32-byte public key.

        Raises:
            SigningError: If key is invalid
        """
        if len(public_key_bytes) != PUBLIC_KEY_SIZE:
            raise SigningError(
                f"Ed25519 public key must be {PUBLIC_KEY_SIZE} bytes, got {len(public_key_bytes)}"
            )

        self._key_bytes = bytes(public_key_bytes)
        try:
            self._crypto_key = CryptoEd25519PublicKey.from_public_bytes(self._key_bytes)
        except ValueError as e:
            raise SigningError(f"Invalid Ed25519 public key: {e}", cause=e)

    @classmethod
    def from_bytes(cls, key_bytes: bytes) -> Ed25519PublicKey:
        return cls(key_bytes)

    def to_bytes(self) -> bytes:
        """Get the 32-byte public key."""
        return self._key_bytes

    def to_hex(self) -> str:
        return self._key_bytes.hex()

    def verify(self, signature: bytes, message: bytes) -> bool:
        """
        Verify a signature against a message.

        Args:
            signature: 64-byte Ed25519 signature
            message: Message that was signed

        Returns:
            True if signature is valid
        """
        if len(signature) != SIGNATURE_SIZE:
            return False
        try:
            self._crypto_key.verify(signature, message)
        except CryptoInvalidSignature:
            return False
        return True

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ed25519PublicKey):
            return False
        return self._key_bytes == other._key_bytes

    def __hash__(self) -> int:
        return hash(self._key_bytes)

    def __repr__(self) -> str:
        return f"Ed25519PublicKey('{self.to_hex()}')"


class Ed25519PrivateKey:
    """
    Ed25519 private key built from a 32-byte seed.

    The seed is only held for the lifetime of the object; it is never part of
    the ``repr`` and is not exposed except through ``to_bytes``.
    """

    def __init__(self, seed: bytes):
        """
        Initialize from a 32-byte seed.

        Raises:
            SigningError: If the seed has the wrong size
        """
        if len(seed) != SEED_SIZE:
            raise SigningError(f"Ed25519 private key must be {SEED_SIZE} bytes, got {len(seed)}")

        self._seed = bytes(seed)
        self._crypto_key = CryptoEd25519PrivateKey.from_private_bytes(self._seed)
        self._public_key = Ed25519PublicKey(
            self._crypto_key.public_key().public_bytes(
                encoding=serialization.Encoding.Raw,
                format=serialization.PublicFormat.Raw,
            )
        )

    @classmethod
    def generate(cls) -> Ed25519PrivateKey:
        """Generate a new random private key."""
        crypto_key = CryptoEd25519PrivateKey.generate()
        return cls(
            crypto_key.private_bytes(
                encoding=serialization.Encoding.Raw,
                format=serialization.PrivateFormat.Raw,
                encryption_algorithm=serialization.NoEncryption(),
            )
        )

    @classmethod
    def from_bytes(cls, seed: bytes) -> Ed25519PrivateKey:
        return cls(seed)

    def to_bytes(self) -> bytes:
        """Get the 32-byte seed."""
        return self._seed

    def public_key(self) -> Ed25519PublicKey:
        """Get the corresponding public key."""
        return self._public_key

    def sign(self, message: bytes) -> bytes:
        """
        Sign a message.

        Returns:
            64-byte Ed25519 signature
        """
        return self._crypto_key.sign(message)

    def __repr__(self) -> str:
        return f"Ed25519PrivateKey(public={self._public_key.to_hex()})"


__all__ = [
    "PUBLIC_KEY_SIZE",
    "SEED_SIZE",
    "SIGNATURE_SIZE",
    "Ed25519PublicKey",
    "Ed25519PrivateKey",
]
