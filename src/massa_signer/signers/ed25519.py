"""
Ed25519 operation signer.

The signed message is::

    chain_id (u64, big-endian) || version || public_key (32) || operation body

The signature is computed over the 32-byte BLAKE3 digest of that message,
and the result is packaged as the JSON object ``send_operations`` expects.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field, field_serializer

from ..codec.hashes import blake3_256
from ..codec.varint import U64_MAX
from ..codec.writer import BinaryWriter
from ..crypto.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from ..crypto.keys import (
    decode_public_key,
    decode_signature,
    encode_public_key,
    encode_signature,
    load_private_key,
    versioned_public_key,
)
from ..network import NetworkContext
from ..runtime.address import Address
from ..runtime.errors import EncodingError, MassaError, SigningError

logger = logging.getLogger(__name__)


def signable_message(chain_id: int, public_key: Union[bytes, Ed25519PublicKey], body: bytes) -> bytes:
    """
    Build the byte string whose BLAKE3 digest gets signed.

    Args:
        chain_id: Network chain id (u64)
        public_key: Raw 32-byte public key
        body: Serialized operation body

    Returns:
        ``chain_id_be8 || version || public_key || body``
    """
    if not 0 <= chain_id <= U64_MAX:
        raise EncodingError("chain id must fit in 64 bits", details={"chainId": chain_id})
    writer = BinaryWriter()
    writer.u64be(chain_id)
    writer.bytes(versioned_public_key(public_key))
    writer.bytes(body)
    return writer.to_bytes()


def operation_digest(chain_id: int, public_key: Union[bytes, Ed25519PublicKey], body: bytes) -> bytes:
    """BLAKE3 digest of the signable message."""
    return blake3_256(signable_message(chain_id, public_key, body))


class SignedOperation(BaseModel):
    """A signed operation ready for ``send_operations``."""

    creator_public_key: str
    signature: str
    serialized_content: bytes = Field(..., repr=False)

    model_config = {"frozen": True}

    @field_serializer("serialized_content")
    def _content_as_ints(self, value: bytes) -> List[int]:
        return list(value)

    def to_rpc(self) -> Dict[str, Any]:
        """JSON object for ``send_operations``; content as a list of 0-255 ints."""
        return self.model_dump()

    def verify(self, chain_id: int) -> bool:
        """Check the signature against the embedded public key and content."""
        try:
            public_key = Ed25519PublicKey(decode_public_key(self.creator_public_key))
            signature = decode_signature(self.signature)
        except MassaError:
            return False
        digest = operation_digest(chain_id, public_key, self.serialized_content)
        return public_key.verify(signature, digest)


class OperationSigner:
    """
    Signs operation bodies with one Ed25519 key.

    Holds the key only for the lifetime of the signer; nothing about the
    private key is logged.
    """

    def __init__(self, private_key: Ed25519PrivateKey):
        self.private_key = private_key
        self.public_key = private_key.public_key()

    @classmethod
    def from_text(cls, private_key: str) -> OperationSigner:
        """Build a signer from hex or ``S...`` private key text."""
        return cls(load_private_key(private_key))

    @property
    def creator_public_key(self) -> str:
        """``P...`` text of the signing public key."""
        return encode_public_key(self.public_key)

    @property
    def address(self) -> Address:
        """User address owned by the signing key."""
        return Address.from_public_key(versioned_public_key(self.public_key))

    def sign_digest(self, digest: bytes) -> bytes:
        """Raw 64-byte signature over a digest."""
        try:
            return self.private_key.sign(digest)
        except ValueError as e:
            raise SigningError("Ed25519 signing failed", cause=e)

    def sign(self, body: bytes, network: Union[NetworkContext, int]) -> SignedOperation:
        """
        Sign an operation body.

        Args:
            body: Serialized operation body
            network: Network context, or a bare chain id

        Returns:
            SignedOperation with public key, signature and content
        """
        chain_id = network.chain_id if isinstance(network, NetworkContext) else network
        digest = operation_digest(chain_id, self.public_key, body)
        signature = self.sign_digest(digest)
        logger.debug("Signed %d-byte operation for chain %d", len(body), chain_id)
        return SignedOperation(
            creator_public_key=self.creator_public_key,
            signature=encode_signature(signature),
            serialized_content=body,
        )


def sign_operation(body: bytes, network: Union[NetworkContext, int], private_key: str) -> SignedOperation:
    """Sign a body with a private key given as text."""
    return OperationSigner.from_text(private_key).sign(body, network)


__all__ = [
    "signable_message",
    "operation_digest",
    "SignedOperation",
    "OperationSigner",
    "sign_operation",
]
