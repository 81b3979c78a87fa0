"""
Massa address value type.

Text form:   ``AU`` (user) or ``AS`` (smart contract) + Base58Check(version || hash32)
Binary form: ``kind:1 || version:1 || hash:32`` (34 bytes), as embedded in
operation bodies.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Union

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from ..codec.base58check import decode_base58check, encode_base58check
from ..codec.hashes import HASH_SIZE, blake3_256
from .errors import InvalidAddressLength, InvalidAddressPrefix, MassaError

ADDRESS_VERSION = 0
ADDRESS_BYTES_SIZE = 2 + HASH_SIZE


class AddressKind(IntEnum):
    """Leading byte of the binary address form."""
    USER = 0
    CONTRACT = 1


ADDRESS_PREFIXES = {
    "AU": AddressKind.USER,
    "AS": AddressKind.CONTRACT,
}
_PREFIX_BY_KIND = {kind: prefix for prefix, kind in ADDRESS_PREFIXES.items()}


class Address:
    """Decoded Massa address usable as a Pydantic field type."""

    def __init__(self, kind: AddressKind, version: int, hash_bytes: bytes):
        if len(hash_bytes) != HASH_SIZE:
            raise InvalidAddressLength(
                f"Address hash must be {HASH_SIZE} bytes, got {len(hash_bytes)}"
            )
        self.kind = AddressKind(kind)
        self.version = version
        self.hash = bytes(hash_bytes)

    @classmethod
    def from_string(cls, text: str) -> Address:
        """
        Parse a textual address.

        Raises:
            InvalidAddressPrefix: If text does not start with ``AU`` or ``AS``
            InvalidAddressLength: If the payload is shorter than version + hash
            ChecksumMismatch / InvalidCharacter: From the Base58Check layer
        """
        if not isinstance(text, str):
            raise InvalidAddressPrefix("Address must be a string")
        prefix = text[:2]
        if prefix not in ADDRESS_PREFIXES:
            raise InvalidAddressPrefix(
                "Invalid Massa address prefix",
                details={"prefix": prefix},
            )
        payload = decode_base58check(text[2:])
        if len(payload) < 1 + HASH_SIZE:
            raise InvalidAddressLength(
                "Invalid decoded address length",
                details={"length": len(payload)},
            )
        return cls(ADDRESS_PREFIXES[prefix], payload[0], payload[1 : 1 + HASH_SIZE])

    @classmethod
    def from_bytes(cls, data: bytes) -> Address:
        """Parse the 34-byte binary form."""
        if len(data) != ADDRESS_BYTES_SIZE:
            raise InvalidAddressLength(
                f"Binary address must be {ADDRESS_BYTES_SIZE} bytes, got {len(data)}"
            )
        if data[0] not in _PREFIX_BY_KIND:
            raise InvalidAddressPrefix("Unknown address kind", details={"kind": data[0]})
        return cls(AddressKind(data[0]), data[1], data[2:])

    @classmethod
    def from_public_key(cls, public_key: bytes) -> Address:
        """
        Derive the user address owning a public key.

        Args:
            public_key: Versioned public key (33 bytes) or raw key (32 bytes)
        """
        if len(public_key) == HASH_SIZE:
            public_key = bytes([ADDRESS_VERSION]) + bytes(public_key)
        return cls(AddressKind.USER, ADDRESS_VERSION, blake3_256(public_key))

    @property
    def is_contract(self) -> bool:
        return self.kind == AddressKind.CONTRACT

    def to_bytes(self) -> bytes:
        """Return ``kind || version || hash`` (34 bytes)."""
        return bytes([self.kind, self.version]) + self.hash

    def __str__(self) -> str:
        return _PREFIX_BY_KIND[self.kind] + encode_base58check(bytes([self.version]) + self.hash)

    def __repr__(self) -> str:
        return f"Address('{self}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Address):
            return self.to_bytes() == other.to_bytes()
        if isinstance(other, str):
            return str(self) == other
        return False

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Validate from Address instances or address strings; serialize to text."""
        return core_schema.no_info_before_validator_function(
            cls._validate,
            core_schema.is_instance_schema(cls),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate(cls, value: Any) -> Address:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        raise ValueError(f"Invalid Address: {value!r}")


def decode_address(text: Union[str, Address]) -> bytes:
    """Decode a textual address to its 34-byte binary form."""
    if isinstance(text, Address):
        return text.to_bytes()
    return Address.from_string(text).to_bytes()


def is_valid_address(text: str) -> bool:
    """True if text is a well-formed address with a valid checksum."""
    try:
        Address.from_string(text)
    except MassaError:
        return False
    return True


__all__ = [
    "ADDRESS_VERSION",
    "ADDRESS_BYTES_SIZE",
    "ADDRESS_PREFIXES",
    "AddressKind",
    "Address",
    "decode_address",
    "is_valid_address",
]
