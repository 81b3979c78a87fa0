"""
Operation body serialization.

Every body starts with ``varint(fee) || varint(expire_period) || varint(type)``
followed by the type-specific fields. Integers are ULEB128 varints, blobs are
``varint(len) || bytes`` and addresses are their raw 34-byte form.

Transfers have two independent entry points, the current ("standard") field
ordering and the legacy one used as a fallback on rejection. They produce
identical bytes under current chain rules but are kept separate so either
can change without touching the other.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Type, Union

from ..codec.reader import BinaryReader
from ..codec.writer import BinaryWriter
from ..runtime.address import ADDRESS_BYTES_SIZE, Address, decode_address
from ..runtime.errors import EncodingError, InvalidAddressLength
from .operations import (
    CallContract,
    ExecuteBytecode,
    Operation,
    OperationBase,
    OperationType,
    RollBuy,
    RollSell,
    Transfer,
)

logger = logging.getLogger(__name__)

AddressLike = Union[str, Address, bytes]


class TransferFormat(Enum):
    """Field ordering used to serialize a transfer."""
    STANDARD = "standard"
    LEGACY = "legacy"


def _address_bytes(address: AddressLike) -> bytes:
    raw = bytes(address) if isinstance(address, (bytes, bytearray)) else decode_address(address)
    if len(raw) != ADDRESS_BYTES_SIZE:
        raise InvalidAddressLength(
            f"Address must be {ADDRESS_BYTES_SIZE} bytes, got {len(raw)}"
        )
    return raw


def _header(writer: BinaryWriter, fee: int, expire_period: int, op_type: OperationType) -> None:
    writer.uvarint(fee)
    writer.uvarint(expire_period)
    writer.uvarint(op_type)


def serialize_transfer_standard(expire_period: int, fee: int, recipient: AddressLike, amount: int) -> bytes:
    """
    Serialize a transfer with the current field ordering.

    Layout: fee, expire_period, type(0), recipient (34 bytes), amount.
    """
    writer = BinaryWriter()
    _header(writer, fee, expire_period, OperationType.TRANSFER)
    writer.bytes(_address_bytes(recipient))
    writer.uvarint(amount)
    return writer.to_bytes()


def serialize_transfer_legacy(fee: int, expire_period: int, recipient: AddressLike, amount: int) -> bytes:
    """
    Serialize a transfer with the legacy field ordering.

    Layout: fee, expire_period, type(0), recipient (34 bytes), amount.
    """
    writer = BinaryWriter()
    writer.uvarint(fee)
    writer.uvarint(expire_period)
    writer.uvarint(OperationType.TRANSFER)
    writer.bytes(_address_bytes(recipient))
    writer.uvarint(amount)
    return writer.to_bytes()


class OperationSerializer:
    """Turns operation models into canonical wire bytes and back."""

    def __init__(self):
        self._dispatch: Dict[Type[OperationBase], Callable[[OperationBase], bytes]] = {
            Transfer: self.serialize_transfer,
            RollBuy: self.serialize_roll_buy,
            RollSell: self.serialize_roll_sell,
            ExecuteBytecode: self.serialize_execute_bytecode,
            CallContract: self.serialize_call_contract,
        }

    def serialize(self, operation: Operation, transfer_format: TransferFormat = TransferFormat.STANDARD) -> bytes:
        """
        Serialize any operation.

        Args:
            operation: Operation model
            transfer_format: Field ordering to use if operation is a Transfer

        Returns:
            Operation body bytes
        """
        if isinstance(operation, Transfer):
            body = self.serialize_transfer(operation, transfer_format)
        else:
            try:
                handler = self._dispatch[type(operation)]
            except KeyError:
                raise EncodingError(f"Unsupported operation type: {type(operation).__name__}")
            body = handler(operation)
        logger.debug("Serialized %s (%d bytes)", type(operation).__name__, len(body))
        return body

    def serialize_transfer(self, op: Transfer, transfer_format: TransferFormat = TransferFormat.STANDARD) -> bytes:
        if transfer_format is TransferFormat.LEGACY:
            return serialize_transfer_legacy(op.fee, op.expire_period, op.recipient, op.amount)
        return serialize_transfer_standard(op.expire_period, op.fee, op.recipient, op.amount)

    def serialize_roll_buy(self, op: RollBuy) -> bytes:
        writer = BinaryWriter()
        _header(writer, op.fee, op.expire_period, OperationType.ROLL_BUY)
        writer.uvarint(op.roll_count)
        return writer.to_bytes()

    def serialize_roll_sell(self, op: RollSell) -> bytes:
        writer = BinaryWriter()
        _header(writer, op.fee, op.expire_period, OperationType.ROLL_SELL)
        writer.uvarint(op.roll_count)
        return writer.to_bytes()

    def serialize_execute_bytecode(self, op: ExecuteBytecode) -> bytes:
        """
        Layout: fee, expire_period, type(3), max_gas, coins, bytecode blob,
        datastore count, then each key blob and value blob.
        """
        writer = BinaryWriter()
        _header(writer, op.fee, op.expire_period, OperationType.EXECUTE_BYTECODE)
        writer.uvarint(op.max_gas)
        writer.uvarint(op.coins)
        writer.len_prefixed_bytes(op.bytecode)
        writer.uvarint(len(op.datastore))
        for key, value in op.datastore:
            writer.len_prefixed_bytes(key)
            writer.len_prefixed_bytes(value)
        return writer.to_bytes()

    def serialize_call_contract(self, op: CallContract) -> bytes:
        """
        Layout: fee, expire_period, type(4), max_gas, coins, target
        (34 bytes), function name blob (UTF-8), parameter blob.
        """
        writer = BinaryWriter()
        _header(writer, op.fee, op.expire_period, OperationType.CALL_CONTRACT)
        writer.uvarint(op.max_gas)
        writer.uvarint(op.coins)
        writer.bytes(_address_bytes(op.target))
        writer.string_utf8(op.function_name)
        writer.len_prefixed_bytes(op.parameter)
        return writer.to_bytes()

    def deserialize(self, body: bytes) -> Operation:
        """
        Parse an operation body back into its model.

        Raises:
            EncodingError: If the body is truncated, has trailing bytes or an
                unknown type tag
        """
        reader = BinaryReader(body)
        fee = reader.uvarint()
        expire_period = reader.uvarint()
        tag = reader.uvarint()
        common = {"fee": fee, "expire_period": expire_period}

        if tag == OperationType.TRANSFER:
            recipient = Address.from_bytes(reader.bytes(ADDRESS_BYTES_SIZE))
            op: Operation = Transfer(**common, recipient=recipient, amount=reader.uvarint())
        elif tag == OperationType.ROLL_BUY:
            op = RollBuy(**common, roll_count=reader.uvarint())
        elif tag == OperationType.ROLL_SELL:
            op = RollSell(**common, roll_count=reader.uvarint())
        elif tag == OperationType.EXECUTE_BYTECODE:
            max_gas = reader.uvarint()
            coins = reader.uvarint()
            bytecode = reader.len_prefixed_bytes()
            count = reader.uvarint()
            datastore = [
                (reader.len_prefixed_bytes(), reader.len_prefixed_bytes())
                for _ in range(count)
            ]
            op = ExecuteBytecode(
                **common, max_gas=max_gas, coins=coins, bytecode=bytecode, datastore=datastore
            )
        elif tag == OperationType.CALL_CONTRACT:
            max_gas = reader.uvarint()
            coins = reader.uvarint()
            target = Address.from_bytes(reader.bytes(ADDRESS_BYTES_SIZE))
            function_name = reader.string_utf8()
            parameter = reader.len_prefixed_bytes()
            op = CallContract(
                **common, max_gas=max_gas, coins=coins, target=target,
                function_name=function_name, parameter=parameter,
            )
        else:
            raise EncodingError(f"Unknown operation type tag: {tag}", details={"tag": tag})

        if not reader.eof:
            raise EncodingError(
                "Trailing bytes after operation body",
                details={"remaining": reader.remaining()},
            )
        return op


__all__ = [
    "TransferFormat",
    "OperationSerializer",
    "serialize_transfer_standard",
    "serialize_transfer_legacy",
]
