"""
Operation models.

One Pydantic model per operation kind. All monetary fields are integers in
minor units; conversion from user-facing decimal strings happens before a
model is built (see ``runtime.amount``).
"""

from __future__ import annotations

from enum import IntEnum
from typing import ClassVar, List, Tuple, Union

from pydantic import BaseModel, Field

from ..codec.varint import U64_MAX
from ..runtime.address import Address
from ..runtime.amount import MAX_AMOUNT


class OperationType(IntEnum):
    """Wire tag of each operation kind."""
    TRANSFER = 0
    ROLL_BUY = 1
    ROLL_SELL = 2
    EXECUTE_BYTECODE = 3
    CALL_CONTRACT = 4


DatastoreEntry = Tuple[bytes, bytes]


class OperationBase(BaseModel):
    """Fields shared by every operation: fee and expire period."""

    operation_type: ClassVar[OperationType]

    fee: int = Field(..., ge=0, le=MAX_AMOUNT, description="Fee in minor units")
    expire_period: int = Field(..., ge=0, le=U64_MAX, alias="expirePeriod")

    model_config = {"populate_by_name": True, "frozen": True}


class Transfer(OperationBase):
    """Send coins to another address."""
    operation_type: ClassVar[OperationType] = OperationType.TRANSFER

    recipient: Address
    amount: int = Field(..., ge=0, le=MAX_AMOUNT)


class RollBuy(OperationBase):
    """Buy stake rolls."""
    operation_type: ClassVar[OperationType] = OperationType.ROLL_BUY

    roll_count: int = Field(..., ge=0, le=U64_MAX, alias="rollCount")


class RollSell(OperationBase):
    """Sell stake rolls."""
    operation_type: ClassVar[OperationType] = OperationType.ROLL_SELL

    roll_count: int = Field(..., ge=0, le=U64_MAX, alias="rollCount")


class ExecuteBytecode(OperationBase):
    """Execute (typically deploy) smart contract bytecode."""
    operation_type: ClassVar[OperationType] = OperationType.EXECUTE_BYTECODE

    max_gas: int = Field(..., ge=0, le=U64_MAX, alias="maxGas")
    coins: int = Field(0, ge=0, le=MAX_AMOUNT)
    bytecode: bytes
    datastore: List[DatastoreEntry] = Field(default_factory=list)


class CallContract(OperationBase):
    """Call a function on a deployed smart contract."""
    operation_type: ClassVar[OperationType] = OperationType.CALL_CONTRACT

    max_gas: int = Field(..., ge=0, le=U64_MAX, alias="maxGas")
    coins: int = Field(0, ge=0, le=MAX_AMOUNT)
    target: Address
    function_name: str = Field(..., alias="functionName")
    parameter: bytes = b""


Operation = Union[Transfer, RollBuy, RollSell, ExecuteBytecode, CallContract]


__all__ = [
    "OperationType",
    "DatastoreEntry",
    "OperationBase",
    "Transfer",
    "RollBuy",
    "RollSell",
    "ExecuteBytecode",
    "CallContract",
    "Operation",
]
