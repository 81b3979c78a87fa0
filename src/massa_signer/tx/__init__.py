"""
Operation construction: models, input normalization, serialization and fees.
"""

from .fees import FeeParams, estimate_fee
from .inputs import (
    DEFAULT_CALL_MAX_GAS,
    DEFAULT_EXECUTE_MAX_GAS,
    decode_bytecode,
    decode_datastore,
    decode_parameter,
    parse_max_gas,
)
from .operations import (
    CallContract,
    ExecuteBytecode,
    Operation,
    OperationType,
    RollBuy,
    RollSell,
    Transfer,
)
from .serializer import (
    OperationSerializer,
    TransferFormat,
    serialize_transfer_legacy,
    serialize_transfer_standard,
)

__all__ = [
    "FeeParams",
    "estimate_fee",
    "DEFAULT_CALL_MAX_GAS",
    "DEFAULT_EXECUTE_MAX_GAS",
    "decode_bytecode",
    "decode_datastore",
    "decode_parameter",
    "parse_max_gas",
    "CallContract",
    "ExecuteBytecode",
    "Operation",
    "OperationType",
    "RollBuy",
    "RollSell",
    "Transfer",
    "OperationSerializer",
    "TransferFormat",
    "serialize_transfer_legacy",
    "serialize_transfer_standard",
]
