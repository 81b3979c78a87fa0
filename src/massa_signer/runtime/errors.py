"""
Massa Signer Error Model

This module provides the error handling framework for the signing engine.
Every codec, serializer and submission failure is a subclass of MassaError
carrying a stable ErrorCode, so callers can branch on the kind of failure
without parsing messages.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes for the signing engine."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Encoding errors (100-199)
    ENCODING_ERROR = 100
    TRUNCATED_VARINT = 101
    INVALID_CHARACTER = 102
    CHECKSUM_MISMATCH = 103

    # Network errors (200-299)
    NETWORK_ERROR = 200
    NETWORK_STATUS_UNAVAILABLE = 201

    # Identity errors (300-399)
    INVALID_ADDRESS_PREFIX = 300
    INVALID_ADDRESS_LENGTH = 301
    INVALID_PUBLIC_KEY_PREFIX = 302
    INVALID_PUBLIC_KEY_LENGTH = 303
    INVALID_PRIVATE_KEY_PREFIX = 304
    INVALID_PRIVATE_KEY_LENGTH = 305
    INVALID_SIGNATURE = 306

    # Amount and input errors (400-499)
    INVALID_AMOUNT = 400
    PRECISION_EXCEEDED = 401
    AMOUNT_TOO_LARGE = 402
    PARAMETER_DECODE_FAILED = 403
    INVALID_OPERATION = 404

    # Submission errors (500-599)
    SUBMISSION_REJECTED = 500
    NO_OPERATION_ID_RETURNED = 501
    SIGNING_FAILED = 502


class MassaError(Exception):
    """
    Base class for all signing engine errors.

    Carries a machine-readable code, a human message, optional details and
    the underlying exception that caused it.
    """

    default_code = ErrorCode.UNKNOWN

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize an error.

        Args:
            message: Error message
            code: Error code (defaults to the class default)
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result: Dict[str, Any] = {
            "code": self.code.value,
            "kind": type(self).__name__,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


# -- encoding -----------------------------------------------------------------

class EncodingError(MassaError):
    """Binary or text encoding/decoding errors."""
    default_code = ErrorCode.ENCODING_ERROR


class TruncatedVarint(EncodingError):
    """Input ended in the middle of a varint."""
    default_code = ErrorCode.TRUNCATED_VARINT


class InvalidCharacter(EncodingError):
    """Character outside the Base58 alphabet."""
    default_code = ErrorCode.INVALID_CHARACTER

    def __init__(self, character: str, position: int):
        super().__init__(
            f"Invalid Base58 character {character!r} at position {position}",
            details={"character": character, "position": position},
        )
        self.character = character
        self.position = position


class ChecksumMismatch(EncodingError):
    """Base58Check checksum does not match the payload."""
    default_code = ErrorCode.CHECKSUM_MISMATCH


# -- network ------------------------------------------------------------------

class NetworkError(MassaError):
    """Transport-level failures talking to a node."""
    default_code = ErrorCode.NETWORK_ERROR


class RpcError(NetworkError):
    """JSON-RPC error envelope or malformed RPC response."""

    def __init__(self, message: str, rpc_code: Optional[int] = None, data: Any = None,
                 cause: Optional[Exception] = None):
        details = {}
        if rpc_code is not None:
            details["rpcCode"] = rpc_code
        if data is not None:
            details["data"] = data
        super().__init__(message, details=details, cause=cause)
        self.rpc_code = rpc_code
        self.data = data


class NetworkStatusUnavailable(NetworkError):
    """Chain id or next period could not be fetched."""
    default_code = ErrorCode.NETWORK_STATUS_UNAVAILABLE


# -- identity -----------------------------------------------------------------

class InvalidAddressPrefix(MassaError):
    default_code = ErrorCode.INVALID_ADDRESS_PREFIX


class InvalidAddressLength(MassaError):
    default_code = ErrorCode.INVALID_ADDRESS_LENGTH


class InvalidPublicKeyPrefix(MassaError):
    default_code = ErrorCode.INVALID_PUBLIC_KEY_PREFIX


class InvalidPublicKeyLength(MassaError):
    default_code = ErrorCode.INVALID_PUBLIC_KEY_LENGTH


class InvalidPrivateKeyPrefix(MassaError):
    default_code = ErrorCode.INVALID_PRIVATE_KEY_PREFIX


class InvalidPrivateKeyLength(MassaError):
    default_code = ErrorCode.INVALID_PRIVATE_KEY_LENGTH


class InvalidSignature(MassaError):
    default_code = ErrorCode.INVALID_SIGNATURE


# -- amounts and inputs -------------------------------------------------------

class InvalidAmount(MassaError):
    """Amount string is not a non-negative decimal number."""
    default_code = ErrorCode.INVALID_AMOUNT


class PrecisionExceeded(InvalidAmount):
    """Amount has more decimals than the minor unit can represent."""
    default_code = ErrorCode.PRECISION_EXCEEDED


class AmountTooLarge(InvalidAmount):
    """Amount in minor units does not fit a 63-bit signed integer."""
    default_code = ErrorCode.AMOUNT_TOO_LARGE


class ParameterDecodeFailed(MassaError):
    """Call parameter, bytecode or datastore input could not be decoded."""
    default_code = ErrorCode.PARAMETER_DECODE_FAILED


class InvalidOperationInput(MassaError):
    """Operation fields failed model validation."""
    default_code = ErrorCode.INVALID_OPERATION


# -- submission ---------------------------------------------------------------

class SigningError(MassaError):
    """Ed25519 key or signature operation failed."""
    default_code = ErrorCode.SIGNING_FAILED


class SubmissionRejected(MassaError):
    """The node answered send_operations with an error envelope."""
    default_code = ErrorCode.SUBMISSION_REJECTED


class NoOperationIdReturned(MassaError):
    """The node accepted the request but returned no operation id."""
    default_code = ErrorCode.NO_OPERATION_ID_RETURNED

    def __init__(self, message: str = "No operation ID returned",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, details=details, cause=cause)


__all__ = [
    "ErrorCode",
    "MassaError",
    "EncodingError",
    "TruncatedVarint",
    "InvalidCharacter",
    "ChecksumMismatch",
    "NetworkError",
    "RpcError",
    "NetworkStatusUnavailable",
    "InvalidAddressPrefix",
    "InvalidAddressLength",
    "InvalidPublicKeyPrefix",
    "InvalidPublicKeyLength",
    "InvalidPrivateKeyPrefix",
    "InvalidPrivateKeyLength",
    "InvalidSignature",
    "InvalidAmount",
    "PrecisionExceeded",
    "AmountTooLarge",
    "ParameterDecodeFailed",
    "InvalidOperationInput",
    "SigningError",
    "SubmissionRejected",
    "NoOperationIdReturned",
]
