"""
Operation signers.

Currently Ed25519, the only key type the chain accepts for user operations.
"""

from .ed25519 import (
    OperationSigner,
    SignedOperation,
    operation_digest,
    sign_operation,
    signable_message,
)

__all__ = [
    "OperationSigner",
    "SignedOperation",
    "operation_digest",
    "sign_operation",
    "signable_message",
]
