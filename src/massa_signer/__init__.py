"""
Massa Signer

Builds, serializes, signs and submits Massa blockchain operations:
coin transfers, roll purchases and sales, smart contract calls and
bytecode execution.

Example:
    ```python
    from massa_signer import OperationSubmitter, buildnet_client

    with buildnet_client() as client:
        result = OperationSubmitter(client).sign_transfer(
            from_address, recipient, "1.5", "0.01", private_key
        )
        if result.is_successful:
            print(result.operation_id)
    ```
"""

from .client import MassaRpcClient, buildnet_client, mainnet_client
from .config import BUILDNET_ENDPOINT, MAINNET_ENDPOINT, ClientConfig, SignerConfig
from .network import NetworkContext, NodeRpc
from .runtime.address import Address, AddressKind, is_valid_address
from .runtime.amount import from_minor_units, to_minor_units
from .runtime.errors import ErrorCode, MassaError
from .signers.ed25519 import OperationSigner, SignedOperation
from .submission import OperationSubmitter, SubmissionResult, SubmissionState
from .tx.fees import estimate_fee
from .tx.serializer import OperationSerializer, TransferFormat

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "MassaRpcClient",
    "mainnet_client",
    "buildnet_client",
    "MAINNET_ENDPOINT",
    "BUILDNET_ENDPOINT",
    "ClientConfig",
    "SignerConfig",
    "NetworkContext",
    "NodeRpc",
    "Address",
    "AddressKind",
    "is_valid_address",
    "to_minor_units",
    "from_minor_units",
    "ErrorCode",
    "MassaError",
    "OperationSigner",
    "SignedOperation",
    "OperationSubmitter",
    "SubmissionResult",
    "SubmissionState",
    "estimate_fee",
    "OperationSerializer",
    "TransferFormat",
]
