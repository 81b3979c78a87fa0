"""
Dual-format submission pipeline.

Each ``sign_*`` call runs one sequential pipeline:

    FETCHING_STATUS -> SERIALIZING_STANDARD -> SIGNING -> SUBMITTING -> SUCCESS
                                                               \\-> RETRY_LEGACY
    RETRY_LEGACY -> SERIALIZING_LEGACY -> SIGNING -> SUBMITTING -> SUCCESS | FAILED

Only a Transfer rejected by the node takes the legacy branch; every other
failure is terminal. The outcome is always a ``SubmissionResult``; no
exception escapes a ``sign_*`` call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Union

from pydantic import ValidationError

from .config import SignerConfig
from .network import NetworkContext, NodeRpc
from .runtime.address import Address
from .runtime.amount import to_minor_units
from .runtime.errors import (
    ErrorCode,
    InvalidOperationInput,
    MassaError,
    NetworkError,
    NetworkStatusUnavailable,
    NoOperationIdReturned,
    RpcError,
    SubmissionRejected,
)
from .signers.ed25519 import OperationSigner, SignedOperation
from .tx.inputs import decode_bytecode, decode_datastore, decode_parameter, parse_max_gas
from .tx.operations import CallContract, ExecuteBytecode, Operation, RollBuy, RollSell, Transfer
from .tx.serializer import OperationSerializer, TransferFormat

logger = logging.getLogger(__name__)

Amount = Union[str, int]


class SubmissionState(Enum):
    """Pipeline states, in the order they can be visited."""
    FETCHING_STATUS = "fetching_status"
    SERIALIZING_STANDARD = "serializing_standard"
    SIGNING = "signing"
    SUBMITTING = "submitting"
    RETRY_LEGACY = "retry_legacy"
    SERIALIZING_LEGACY = "serializing_legacy"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class SubmissionResult:
    """Outcome of one sign-and-submit call: an operation id or an error."""
    operation_id: Optional[str] = None
    error: Optional[MassaError] = None
    states: List[SubmissionState] = field(default_factory=list)
    attempts: int = 0

    @property
    def is_successful(self) -> bool:
        return self.operation_id is not None and self.error is None

    @property
    def state(self) -> Optional[SubmissionState]:
        """Last state reached."""
        return self.states[-1] if self.states else None

    def unwrap(self) -> str:
        """Return the operation id, or raise the recorded error."""
        if self.error is not None:
            raise self.error
        if self.operation_id is None:
            raise NoOperationIdReturned()
        return self.operation_id

    def _advance(self, state: SubmissionState) -> None:
        self.states.append(state)


@dataclass
class _Attempt:
    operation_id: Optional[str] = None
    error: Optional[MassaError] = None


class OperationSubmitter:
    """
    Builds, signs and submits operations against a node.

    Args:
        rpc: Node collaborator (``MassaRpcClient`` or any ``NodeRpc``)
        config: Pipeline behavior
        serializer: Operation serializer, replaceable for testing
    """

    def __init__(
        self,
        rpc: NodeRpc,
        config: Optional[SignerConfig] = None,
        serializer: Optional[OperationSerializer] = None,
    ):
        self.rpc = rpc
        self.config = config or SignerConfig()
        self.serializer = serializer or OperationSerializer()

    # =========================================================================
    # Public operations
    # =========================================================================

    def sign_transfer(self, from_address: str, to: str, amount: Amount, fee: Amount,
                      private_key: str) -> SubmissionResult:
        """
        Transfer coins to another address.

        Args:
            from_address: Sender address, used for logging only
            to: Recipient address text
            amount: Whole-unit decimal amount, e.g. ``"1.5"``
            fee: Whole-unit decimal fee
            private_key: Sender private key (hex or ``S...``)
        """
        def prepare() -> Operation:
            recipient = Address.from_string(to)
            amount_minor = to_minor_units(amount)
            fee_minor = to_minor_units(fee)
            return Transfer(
                fee=fee_minor, expire_period=0, recipient=recipient, amount=amount_minor
            )

        return self._execute("transfer", from_address, private_key, prepare)

    def sign_roll_buy(self, from_address: str, roll_count: int, fee: Amount,
                      private_key: str) -> SubmissionResult:
        """Buy ``roll_count`` stake rolls."""
        def prepare() -> Operation:
            fee_minor = to_minor_units(fee)
            return RollBuy(fee=fee_minor, expire_period=0, roll_count=roll_count)

        return self._execute("roll_buy", from_address, private_key, prepare)

    def sign_roll_sell(self, from_address: str, roll_count: int, fee: Amount,
                       private_key: str) -> SubmissionResult:
        """Sell ``roll_count`` stake rolls."""
        def prepare() -> Operation:
            fee_minor = to_minor_units(fee)
            return RollSell(fee=fee_minor, expire_period=0, roll_count=roll_count)

        return self._execute("roll_sell", from_address, private_key, prepare)

    def sign_call_contract(self, from_address: str, target: str, function_name: str,
                           parameter: Optional[Union[str, bytes]], coins: Amount, fee: Amount,
                           max_gas: Optional[Union[str, int]], private_key: str) -> SubmissionResult:
        """
        Call a smart contract function.

        ``parameter`` may be a numeric-key JSON object, a JSON numeric array,
        Base64, hex or plain text; see ``tx.inputs.decode_parameter``. A missing
        ``max_gas`` uses ``SignerConfig.call_max_gas``.
        """
        def prepare() -> Operation:
            target_address = Address.from_string(target)
            parameter_bytes = decode_parameter(parameter)
            coins_minor = to_minor_units(coins)
            fee_minor = to_minor_units(fee)
            gas = parse_max_gas(max_gas, self.config.call_max_gas)
            return CallContract(
                fee=fee_minor,
                expire_period=0,
                max_gas=gas,
                coins=coins_minor,
                target=target_address,
                function_name=function_name,
                parameter=parameter_bytes,
            )

        return self._execute("call_contract", from_address, private_key, prepare)

    def sign_execute_bytecode(self, from_address: str, bytecode: Union[str, bytes],
                              datastore: Optional[Union[str, Sequence[Any]]], coins: Amount,
                              fee: Amount, max_gas: Optional[Union[str, int]],
                              private_key: str) -> SubmissionResult:
        """
        Execute (deploy) smart contract bytecode.

        ``bytecode`` may be a JSON numeric array, hex, Base64 or plain text.
        A missing ``max_gas`` uses ``SignerConfig.execute_max_gas``.
        """
        def prepare() -> Operation:
            code = decode_bytecode(bytecode)
            entries = decode_datastore(datastore)
            coins_minor = to_minor_units(coins)
            fee_minor = to_minor_units(fee)
            gas = parse_max_gas(max_gas, self.config.execute_max_gas)
            return ExecuteBytecode(
                fee=fee_minor,
                expire_period=0,
                max_gas=gas,
                coins=coins_minor,
                bytecode=code,
                datastore=entries,
            )

        return self._execute("execute_bytecode", from_address, private_key, prepare)

    # =========================================================================
    # Pipeline
    # =========================================================================

    def fetch_network_context(self) -> NetworkContext:
        """
        Fetch chain id and next period from the node.

        Raises:
            NetworkStatusUnavailable: On any RPC failure or malformed status
        """
        try:
            return NetworkContext.from_status(self.rpc.get_status())
        except NetworkStatusUnavailable:
            raise
        except Exception as e:
            raise NetworkStatusUnavailable("Unable to fetch network status", cause=e)

    def _execute(self, label: str, from_address: str, private_key: str,
                 prepare: Callable[[], Operation]) -> SubmissionResult:
        result = SubmissionResult()
        try:
            # Inputs are validated before any network call; the expire period
            # is filled in once the node status is known.
            signer = OperationSigner.from_text(private_key)
            draft = self._build(prepare)

            result._advance(SubmissionState.FETCHING_STATUS)
            network = self.fetch_network_context()
            operation = draft.model_copy(
                update={"expire_period": network.expire_period(self.config.expire_period_offset)}
            )

            result._advance(SubmissionState.SERIALIZING_STANDARD)
            attempt = self._attempt(operation, TransferFormat.STANDARD, signer, network, result)

            if attempt.error is not None and self._should_retry_legacy(operation, attempt.error):
                logger.warning(
                    "%s from %s rejected (%s); retrying with legacy serialization",
                    label, from_address, attempt.error.message,
                )
                result._advance(SubmissionState.RETRY_LEGACY)
                result._advance(SubmissionState.SERIALIZING_LEGACY)
                attempt = self._attempt(operation, TransferFormat.LEGACY, signer, network, result)
        except MassaError as e:
            attempt = _Attempt(error=e)
        except Exception as e:
            logger.exception("Unexpected failure while submitting %s", label)
            attempt = _Attempt(error=MassaError(
                f"Unexpected {type(e).__name__} while submitting {label}",
                code=ErrorCode.INTERNAL,
                cause=e,
            ))

        if attempt.error is None:
            result.operation_id = attempt.operation_id
            result._advance(SubmissionState.SUCCESS)
            logger.info("%s from %s submitted: %s", label, from_address, attempt.operation_id)
        else:
            result.error = attempt.error
            result._advance(SubmissionState.FAILED)
            logger.error("%s from %s failed: %s", label, from_address, attempt.error)
        return result

    def _build(self, prepare: Callable[[], Operation]) -> Operation:
        try:
            return prepare()
        except ValidationError as e:
            raise InvalidOperationInput(
                "Operation fields failed validation",
                details={"errors": [err["msg"] for err in e.errors()]},
                cause=e,
            )

    def _should_retry_legacy(self, operation: Operation, error: MassaError) -> bool:
        return (
            self.config.legacy_transfer_fallback
            and isinstance(operation, Transfer)
            and isinstance(error, (SubmissionRejected, NoOperationIdReturned))
        )

    def _attempt(self, operation: Operation, transfer_format: TransferFormat,
                 signer: OperationSigner, network: NetworkContext,
                 result: SubmissionResult) -> _Attempt:
        body = self.serializer.serialize(operation, transfer_format)

        result._advance(SubmissionState.SIGNING)
        signed = signer.sign(body, network)

        result._advance(SubmissionState.SUBMITTING)
        result.attempts += 1
        try:
            return _Attempt(operation_id=self._send(signed))
        except (SubmissionRejected, NoOperationIdReturned, NetworkError) as e:
            return _Attempt(error=e)

    def _send(self, signed: SignedOperation) -> str:
        try:
            operation_ids = self.rpc.send_operations([signed.to_rpc()])
        except RpcError as e:
            raise SubmissionRejected(e.message, details=e.details, cause=e)
        except MassaError:
            raise
        except Exception as e:
            raise NetworkError(f"send_operations failed: {e}", cause=e)
        if not operation_ids or not operation_ids[0]:
            raise NoOperationIdReturned()
        return operation_ids[0]


__all__ = [
    "SubmissionState",
    "SubmissionResult",
    "OperationSubmitter",
]
