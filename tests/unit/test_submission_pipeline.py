"""
Dual-format submission pipeline tests against an in-memory node.
"""

import pytest

from massa_signer.config import SignerConfig
from massa_signer.runtime.errors import (
    ErrorCode,
    InvalidAddressPrefix,
    InvalidOperationInput,
    MassaError,
    NetworkError,
    NetworkStatusUnavailable,
    NoOperationIdReturned,
    ParameterDecodeFailed,
    PrecisionExceeded,
    RpcError,
    SubmissionRejected,
)
from massa_signer.signers import SignedOperation
from massa_signer.submission import OperationSubmitter, SubmissionResult, SubmissionState
from massa_signer.tx import CallContract, ExecuteBytecode, OperationSerializer, RollBuy, Transfer

CHAIN_ID = 77658366
SENDER = "AU-sender"

S = SubmissionState

HAPPY_PATH = [S.FETCHING_STATUS, S.SERIALIZING_STANDARD, S.SIGNING, S.SUBMITTING, S.SUCCESS]
LEGACY_PATH = [
    S.FETCHING_STATUS, S.SERIALIZING_STANDARD, S.SIGNING, S.SUBMITTING,
    S.RETRY_LEGACY, S.SERIALIZING_LEGACY, S.SIGNING, S.SUBMITTING,
]


def sent_operation(rpc, index=0):
    """Rebuild the SignedOperation from a recorded send_operations call."""
    (payload,) = rpc.sent[index]
    return SignedOperation(
        creator_public_key=payload["creator_public_key"],
        signature=payload["signature"],
        serialized_content=bytes(payload["serialized_content"]),
    )


@pytest.mark.unit
class TestTransferSubmission:

    def test_success(self, fake_rpc, private_key_text, user_address):
        submitter = OperationSubmitter(fake_rpc)
        result = submitter.sign_transfer(SENDER, user_address, "1.5", "0.01", private_key_text)

        assert result.is_successful
        assert result.operation_id == "O1operation"
        assert result.unwrap() == "O1operation"
        assert result.states == HAPPY_PATH
        assert result.attempts == 1
        assert fake_rpc.status_calls == 1
        assert len(fake_rpc.sent) == 1

    def test_submitted_body_and_signature(self, fake_rpc, private_key_text, user_address):
        OperationSubmitter(fake_rpc).sign_transfer(SENDER, user_address, "1.5", "0.01", private_key_text)

        signed = sent_operation(fake_rpc)
        assert signed.verify(CHAIN_ID)
        op = OperationSerializer().deserialize(signed.serialized_content)
        assert isinstance(op, Transfer)
        assert op.fee == 10_000_000
        assert op.amount == 1_500_000_000
        assert op.expire_period == 1000 + 10
        assert op.recipient == user_address

    def test_rejection_retries_with_legacy_once(self, rpc_factory, private_key_text, user_address):
        rpc = rpc_factory(responses=[RpcError("bad operation"), ["O1legacy"]])
        result = OperationSubmitter(rpc).sign_transfer(SENDER, user_address, "1", "0.01", private_key_text)

        assert result.is_successful
        assert result.operation_id == "O1legacy"
        assert result.states == LEGACY_PATH + [S.SUCCESS]
        assert result.attempts == 2
        assert len(rpc.sent) == 2
        assert rpc.status_calls == 1

    def test_second_rejection_is_final(self, rpc_factory, private_key_text, user_address):
        rpc = rpc_factory(responses=[RpcError("first"), RpcError("second"), ["never"]])
        result = OperationSubmitter(rpc).sign_transfer(SENDER, user_address, "1", "0.01", private_key_text)

        assert not result.is_successful
        assert isinstance(result.error, SubmissionRejected)
        assert result.error.message == "second"
        assert result.states == LEGACY_PATH + [S.FAILED]
        assert len(rpc.sent) == 2

    def test_missing_operation_id_triggers_legacy(self, rpc_factory, private_key_text, user_address):
        rpc = rpc_factory(responses=[[], ["O1legacy"]])
        result = OperationSubmitter(rpc).sign_transfer(SENDER, user_address, "1", "0.01", private_key_text)

        assert result.operation_id == "O1legacy"
        assert len(rpc.sent) == 2

    def test_transport_failure_is_not_retried(self, rpc_factory, private_key_text, user_address):
        rpc = rpc_factory(responses=[NetworkError("connection reset"), ["never"]])
        result = OperationSubmitter(rpc).sign_transfer(SENDER, user_address, "1", "0.01", private_key_text)

        assert isinstance(result.error, NetworkError)
        assert not isinstance(result.error, SubmissionRejected)
        assert len(rpc.sent) == 1

    def test_legacy_fallback_can_be_disabled(self, rpc_factory, private_key_text, user_address):
        rpc = rpc_factory(responses=[RpcError("rejected"), ["never"]])
        submitter = OperationSubmitter(rpc, SignerConfig(legacy_transfer_fallback=False))
        result = submitter.sign_transfer(SENDER, user_address, "1", "0.01", private_key_text)

        assert isinstance(result.error, SubmissionRejected)
        assert len(rpc.sent) == 1

    def test_legacy_retry_uses_legacy_serializer(self, rpc_factory, private_key_text, user_address):
        """Test that the second attempt goes through the legacy transfer path."""
        calls = []

        class RecordingSerializer(OperationSerializer):
            def serialize(self, operation, transfer_format=None):
                calls.append(transfer_format)
                return super().serialize(operation, transfer_format)

        rpc = rpc_factory(responses=[RpcError("rejected"), ["O1legacy"]])
        OperationSubmitter(rpc, serializer=RecordingSerializer()).sign_transfer(
            SENDER, user_address, "1", "0.01", private_key_text
        )
        assert [fmt.value for fmt in calls] == ["standard", "legacy"]


@pytest.mark.unit
class TestOtherOperationSubmission:

    def test_roll_buy_rejection_is_terminal(self, rpc_factory, private_key_text):
        rpc = rpc_factory(responses=[RpcError("no coins"), ["never"]])
        result = OperationSubmitter(rpc).sign_roll_buy(SENDER, 2, "0.01", private_key_text)

        assert isinstance(result.error, SubmissionRejected)
        assert result.error.code == ErrorCode.SUBMISSION_REJECTED
        assert result.states == HAPPY_PATH[:-1] + [S.FAILED]
        assert len(rpc.sent) == 1

    def test_roll_buy(self, fake_rpc, private_key_text):
        result = OperationSubmitter(fake_rpc).sign_roll_buy(SENDER, 2, "0.01", private_key_text)
        op = OperationSerializer().deserialize(sent_operation(fake_rpc).serialized_content)

        assert result.is_successful
        assert isinstance(op, RollBuy)
        assert op.roll_count == 2

    def test_roll_sell_no_id_is_terminal(self, rpc_factory, private_key_text):
        rpc = rpc_factory(responses=[[], ["never"]])
        result = OperationSubmitter(rpc).sign_roll_sell(SENDER, 1, "0", private_key_text)

        assert isinstance(result.error, NoOperationIdReturned)
        assert len(rpc.sent) == 1

    def test_call_contract(self, fake_rpc, private_key_text, contract_address):
        result = OperationSubmitter(fake_rpc).sign_call_contract(
            SENDER, contract_address, "transfer", '{"0":65,"1":66}', "0.5", "0.01", None,
            private_key_text,
        )
        op = OperationSerializer().deserialize(sent_operation(fake_rpc).serialized_content)

        assert result.is_successful
        assert isinstance(op, CallContract)
        assert op.parameter == b"AB"
        assert op.coins == 500_000_000
        assert op.max_gas == 100_000_000
        assert op.function_name == "transfer"

    def test_execute_bytecode(self, fake_rpc, private_key_text):
        result = OperationSubmitter(fake_rpc).sign_execute_bytecode(
            SENDER, "0061736d", '[{"key": "k", "value": [1]}]', "0", "0.01", "2000",
            private_key_text,
        )
        op = OperationSerializer().deserialize(sent_operation(fake_rpc).serialized_content)

        assert result.is_successful
        assert isinstance(op, ExecuteBytecode)
        assert op.bytecode == b"\x00asm"
        assert op.datastore == [(b"k", b"\x01")]
        assert op.max_gas == 2000

    def test_execute_bytecode_default_gas(self, fake_rpc, private_key_text):
        OperationSubmitter(fake_rpc).sign_execute_bytecode(
            SENDER, "AGFzbQ==", None, "0", "0.01", None, private_key_text,
        )
        op = OperationSerializer().deserialize(sent_operation(fake_rpc).serialized_content)
        assert op.max_gas == 500_000_000


@pytest.mark.unit
class TestFailuresBeforeSubmission:
    """Every failure comes back as a result; nothing is raised."""

    def test_status_failure(self, rpc_factory, private_key_text, user_address):
        rpc = rpc_factory(status_error=NetworkError("down"))
        result = OperationSubmitter(rpc).sign_transfer(SENDER, user_address, "1", "0.01", private_key_text)

        assert isinstance(result.error, NetworkStatusUnavailable)
        assert isinstance(result.error.cause, NetworkError)
        assert result.states == [S.FETCHING_STATUS, S.FAILED]
        assert rpc.sent == []

    def test_connection_failure_during_status(self, rpc_factory, private_key_text, user_address):
        rpc = rpc_factory(status_error=ConnectionError("refused"))
        result = OperationSubmitter(rpc).sign_transfer(SENDER, user_address, "1", "0.01", private_key_text)

        assert isinstance(result.error, NetworkStatusUnavailable)
        assert isinstance(result.error.cause, ConnectionError)
        assert result.states == [S.FETCHING_STATUS, S.FAILED]
        assert rpc.sent == []

    @pytest.mark.parametrize("status", [
        {},
        {"chain_id": CHAIN_ID},
        {"chain_id": "not-a-number", "next_slot": {"period": 1}},
        {"chain_id": CHAIN_ID, "next_slot": {}},
    ])
    def test_malformed_status(self, rpc_factory, private_key_text, status):
        rpc = rpc_factory(status=status)
        result = OperationSubmitter(rpc).sign_roll_buy(SENDER, 1, "0.01", private_key_text)

        assert isinstance(result.error, NetworkStatusUnavailable)
        assert rpc.sent == []

    def test_camel_case_status(self, rpc_factory, private_key_text):
        rpc = rpc_factory(status={"chainId": str(CHAIN_ID), "nextSlot": {"period": 5}})
        result = OperationSubmitter(rpc).sign_roll_buy(SENDER, 1, "0.01", private_key_text)

        assert result.is_successful
        assert sent_operation(rpc).verify(CHAIN_ID)

    def test_invalid_amount_fails_before_status(self, fake_rpc, private_key_text, user_address):
        result = OperationSubmitter(fake_rpc).sign_transfer(
            SENDER, user_address, "0.0000000001", "0.01", private_key_text
        )

        assert isinstance(result.error, PrecisionExceeded)
        assert result.states == [S.FAILED]
        assert fake_rpc.status_calls == 0

    def test_invalid_recipient(self, fake_rpc, private_key_text):
        result = OperationSubmitter(fake_rpc).sign_transfer(SENDER, "XX123", "1", "0.01", private_key_text)
        assert isinstance(result.error, InvalidAddressPrefix)

    def test_invalid_private_key(self, fake_rpc, user_address):
        result = OperationSubmitter(fake_rpc).sign_transfer(SENDER, user_address, "1", "0.01", "nope")

        assert isinstance(result.error, MassaError)
        assert result.error.code == ErrorCode.INVALID_PRIVATE_KEY_PREFIX
        assert fake_rpc.status_calls == 0

    def test_empty_bytecode(self, fake_rpc, private_key_text):
        result = OperationSubmitter(fake_rpc).sign_execute_bytecode(
            SENDER, "", None, "0", "0.01", None, private_key_text,
        )
        assert isinstance(result.error, ParameterDecodeFailed)

    def test_model_validation_error(self, fake_rpc, private_key_text):
        result = OperationSubmitter(fake_rpc).sign_roll_buy(SENDER, -1, "0.01", private_key_text)

        assert isinstance(result.error, InvalidOperationInput)
        assert fake_rpc.sent == []
        assert fake_rpc.status_calls == 0
        assert result.states == [S.FAILED]

    def test_non_integer_roll_count_rejected_before_status(self, fake_rpc, private_key_text):
        result = OperationSubmitter(fake_rpc).sign_roll_sell(SENDER, "many", "0.01", private_key_text)

        assert isinstance(result.error, InvalidOperationInput)
        assert fake_rpc.status_calls == 0

    def test_unexpected_exception_is_wrapped(self, rpc_factory, private_key_text):
        rpc = rpc_factory(responses=[RuntimeError("boom")])
        result = OperationSubmitter(rpc).sign_roll_buy(SENDER, 1, "0.01", private_key_text)

        assert isinstance(result.error, NetworkError)
        assert isinstance(result.error.cause, RuntimeError)


@pytest.mark.unit
class TestSubmissionResult:

    def test_unwrap_raises_error(self):
        error = SubmissionRejected("rejected")
        result = SubmissionResult(error=error)
        with pytest.raises(SubmissionRejected):
            result.unwrap()

    def test_unwrap_without_id(self):
        with pytest.raises(NoOperationIdReturned):
            SubmissionResult().unwrap()

    def test_state(self):
        result = SubmissionResult(states=[S.FETCHING_STATUS, S.FAILED])
        assert result.state is S.FAILED
        assert SubmissionResult().state is None

    def test_error_to_dict(self):
        error = SubmissionRejected("rejected", details={"rpcCode": -32000})
        assert error.to_dict() == {
            "code": ErrorCode.SUBMISSION_REJECTED.value,
            "kind": "SubmissionRejected",
            "message": "rejected",
            "details": {"rpcCode": -32000},
        }
        assert str(error).startswith("[SUBMISSION_REJECTED] rejected")
