"""
Shared fixtures: a deterministic signing key, sample addresses and an
in-memory node standing in for the JSON-RPC client.
"""

import pytest

from massa_signer.crypto.ed25519 import Ed25519PrivateKey
from massa_signer.crypto.keys import encode_private_key
from massa_signer.runtime.address import Address, AddressKind

CHAIN_ID = 77658366
NEXT_PERIOD = 1000


class FakeNodeRpc:
    """
    In-memory ``NodeRpc``.

    ``responses`` is consumed one entry per ``send_operations`` call; an entry
    is either a list of operation ids or an exception to raise.
    """

    def __init__(self, status=None, responses=None, status_error=None):
        self.status = status if status is not None else {
            "chain_id": CHAIN_ID,
            "next_slot": {"period": NEXT_PERIOD, "thread": 3},
        }
        self.responses = list(responses or [["O1operation"]])
        self.status_error = status_error
        self.status_calls = 0
        self.sent = []

    def get_status(self):
        self.status_calls += 1
        if self.status_error is not None:
            raise self.status_error
        return self.status

    def send_operations(self, operations):
        self.sent.append(operations)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def seed():
    """Deterministic 32-byte Ed25519 seed."""
    return bytes(range(32))


@pytest.fixture
def private_key(seed):
    return Ed25519PrivateKey(seed)


@pytest.fixture
def private_key_text(private_key):
    """``S...`` text of the deterministic key."""
    return encode_private_key(private_key)


@pytest.fixture
def user_address():
    return str(Address(AddressKind.USER, 0, b"\xaa" * 32))


@pytest.fixture
def contract_address():
    return str(Address(AddressKind.CONTRACT, 0, b"\x5c" * 32))


@pytest.fixture
def fake_rpc():
    return FakeNodeRpc()


@pytest.fixture
def rpc_factory():
    """Build a ``FakeNodeRpc`` with custom status or responses."""
    return FakeNodeRpc
