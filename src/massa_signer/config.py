"""
Configuration for the signer and the default node client.
"""

from __future__ import annotations

from dataclasses import dataclass

from .tx.inputs import DEFAULT_CALL_MAX_GAS, DEFAULT_EXECUTE_MAX_GAS

MAINNET_ENDPOINT = "https://mainnet.massa.net/api/v2"
BUILDNET_ENDPOINT = "https://buildnet.massa.net/api/v2"


@dataclass
class SignerConfig:
    """Behavior of the submission pipeline."""

    # Operations expire this many periods after the node's next slot.
    expire_period_offset: int = 10
    call_max_gas: int = DEFAULT_CALL_MAX_GAS
    execute_max_gas: int = DEFAULT_EXECUTE_MAX_GAS
    # Re-serialize rejected transfers with the legacy field ordering.
    legacy_transfer_fallback: bool = True


@dataclass
class ClientConfig:
    """Configuration for the JSON-RPC node client."""

    endpoint: str = MAINNET_ENDPOINT
    timeout: float = 30.0
    verify_ssl: bool = True
    user_agent: str = "massa-signer-python/0.1.0"


__all__ = [
    "MAINNET_ENDPOINT",
    "BUILDNET_ENDPOINT",
    "SignerConfig",
    "ClientConfig",
]
