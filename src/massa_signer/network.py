"""
Node collaborator interface and network context.

The signing pipeline talks to a node only through ``NodeRpc``: one status
fetch per operation and one ``send_operations`` call per submission attempt.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Protocol

from pydantic import AliasChoices, BaseModel, Field

from .codec.varint import U64_MAX


class NodeRpc(Protocol):
    """
    Minimal node API used by the submitter.

    ``send_operations`` must raise ``RpcError`` when the node answers with an
    error envelope; any other ``MassaError`` is treated as a transport failure.
    """

    def get_status(self) -> Dict[str, Any]:
        ...

    def send_operations(self, operations: List[Dict[str, Any]]) -> List[str]:
        ...


class Slot(BaseModel):
    period: int = Field(..., ge=0)
    thread: int = 0


class NodeStatus(BaseModel):
    """Subset of the ``get_status`` result the signer needs."""

    chain_id: int = Field(..., ge=0, le=U64_MAX, validation_alias=AliasChoices("chain_id", "chainId"))
    next_slot: Slot = Field(..., validation_alias=AliasChoices("next_slot", "nextSlot"))

    model_config = {"extra": "ignore"}


@dataclass(frozen=True)
class NetworkContext:
    """Chain id and current period, fetched fresh for each operation."""

    chain_id: int
    current_period: int

    @classmethod
    def from_status(cls, status: Dict[str, Any]) -> NetworkContext:
        parsed = NodeStatus.model_validate(status)
        return cls(chain_id=parsed.chain_id, current_period=parsed.next_slot.period)

    def expire_period(self, offset: int = 10) -> int:
        """Last period in which an operation created now stays valid."""
        return self.current_period + offset


__all__ = ["NodeRpc", "Slot", "NodeStatus", "NetworkContext"]
