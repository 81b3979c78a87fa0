"""
Massa node JSON-RPC client.

Thin synchronous client over ``requests`` exposing the two calls the signer
needs, ``get_status`` and ``send_operations``. It satisfies ``NodeRpc``.
"""

from __future__ import annotations

import json
import logging
import random
from typing import Any, Dict, List, Optional, Union

import requests

from .config import BUILDNET_ENDPOINT, MAINNET_ENDPOINT, ClientConfig
from .runtime.errors import NetworkError, RpcError

logger = logging.getLogger(__name__)


class MassaRpcClient:
    """
    JSON-RPC 2.0 client for a Massa node's public API.

    Example:
        ```python
        with MassaRpcClient("https://buildnet.massa.net/api/v2") as client:
            status = client.get_status()
        ```
    """

    def __init__(
        self,
        config: Union[ClientConfig, str, None] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration or a bare endpoint URL
            session: Optional requests.Session for connection pooling
        """
        if config is None:
            config = ClientConfig()
        elif isinstance(config, str):
            config = ClientConfig(endpoint=config)
        self.config = config
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._session.headers.update({
            "Content-Type": "application/json",
            "User-Agent": config.user_agent,
        })

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    def close(self) -> None:
        """Close the HTTP session if owned by this client."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> MassaRpcClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a JSON-RPC 2.0 call.

        Args:
            method: RPC method name
            params: Positional method parameters

        Returns:
            The ``result`` member of the response

        Raises:
            NetworkError: On HTTP, transport or JSON decoding failure
            RpcError: If the node answers with an error envelope
        """
        request_data: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params if params is not None else [],
            "id": random.randint(1, 1_000_000),
        }
        logger.debug("RPC %s -> %s", method, self.config.endpoint)

        try:
            response = self._session.post(
                self.config.endpoint,
                json=request_data,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
            if response.status_code != 200:
                raise NetworkError(
                    f"HTTP {response.status_code}: {response.reason}",
                    details={"status": response.status_code, "method": method},
                )
            response_data = response.json()
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"HTTP request failed: {e}", cause=e)
        except json.JSONDecodeError as e:
            raise NetworkError(f"Invalid JSON response: {e}", cause=e)

        if not isinstance(response_data, dict):
            raise NetworkError("Malformed JSON-RPC response", details={"method": method})

        if response_data.get("error") is not None:
            error = response_data["error"]
            if isinstance(error, dict):
                raise RpcError(
                    error.get("message", "Unknown error"),
                    rpc_code=error.get("code"),
                    data=error.get("data"),
                )
            raise RpcError(str(error))

        return response_data.get("result")

    def get_status(self) -> Dict[str, Any]:
        """Fetch node status, including ``chain_id`` and ``next_slot``."""
        result = self._call("get_status")
        if not isinstance(result, dict):
            raise NetworkError("get_status returned no status object")
        return result

    def send_operations(self, operations: List[Dict[str, Any]]) -> List[str]:
        """
        Submit signed operations.

        Args:
            operations: ``SignedOperation.to_rpc()`` dicts

        Returns:
            Operation ids accepted by the node, possibly empty
        """
        result = self._call("send_operations", [operations])
        if result is None:
            return []
        if not isinstance(result, list):
            raise NetworkError("send_operations returned a non-list result")
        return [str(op_id) for op_id in result]


def mainnet_client(**kwargs) -> MassaRpcClient:
    """Create a client for the Massa mainnet public API."""
    return MassaRpcClient(ClientConfig(endpoint=MAINNET_ENDPOINT, **kwargs))


def buildnet_client(**kwargs) -> MassaRpcClient:
    """Create a client for the Massa buildnet public API."""
    return MassaRpcClient(ClientConfig(endpoint=BUILDNET_ENDPOINT, **kwargs))


__all__ = ["MassaRpcClient", "mainnet_client", "buildnet_client"]
