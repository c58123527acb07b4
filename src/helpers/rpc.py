"""CKB node JSON-RPC client utilities."""

import itertools

from types import TracebackType
from typing import Any, Self

import httpx
from pydantic import ValidationError

from src.helpers.constants import RPC_TIMEOUT
from src.helpers.errors import RpcError, TransportError
from src.helpers.http import create_http_client
from src.helpers.http_models import JsonRpcPayload
from src.helpers.logging import get_logger
from src.helpers.models import Block, BlockHeader, ChainInfo
from src.helpers.parsers import to_hex_quantity
from src.helpers.rpc_models import (
    GET_BLOCK_BY_NUMBER,
    GET_BLOCKCHAIN_INFO,
    GET_HEADER_BY_NUMBER,
    GET_TIP_HEADER,
    JsonRpcRequest,
    JsonRpcResponse,
)


logger = get_logger(__name__)


class RPCClient:
    """CKB JSON-RPC client with batching support.

    Talks to one fixed endpoint. Transport problems surface as
    TransportError and node-reported errors as RpcError.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = RPC_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize RPC client.

        Args:
            rpc_url: Node JSON-RPC endpoint URL
            timeout: Timeout for each request in seconds
            http_client: Optional shared HTTP client; one is created if omitted

        Raises:
            ValueError: If rpc_url is empty or None
        """
        if not rpc_url:
            msg = "RPC URL cannot be empty"
            raise ValueError(msg)

        self.rpc_url = rpc_url
        self.timeout = timeout
        self._owns_client = http_client is None
        self._http_client = http_client or create_http_client(timeout)
        self._request_ids = itertools.count(1)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def _post(self, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http_client.post(
                self.rpc_url, timeout=self.timeout, **kwargs
            )
        except httpx.TimeoutException as e:
            msg = f"Node request timed out after {self.timeout}s"
            raise TransportError(msg) from e
        except httpx.HTTPError as e:
            msg = f"Node request failed: {e}"
            raise TransportError(msg) from e

    async def _send(
        self, payload: dict[str, Any] | list[dict[str, Any]]
    ) -> JsonRpcPayload:
        response = await self._post(json=payload)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            msg = f"Node returned HTTP {response.status_code}"
            raise TransportError(msg) from e

        try:
            return response.json()
        except ValueError as e:
            msg = "Node returned a non-JSON response"
            raise TransportError(msg) from e

    async def call(self, method: str, params: list[Any] | None = None) -> Any:
        """Make a single JSON-RPC call.

        Args:
            method: RPC method name (e.g., "get_tip_header")
            params: Method parameters list

        Returns:
            RPC result value, passed through untyped

        Raises:
            TransportError: On connection failure, timeout or malformed reply
            RpcError: If the node reports an error for the call
        """
        request = JsonRpcRequest(
            method=method, params=params or [], id=next(self._request_ids)
        )
        body = await self._send(request.model_dump())
        if not isinstance(body, dict):
            msg = f"Expected JSON-RPC object response for {method}"
            raise TransportError(msg)

        try:
            envelope = JsonRpcResponse.model_validate(body)
        except ValidationError as e:
            msg = f"Malformed JSON-RPC response for {method}"
            raise TransportError(msg) from e

        if envelope.error is not None:
            raise RpcError(envelope.error.code, envelope.error.message)

        return envelope.result

    async def batch_call(
        self,
        requests: list[tuple[str, list[Any]]],
    ) -> list[Any]:
        """Make multiple JSON-RPC calls in a single batch request.

        Each request is tagged with its position as id. Replies may arrive in
        any order and are put back into request order. Items the node failed
        (or omitted) come back as None.

        Args:
            requests: List of (method, params) tuples

        Returns:
            List of results in the same order as requests

        Raises:
            TransportError: If the request fails or the reply is not an array
        """
        if not requests:
            return []

        batch_payload = [
            JsonRpcRequest(method=method, params=params, id=idx).model_dump()
            for idx, (method, params) in enumerate(requests)
        ]
        body = await self._send(batch_payload)
        if not isinstance(body, list):
            msg = "Expected batch array response"
            raise TransportError(msg)

        results_by_id: dict[int, Any] = {}
        for item in body:
            try:
                envelope = JsonRpcResponse.model_validate(item)
            except ValidationError:
                logger.debug("Skipping malformed batch item: %r", item)
                continue
            if not isinstance(envelope.id, int):
                continue
            if envelope.error is not None:
                logger.debug(
                    "Batch item %s failed: %s", envelope.id, envelope.error.message
                )
                continue
            results_by_id[envelope.id] = envelope.result

        return [results_by_id.get(idx) for idx in range(len(requests))]

    async def forward(self, payload: bytes) -> bytes:
        """Relay a raw JSON-RPC body to the node and return its raw reply.

        Args:
            payload: Request body as received from a browser

        Returns:
            Response body exactly as sent by the node

        Raises:
            TransportError: On connection failure or timeout
        """
        response = await self._post(
            content=payload, headers={"Content-Type": "application/json"}
        )
        return response.content

    async def get_tip_header(self) -> BlockHeader:
        """Get the header of the current chain tip."""
        result = await self.call(GET_TIP_HEADER)
        return BlockHeader.model_validate(result)

    async def get_blockchain_info(self) -> ChainInfo:
        """Get global chain information, including difficulty."""
        result = await self.call(GET_BLOCKCHAIN_INFO)
        return ChainInfo.model_validate(result)

    async def get_headers_by_number(
        self, heights: list[int]
    ) -> list[BlockHeader | None]:
        """Batch-fetch headers for the given heights.

        Args:
            heights: Block heights, in the order results should be returned

        Returns:
            Headers in input order, None where the node had no result
        """
        results = await self.batch_call(
            [(GET_HEADER_BY_NUMBER, [to_hex_quantity(h)]) for h in heights]
        )
        return [
            BlockHeader.model_validate(r) if r is not None else None for r in results
        ]

    async def get_blocks_by_number(self, heights: list[int]) -> list[Block | None]:
        """Batch-fetch full blocks for the given heights.

        Args:
            heights: Block heights, in the order results should be returned

        Returns:
            Blocks in input order, None where the node had no result
        """
        results = await self.batch_call(
            [(GET_BLOCK_BY_NUMBER, [to_hex_quantity(h)]) for h in heights]
        )
        return [Block.model_validate(r) if r is not None else None for r in results]


__all__ = [
    "RPCClient",
]
