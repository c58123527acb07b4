"""Pydantic models for JSON-RPC requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.helpers.constants import JSONRPC_VERSION


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request model."""

    jsonrpc: str = Field(default=JSONRPC_VERSION, description="JSON-RPC version")
    method: str = Field(..., description="Method name to call")
    params: list[Any] = Field(
        default_factory=list, description="Method parameters"
    )
    id: int | str = Field(..., description="Request ID")


class JsonRpcErrorObject(BaseModel):
    """Error member of a JSON-RPC response."""

    code: int | None = None
    message: str = "unknown error"
    data: Any = None

    model_config = ConfigDict(extra="allow")


class JsonRpcResponse(BaseModel):
    """JSON-RPC 2.0 response envelope.

    Exactly one of ``result`` or ``error`` is meaningful; a missing result is
    kept as None.
    """

    jsonrpc: str | None = None
    id: int | str | None = None
    result: Any = None
    error: JsonRpcErrorObject | None = None

    model_config = ConfigDict(extra="allow")


GET_TIP_HEADER = "get_tip_header"
GET_BLOCKCHAIN_INFO = "get_blockchain_info"
GET_HEADER_BY_NUMBER = "get_header_by_number"
GET_BLOCK_BY_NUMBER = "get_block_by_number"


__all__ = [
    "GET_BLOCKCHAIN_INFO",
    "GET_BLOCK_BY_NUMBER",
    "GET_HEADER_BY_NUMBER",
    "GET_TIP_HEADER",
    "JsonRpcErrorObject",
    "JsonRpcRequest",
    "JsonRpcResponse",
]
