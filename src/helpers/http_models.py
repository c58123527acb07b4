"""Type definitions for HTTP responses."""

from typing import Any, TypeAlias


# Decoded JSON-RPC reply: a single envelope or a batch array
JsonRpcPayload: TypeAlias = dict[str, Any] | list[Any]

__all__ = ["JsonRpcPayload"]
