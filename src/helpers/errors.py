"""Error types raised while talking to the node and aggregating history."""


class NodeError(Exception):
    """Base class for node communication and aggregation failures."""


class TransportError(NodeError):
    """Connection refused, reset, timed out, or a malformed HTTP exchange."""


class RpcError(NodeError):
    """The node answered with a JSON-RPC error object.

    Args:
        code: JSON-RPC error code reported by the node
        message: Error message reported by the node
    """

    def __init__(self, code: int | None, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"RPC error {code}: {message}")


class AggregationError(NodeError):
    """A history refresh cycle failed on a mandatory fetch.

    The underlying exception is available as ``cause`` and ``__cause__``.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message if cause is None else f"{message}: {cause}")


__all__ = [
    "AggregationError",
    "NodeError",
    "RpcError",
    "TransportError",
]
