"""HTTP client utilities and helpers."""

from contextlib import asynccontextmanager

from collections.abc import AsyncIterator
from typing import Any

import httpx

from src.helpers.constants import (
    MAX_CONNECTIONS,
    MAX_KEEPALIVE_CONNECTIONS,
    RPC_TIMEOUT,
)
from src.helpers.logging import get_logger


logger = get_logger(__name__)


def create_http_client(
    timeout: float = RPC_TIMEOUT, **kwargs: Any
) -> httpx.AsyncClient:
    """Create a configured httpx AsyncClient.

    Args:
        timeout: Default timeout in seconds (default: RPC_TIMEOUT)
        **kwargs: Additional httpx.AsyncClient kwargs

    Returns:
        Configured AsyncClient instance with a bounded connection pool

    Example:
        ```python
        from src.helpers.http import create_http_client

        async with create_http_client(timeout=5.0) as client:
            response = await client.post("http://127.0.0.1:8114/", json=payload)
        ```
    """
    kwargs.setdefault(
        "limits",
        httpx.Limits(
            max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
            max_connections=MAX_CONNECTIONS,
        ),
    )
    kwargs.setdefault("headers", {"Content-Type": "application/json"})
    return httpx.AsyncClient(timeout=timeout, **kwargs)


@asynccontextmanager
async def log_and_suppress_errors(operation_name: str) -> AsyncIterator[None]:
    """Context manager to log and suppress errors from background work.

    Cancellation is not an Exception and still propagates.

    Args:
        operation_name: Description of the operation for logging

    Yields:
        None

    Example:
        ```python
        from src.helpers.http import log_and_suppress_errors

        async with log_and_suppress_errors("History pre-warm"):
            await aggregator.get_snapshot()
        ```
    """
    try:
        yield
    except Exception as e:
        logger.warning("%s failed: %s", operation_name, e)


__all__ = [
    "create_http_client",
    "log_and_suppress_errors",
]
