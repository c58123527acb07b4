"""Configuration management and environment variable utilities."""

import os

from dotenv import load_dotenv

from src.helpers.constants import (
    DEFAULT_NODE_HOST,
    DEFAULT_NODE_PORT,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
)


# Load environment variables from .env file
load_dotenv()


def get_optional_env(key: str, default: str | None = None) -> str | None:
    """Get an optional environment variable with a default value.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.getenv(key, default)


def get_int_env(key: str, default: int) -> int:
    """Get an integer environment variable.

    Args:
        key: Environment variable name
        default: Value used when the variable is unset or empty

    Returns:
        Parsed integer value

    Raises:
        ValueError: If the variable is set but not an integer

    Example:
        ```python
        from src.helpers.config import get_int_env

        port = get_int_env("CKB_RPC_PORT", 8114)
        ```
    """
    value = os.getenv(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        msg = f"{key} must be an integer, got {value!r}"
        raise ValueError(msg) from None


def get_node_rpc_url(rpc_url: str | None = None) -> str:
    """Get the CKB node RPC URL from parameter or environment.

    Host and port come from CKB_RPC_HOST and CKB_RPC_PORT and are used as-is.

    Args:
        rpc_url: Optional RPC URL to use directly

    Returns:
        Node RPC URL ending with the root path

    Example:
        ```python
        from src.helpers.config import get_node_rpc_url

        # Get from environment
        rpc_url = get_node_rpc_url()

        # Or provide explicitly
        rpc_url = get_node_rpc_url("http://192.168.1.20:8114/")
        ```
    """
    if rpc_url:
        return rpc_url

    host = get_optional_env("CKB_RPC_HOST") or DEFAULT_NODE_HOST
    port = get_int_env("CKB_RPC_PORT", DEFAULT_NODE_PORT)
    return f"http://{host}:{port}/"


def get_server_address() -> tuple[str, int]:
    """Get the dashboard bind address from environment.

    Returns:
        Tuple of (host, port) read from DASHBOARD_HOST and DASHBOARD_PORT
    """
    host = get_optional_env("DASHBOARD_HOST") or DEFAULT_SERVER_HOST
    port = get_int_env("DASHBOARD_PORT", DEFAULT_SERVER_PORT)
    return host, port


__all__ = [
    "get_int_env",
    "get_node_rpc_url",
    "get_optional_env",
    "get_server_address",
]
