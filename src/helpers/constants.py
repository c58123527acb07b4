"""Common configuration constants used across the application."""

# RPC Constants
RPC_TIMEOUT = 10.0
"""Per-request timeout for node RPC calls in seconds"""

JSONRPC_VERSION = "2.0"
"""JSON-RPC protocol version sent with every request"""

# HTTP Connection Pooling
MAX_KEEPALIVE_CONNECTIONS = 5
"""Maximum number of keepalive connections in pool"""

MAX_CONNECTIONS = 10
"""Maximum total number of connections"""

# History Window Constants
HISTORY_TTL = 15.0
"""Seconds a history snapshot stays fresh"""

HEADER_WINDOW = 60
"""Number of most recent headers fetched for block-time history"""

TX_WINDOW = 30
"""Number of most recent full blocks fetched for transaction counts"""

AVG_BLOCK_WINDOW = 20
"""Number of trailing blocks averaged for the network block time"""

HASHRATE_WINDOW = 10
"""Number of trailing blocks averaged for each per-block hashrate point"""

COINBASE_TX_COUNT = 1
"""Synthetic cellbase transactions included at the head of every block"""

HASHRATE_UNAVAILABLE = "unavailable"
"""Network hashrate value reported when difficulty cannot be read"""

# HTTP Server Constants
MAX_PROXY_BODY = 64 * 1024
"""Largest request body accepted by the RPC proxy route in bytes"""

DEFAULT_NODE_HOST = "127.0.0.1"
"""Default CKB node RPC host"""

DEFAULT_NODE_PORT = 8114
"""Default CKB node RPC port"""

DEFAULT_SERVER_HOST = "0.0.0.0"  # noqa: S104
"""Default dashboard bind address"""

DEFAULT_SERVER_PORT = 8080
"""Default dashboard port"""


__all__ = [
    "AVG_BLOCK_WINDOW",
    "COINBASE_TX_COUNT",
    "DEFAULT_NODE_HOST",
    "DEFAULT_NODE_PORT",
    "DEFAULT_SERVER_HOST",
    "DEFAULT_SERVER_PORT",
    "HASHRATE_UNAVAILABLE",
    "HASHRATE_WINDOW",
    "HEADER_WINDOW",
    "HISTORY_TTL",
    "JSONRPC_VERSION",
    "MAX_CONNECTIONS",
    "MAX_KEEPALIVE_CONNECTIONS",
    "MAX_PROXY_BODY",
    "RPC_TIMEOUT",
    "TX_WINDOW",
]
