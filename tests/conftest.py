"""Pytest configuration and shared fixtures for history and API tests."""

from collections import Counter

import pytest

from typing import Any

import asyncio

from src.helpers.models import Block, BlockHeader, ChainInfo


GENESIS_MS = 1_700_000_000_000
"""Timestamp of height 0 in the fake chain"""


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeNodeRPC:
    """In-process stand-in for RPCClient backed by a synthetic chain.

    Block ``h`` has timestamp ``GENESIS_MS + h * block_time_ms`` and
    ``tx_per_block`` real transactions plus the cellbase.
    """

    rpc_url = "http://fake-node:8114/"

    def __init__(
        self,
        tip_height: int = 100,
        block_time_ms: int = 10_000,
        difficulty: Any = hex(10**13),
        tx_per_block: int = 3,
    ) -> None:
        self.tip_height = tip_height
        self.timestamps = {
            h: GENESIS_MS + h * block_time_ms for h in range(tip_height + 1)
        }
        self.difficulty = difficulty
        self.tx_per_block = tx_per_block

        self.calls: Counter[str] = Counter()
        self.header_requests: list[list[int]] = []
        self.block_requests: list[list[int]] = []
        self.forwarded: list[bytes] = []
        self.forward_reply = b'{"jsonrpc":"2.0","id":1,"result":"0x64"}'

        self.gate: asyncio.Event | None = None
        self.fail_tip: Exception | None = None
        self.fail_info: Exception | None = None
        self.fail_headers: Exception | None = None
        self.fail_blocks: Exception | None = None
        self.fail_forward: Exception | None = None
        self.missing_headers: set[int] = set()
        self.closed = False

    def header(self, height: int) -> BlockHeader:
        return BlockHeader(number=hex(height), timestamp=hex(self.timestamps[height]))

    async def get_tip_header(self) -> BlockHeader:
        self.calls["get_tip_header"] += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_tip is not None:
            raise self.fail_tip
        return self.header(self.tip_height)

    async def get_blockchain_info(self) -> ChainInfo:
        self.calls["get_blockchain_info"] += 1
        if self.fail_info is not None:
            raise self.fail_info
        return ChainInfo(chain="ckb", difficulty=self.difficulty)

    async def get_headers_by_number(
        self, heights: list[int]
    ) -> list[BlockHeader | None]:
        self.calls["get_headers_by_number"] += 1
        self.header_requests.append(list(heights))
        if self.fail_headers is not None:
            raise self.fail_headers
        return [
            None if h in self.missing_headers else self.header(h) for h in heights
        ]

    async def get_blocks_by_number(self, heights: list[int]) -> list[Block | None]:
        self.calls["get_blocks_by_number"] += 1
        self.block_requests.append(list(heights))
        if self.fail_blocks is not None:
            raise self.fail_blocks
        transactions = [{"hash": f"0x{i:02x}"} for i in range(self.tx_per_block + 1)]
        return [Block(header=self.header(h), transactions=transactions) for h in heights]

    async def forward(self, payload: bytes) -> bytes:
        self.calls["forward"] += 1
        if self.fail_forward is not None:
            raise self.fail_forward
        self.forwarded.append(payload)
        return self.forward_reply

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_node() -> FakeNodeRPC:
    """Provide a fake node with 101 blocks spaced 10 seconds apart.

    Returns:
        FakeNodeRPC: Fake node at tip height 100 with difficulty 10^13
    """
    return FakeNodeRPC()


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a manually advanced clock.

    Returns:
        FakeClock: Clock starting at 1000.0 seconds
    """
    return FakeClock()


@pytest.fixture
def tolerance() -> float:
    """Provide tolerance for floating point comparisons.

    Returns:
        float: Maximum acceptable difference for float equality
    """
    return 0.0001


@pytest.fixture
def node_factory() -> type[FakeNodeRPC]:
    """Provide the fake node class for tests that need a custom chain.

    Returns:
        type[FakeNodeRPC]: Callable building fake nodes
    """
    return FakeNodeRPC
