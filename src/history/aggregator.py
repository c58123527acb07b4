"""History aggregation engine with a single-flight, time-bounded cache.

The aggregator owns one cache slot holding the latest HistorySnapshot and the
clock reading of the refresh that produced it. Readers inside the freshness
window get the cached snapshot without I/O; otherwise one refresh cycle runs
and every concurrent reader awaits that same cycle.

Usage:
    ```python
    async with RPCClient(get_node_rpc_url()) as rpc:
        aggregator = HistoryAggregator(rpc)
        aggregator.warm_up()
        snapshot = await aggregator.get_snapshot()
    ```
"""

import time

from collections.abc import Callable
from contextlib import suppress
from enum import StrEnum

import asyncio

from src.helpers.constants import HEADER_WINDOW, HISTORY_TTL, TX_WINDOW
from src.helpers.errors import AggregationError, NodeError
from src.helpers.http import log_and_suppress_errors
from src.helpers.logging import get_logger
from src.helpers.rpc import RPCClient
from src.history.models import HistorySnapshot
from src.history.stats import build_snapshot, transaction_counts


logger = get_logger(__name__)


class CacheState(StrEnum):
    """Freshness of the aggregator's cache slot."""

    EMPTY = "empty"
    FRESH = "fresh"
    STALE = "stale"


class HistoryAggregator:
    """Fetches recent chain history and caches the derived snapshot."""

    def __init__(
        self,
        rpc_client: RPCClient,
        *,
        ttl: float = HISTORY_TTL,
        header_window: int = HEADER_WINDOW,
        tx_window: int = TX_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the aggregator with an empty cache.

        Args:
            rpc_client: Client for the node's JSON-RPC endpoint
            ttl: Seconds a snapshot stays fresh
            header_window: Number of most recent headers to fetch
            tx_window: Number of most recent full blocks to fetch for tx counts
            clock: Monotonic time source in seconds
        """
        self.rpc_client = rpc_client
        self.ttl = ttl
        self.header_window = header_window
        self.tx_window = tx_window
        self._clock = clock

        self._snapshot: HistorySnapshot | None = None
        self._updated_at: float | None = None
        self._refresh_task: asyncio.Task[HistorySnapshot] | None = None
        self._warm_up_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> CacheState:
        if self._snapshot is None or self._updated_at is None:
            return CacheState.EMPTY
        if self._clock() - self._updated_at < self.ttl:
            return CacheState.FRESH
        return CacheState.STALE

    @property
    def cached_snapshot(self) -> HistorySnapshot | None:
        """Last successful snapshot regardless of age, for stale reads."""
        return self._snapshot

    @property
    def last_updated(self) -> float | None:
        """Clock reading at the start of the last successful refresh."""
        return self._updated_at

    async def get_snapshot(self) -> HistorySnapshot:
        """Return a fresh snapshot, refreshing at most once concurrently.

        Returns:
            The cached snapshot while fresh, otherwise the result of the
            in-flight (or a newly started) refresh cycle

        Raises:
            AggregationError: If the refresh fails on a mandatory fetch
        """
        if self.state is CacheState.FRESH and self._snapshot is not None:
            return self._snapshot

        if self._refresh_task is None:
            self._refresh_task = asyncio.create_task(self._refresh())

        # Shielded so a cancelled reader does not cancel the shared refresh
        return await asyncio.shield(self._refresh_task)

    def warm_up(self) -> asyncio.Task[None]:
        """Start one background refresh so the first reader finds a warm cache."""
        if self._warm_up_task is None or self._warm_up_task.done():
            self._warm_up_task = asyncio.create_task(self._warm_up())
        return self._warm_up_task

    async def aclose(self) -> None:
        """Cancel a pending warm-up and any in-flight refresh."""
        if self._warm_up_task is not None and not self._warm_up_task.done():
            self._warm_up_task.cancel()
            with suppress(asyncio.CancelledError):
                await self._warm_up_task

        # The refresh clears its own slot on exit, so hold a reference
        refresh_task = self._refresh_task
        if refresh_task is not None and not refresh_task.done():
            refresh_task.cancel()
            with suppress(asyncio.CancelledError, NodeError):
                await refresh_task
        self._refresh_task = None

    async def _warm_up(self) -> None:
        async with log_and_suppress_errors("History pre-warm"):
            snapshot = await self.get_snapshot()
            logger.info("History cache warmed at tip #%s", snapshot.tip_height)

    async def _refresh(self) -> HistorySnapshot:
        started_at = self._clock()
        try:
            snapshot = await self._aggregate()
        finally:
            self._refresh_task = None

        self._snapshot = snapshot
        self._updated_at = started_at
        logger.info(
            "Refreshed history at tip #%s (%s blocks, avg %.2fs, %s)",
            snapshot.tip_height,
            len(snapshot.blocks),
            snapshot.average_block_time_sec,
            snapshot.network_hashrate,
        )
        return snapshot

    async def _aggregate(self) -> HistorySnapshot:
        try:
            tip, chain_info = await asyncio.gather(
                self.rpc_client.get_tip_header(),
                self.rpc_client.get_blockchain_info(),
            )
            tip_height = tip.height
            count = min(self.header_window, tip_height + 1)
            start = tip_height - count + 1
            heights = list(range(start, tip_height + 1))

            logger.debug("Fetching headers #%s..#%s", start, tip_height)
            headers = await self.rpc_client.get_headers_by_number(heights)
        except (NodeError, ValueError) as e:
            logger.warning("History refresh failed: %s", e)
            msg = "History refresh failed"
            raise AggregationError(msg, e) from e

        if len(headers) != len(heights):
            msg = f"Header batch returned {len(headers)} of {len(heights)} headers"
            logger.warning(msg)
            raise AggregationError(msg)

        fetched = []
        for height, header in zip(heights, headers, strict=True):
            if header is None or header.height != height:
                msg = f"Node returned no matching header for height {height}"
                logger.warning(msg)
                raise AggregationError(msg)
            fetched.append(header)

        tx_heights = heights[-min(self.tx_window, count) :]
        tx_counts = await self._fetch_transaction_counts(tx_heights)

        return build_snapshot(tip_height, fetched, tx_counts, chain_info.difficulty)

    async def _fetch_transaction_counts(self, heights: list[int]) -> dict[int, int]:
        try:
            blocks = await self.rpc_client.get_blocks_by_number(heights)
        except (NodeError, ValueError) as e:
            logger.warning(
                "Transaction count fetch failed, continuing without counts: %s", e
            )
            return {}
        return transaction_counts(blocks)


__all__ = [
    "CacheState",
    "HistoryAggregator",
]
