"""Derived block statistics: block times, transaction counts and hashrate.

Everything here is pure computation over already-fetched node data.
Difficulty and hashrate stay Python ints throughout so values beyond the
float-safe range keep full precision.
"""

import itertools
import math

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from src.helpers.constants import (
    AVG_BLOCK_WINDOW,
    COINBASE_TX_COUNT,
    HASHRATE_UNAVAILABLE,
    HASHRATE_WINDOW,
)
from src.helpers.models import Block, BlockHeader
from src.helpers.parsers import parse_difficulty
from src.history.models import BlockStat, HashratePoint, HistorySnapshot


TERA = 10**12

HASHRATE_UNITS: tuple[tuple[int, str], ...] = (
    (10**18, "EH/s"),
    (10**15, "PH/s"),
    (10**12, "TH/s"),
    (10**9, "GH/s"),
    (10**6, "MH/s"),
    (10**3, "kH/s"),
    (1, "H/s"),
)


def transaction_count(transactions: Sequence[Any] | None) -> int:
    """Count real transactions in a block, excluding the leading cellbase.

    Example:
        >>> transaction_count([{}, {}, {}, {}, {}])
        4
        >>> transaction_count([])
        0
    """
    if transactions is None:
        return 0
    return max(0, len(transactions) - COINBASE_TX_COUNT)


def transaction_counts(blocks: Iterable[Block | None]) -> dict[int, int]:
    """Map block height to real transaction count for the fetched blocks.

    Blocks the node did not return, or returned without a header, are skipped.
    """
    counts: dict[int, int] = {}
    for block in blocks:
        if block is None or block.header is None:
            continue
        counts[block.header.height] = transaction_count(block.transactions)
    return counts


def build_block_stats(
    headers: Sequence[BlockHeader], tx_counts: Mapping[int, int]
) -> list[BlockStat]:
    """Build one BlockStat per header after the first.

    Args:
        headers: Contiguous headers in ascending height order
        tx_counts: Transaction count per height for the tx-fetch window

    Returns:
        Block statistics, oldest first; the first header only serves as the
        predecessor of the second
    """
    return [
        BlockStat(
            height=header.height,
            timestamp_ms=header.timestamp_ms,
            transaction_count=tx_counts.get(header.height),
            block_time_ms=header.timestamp_ms - prev.timestamp_ms,
        )
        for prev, header in itertools.pairwise(headers)
    ]


def _mean_block_time_sec(blocks: Sequence[BlockStat]) -> float:
    if not blocks:
        return 0.0
    return sum(b.block_time_ms for b in blocks) / len(blocks) / 1000


def average_block_time_sec(
    blocks: Sequence[BlockStat], window: int = AVG_BLOCK_WINDOW
) -> float:
    """Average block time in seconds over the last ``window`` entries."""
    return _mean_block_time_sec(blocks[-window:])


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def estimate_hashrate(difficulty: int, block_time_sec: float) -> int:
    """Estimate hashrate in H/s as difficulty over the rounded block time.

    The divisor never drops below 1 second.

    Example:
        >>> estimate_hashrate(10**13, 10.0)
        1000000000000
    """
    return difficulty // max(1, round_half_up(block_time_sec))


def format_hashrate(hashrate: int) -> str:
    """Render a hashrate with the largest fitting unit and two decimals.

    Example:
        >>> format_hashrate(10**12)
        '1.00 TH/s'
        >>> format_hashrate(500)
        '500.00 H/s'
    """
    for divisor, unit in HASHRATE_UNITS:
        if hashrate >= divisor:
            value = (hashrate * 1000 // divisor) / 1000
            return f"{value:.2f} {unit}"
    return "0.00 H/s"


def hashrate_per_block(
    blocks: Sequence[BlockStat], difficulty: int, window: int = HASHRATE_WINDOW
) -> list[HashratePoint]:
    """Rolling hashrate estimate for every block from index ``window`` onward.

    Each point uses the average block time of the ``window`` entries before
    it. A window whose average is not positive reports 0.
    """
    points: list[HashratePoint] = []
    for i in range(window, len(blocks)):
        avg_sec = _mean_block_time_sec(blocks[i - window : i])
        rate = estimate_hashrate(difficulty, avg_sec) if avg_sec > 0 else 0
        points.append(
            HashratePoint(
                height=blocks[i].height, hashrate_tera_hash_per_sec=rate // TERA
            )
        )
    return points


def build_snapshot(
    tip_height: int,
    headers: Sequence[BlockHeader],
    tx_counts: Mapping[int, int],
    difficulty: Any,
) -> HistorySnapshot:
    """Compute a full history snapshot from fetched node data.

    Args:
        tip_height: Height of the chain tip
        headers: Contiguous headers ending at the tip, ascending
        tx_counts: Transaction counts for the tx-fetch window
        difficulty: Raw difficulty from get_blockchain_info; anything that
            does not parse reports the hashrate as unavailable

    Returns:
        New HistorySnapshot
    """
    blocks = build_block_stats(headers, tx_counts)
    avg_sec = average_block_time_sec(blocks)

    network_hashrate = HASHRATE_UNAVAILABLE
    points: list[HashratePoint] = []
    parsed = parse_difficulty(difficulty)
    if parsed is not None:
        network_hashrate = format_hashrate(estimate_hashrate(parsed, avg_sec))
        points = hashrate_per_block(blocks, parsed)

    return HistorySnapshot(
        blocks=tuple(blocks),
        average_block_time_sec=avg_sec,
        network_hashrate=network_hashrate,
        hashrate_per_block=tuple(points),
        tip_height=tip_height,
    )


__all__ = [
    "HASHRATE_UNITS",
    "average_block_time_sec",
    "build_block_stats",
    "build_snapshot",
    "estimate_hashrate",
    "format_hashrate",
    "hashrate_per_block",
    "round_half_up",
    "transaction_count",
    "transaction_counts",
]
