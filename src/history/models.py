"""Pydantic models for derived block history."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class BlockStat(_SnapshotModel):
    """Per-block statistics derived from two adjacent headers."""

    height: int = Field(..., ge=0)
    timestamp_ms: int = Field(..., ge=0)
    transaction_count: int | None = Field(
        default=None, ge=0, description="None when outside the tx-fetch window"
    )
    block_time_ms: int = Field(
        ..., description="Timestamp difference to the previous block"
    )


class HashratePoint(_SnapshotModel):
    """Windowed hashrate estimate at a given block, in whole TH/s."""

    height: int = Field(..., ge=0)
    hashrate_tera_hash_per_sec: int = Field(..., ge=0)


class HistorySnapshot(_SnapshotModel):
    """Result of one aggregation cycle, cached and returned to callers."""

    blocks: tuple[BlockStat, ...] = ()
    average_block_time_sec: float = 0.0
    network_hashrate: str
    hashrate_per_block: tuple[HashratePoint, ...] = ()
    tip_height: int = Field(..., ge=0)


__all__ = [
    "BlockStat",
    "HashratePoint",
    "HistorySnapshot",
]
