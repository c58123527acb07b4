"""Pydantic models for chain data returned by the node."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.helpers.parsers import parse_hex_int


class BlockHeader(BaseModel):
    """Block header as returned by get_tip_header and get_header_by_number."""

    number: str = Field(..., description="Block number as hex string")
    timestamp: str = Field(
        ..., description="Block timestamp in milliseconds as hex string"
    )
    hash: str | None = Field(default=None, description="Block hash")
    epoch: str | None = Field(default=None, description="Packed epoch as hex string")
    compact_target: str | None = Field(
        default=None, description="Compact difficulty target"
    )

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator("number", "timestamp")
    @classmethod
    def _check_hex(cls, value: str) -> str:
        parse_hex_int(value)
        return value

    @property
    def height(self) -> int:
        return parse_hex_int(self.number)

    @property
    def timestamp_ms(self) -> int:
        return parse_hex_int(self.timestamp)


class ChainInfo(BaseModel):
    """Global chain state from get_blockchain_info.

    Difficulty is kept as the raw string so a malformed value degrades the
    hashrate estimate instead of failing validation.
    """

    chain: str | None = None
    difficulty: Any = None
    epoch: str | None = None
    median_time: str | None = None
    is_initial_block_download: bool | None = None

    model_config = ConfigDict(extra="allow", frozen=True)


class Block(BaseModel):
    """Full block from get_block_by_number; only the parts used for tx counts."""

    header: BlockHeader | None = None
    transactions: list[Any] | None = None

    model_config = ConfigDict(extra="allow", frozen=True)


__all__ = [
    "Block",
    "BlockHeader",
    "ChainInfo",
]
