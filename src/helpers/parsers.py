"""Parsing utilities for common data transformations."""

from typing import Any


def parse_hex_int(hex_value: str) -> int:
    """Parse hex string to integer.

    Args:
        hex_value: Hex-encoded string

    Returns:
        int: Parsed integer value

    Raises:
        ValueError: If the string is not valid hex

    Example:
        >>> parse_hex_int("0xff")
        255
    """
    return int(hex_value, 16)


def to_hex_quantity(value: int) -> str:
    """Encode a non-negative integer as a 0x-prefixed hex quantity.

    Example:
        >>> to_hex_quantity(255)
        '0xff'
    """
    if value < 0:
        msg = f"Cannot encode negative quantity {value}"
        raise ValueError(msg)
    return hex(value)


def parse_difficulty(value: Any) -> int | None:
    """Parse a hex difficulty into an arbitrary-precision integer.

    Anything that is not a hex string (missing, wrong type, bad digits)
    yields None instead of raising.

    Example:
        >>> parse_difficulty("0x1b1ae4d6e2ef5000")
        1953125000000000000
        >>> parse_difficulty(None) is None
        True
    """
    if not isinstance(value, str):
        return None
    digits = value.removeprefix("0x")
    if not digits:
        return None
    try:
        difficulty = int(digits, 16)
    except ValueError:
        return None
    return difficulty if difficulty >= 0 else None


__all__ = [
    "parse_difficulty",
    "parse_hex_int",
    "to_hex_quantity",
]
