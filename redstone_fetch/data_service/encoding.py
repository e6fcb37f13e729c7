"""
Conversion and ABI encoding utilities for oracle prices.

This module provides functions for scaling decimal prices to fixed point
integers and encoding them the way contract calls expect.
"""

from typing import Union

from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal, localcontext

from eth_abi import encode
from web3 import Web3

from redstone_fetch.data_service.exceptions import DataShapeError

# Price precision used by RedStone numeric data points
DECIMALS_PRICE = 8

UINT256_MAX = 2**256 - 1


def scale_price(price: Union[str, int, float, Decimal], decimals: int = DECIMALS_PRICE, round_up: bool = False) -> int:
    """
    Convert a price to a fixed point integer.

    Args:
        price: Price in standard format
        decimals: Number of decimal places to scale by
        round_up: Round towards positive infinity instead of negative infinity

    Returns:
        Price scaled by 10^decimals and rounded to an integer
    """
    if not isinstance(price, Decimal):
        price = Decimal(str(price))

    if not price.is_finite():
        raise DataShapeError(f"Cannot scale non-finite price: {price}")

    # Widen the context so the shift itself never rounds
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(price.as_tuple().digits) + decimals)
        scaled = price.scaleb(decimals)

    rounding = ROUND_CEILING if round_up else ROUND_FLOOR
    return int(scaled.to_integral_value(rounding=rounding))


def encode_uint256(value: int) -> bytes:
    """
    ABI encode a value as a single uint256 word.

    Args:
        value: Non-negative integer below 2^256

    Returns:
        32 byte big-endian word
    """
    if value < 0 or value > UINT256_MAX:
        raise DataShapeError(f"Value {value} does not fit into uint256")

    return encode(["uint256"], [value])


def to_hex(data: bytes) -> str:
    """Return 0x prefixed hex of the given bytes."""
    return Web3.to_hex(data)
