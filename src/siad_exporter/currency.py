"""Conversions between node units and the values published as gauges.

Currency values come from the node as decimal strings of arbitrary size
(hastings). They stay ``Decimal`` until the final conversion to ``float``.
"""
from __future__ import annotations

from decimal import Decimal, localcontext
from typing import Union

HASTINGS_PER_SIACOIN = Decimal(10) ** 24

BYTES_PER_TERABYTE = 10 ** 12
BLOCKS_PER_HOUR = 6
BLOCKS_PER_WEEK = 7 * 24 * BLOCKS_PER_HOUR
BLOCKS_PER_MONTH = 30 * 24 * BLOCKS_PER_HOUR
BLOCK_BYTES_PER_MONTH_TERABYTE = BYTES_PER_TERABYTE * BLOCKS_PER_MONTH

# Enough digits for any realistic supply figure multiplied by the per-byte rate.
_PRECISION = 80

Amount = Union[str, int, float, Decimal]


def parse_amount(value: Amount) -> Decimal:
    """Parse a node currency value (string, int or Decimal) without losing digits."""
    if isinstance(value, Decimal):
        return value
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return +Decimal(str(value).strip())


def to_siacoins(amount: Amount) -> float:
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return float(parse_amount(amount) / HASTINGS_PER_SIACOIN)


def collateral_per_tb_month(rate: Amount) -> float:
    """Per-byte-per-block collateral rate as siacoins per terabyte per month."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return float(parse_amount(rate) * BLOCK_BYTES_PER_MONTH_TERABYTE / HASTINGS_PER_SIACOIN)


def window_size_hours(blocks: int) -> int:
    return int(blocks) // BLOCKS_PER_HOUR


def blocks_to_weeks(blocks: int) -> float:
    return int(blocks) / BLOCKS_PER_WEEK


def bool_to_float(flag: bool) -> float:
    return 1.0 if flag else 0.0
