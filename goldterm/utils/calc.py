# goldterm/utils/calc.py
# -*- coding: utf-8 -*-
"""
Gold price computations (USD/oz ↔ MMK/kyat thar).

This module provides *pure* helpers independent of any UI formatting.
Always compute first, then format in presentation layers.

Public API
----------
price_from_world(world_price, exchange_rate, unit=OZ_TO_KYATTHAR) -> float
    Local price per kyat thar: (world_price / unit) * exchange_rate.

implied_rate(local_price, world_price, unit=OZ_TO_KYATTHAR) -> float
    Exchange rate implied by an observed local price: (local_price * unit) / world_price.

split_denomination(value) -> Denomination
    Lakh breakdown: floor(value / 100000) lakhs + floor(value mod 100000).

calculate(mode, world_price, exchange_rate, local_price, unit=OZ_TO_KYATTHAR) -> CalculationResult
    Primary figure for the mode plus its lakh breakdown.

Both formulas return 0.0 when an operand is missing (zero, None or NaN):
that means "not enough input yet", not an error.
"""

from __future__ import annotations

import math
from typing import Optional, Union

from goldterm.config.constants import LAKH, OZ_TO_KYATTHAR
from goldterm.core.models import CalculationMode, CalculationResult, Denomination

Number = Union[int, float]

__all__ = [
    "price_from_world",
    "implied_rate",
    "split_denomination",
    "calculate",
]


def _missing(x: Optional[Number]) -> bool:
    return x is None or x == 0 or (isinstance(x, float) and math.isnan(x))


def price_from_world(world_price: Number, exchange_rate: Number, unit: float = OZ_TO_KYATTHAR) -> float:
    """Return the local gold price (MMK / kyat thar)."""
    if _missing(world_price) or _missing(exchange_rate):
        return 0.0
    return (float(world_price) / unit) * float(exchange_rate)


def implied_rate(local_price: Number, world_price: Number, unit: float = OZ_TO_KYATTHAR) -> float:
    """Return the MMK/USD rate implied by `local_price` at `world_price`."""
    if _missing(local_price) or _missing(world_price):
        return 0.0
    return (float(local_price) * unit) / float(world_price)


def split_denomination(value: Number) -> Denomination:
    """Break a non-negative amount into lakhs and remainder (both integers)."""
    v = float(value)
    if v == 0:
        return Denomination(0, 0)
    return Denomination(lakhs=int(math.floor(v / LAKH)), remainder=int(math.floor(v % LAKH)))


def calculate(
    mode: CalculationMode,
    world_price: Number,
    exchange_rate: Number,
    local_price: Number,
    unit: float = OZ_TO_KYATTHAR,
) -> CalculationResult:
    """Primary figure for `mode` plus the lakh breakdown shown beneath it.

    In PRICE mode the breakdown is of the computed local price; in
    IMPLIED_RATE mode it is of the observed local price.
    """
    if mode == CalculationMode.PRICE:
        primary = price_from_world(world_price, exchange_rate, unit)
        split = split_denomination(primary)
    else:
        primary = implied_rate(local_price, world_price, unit)
        split = split_denomination(local_price or 0)
    return CalculationResult(primary=primary, lakhs=split.lakhs, remainder=split.remainder)
