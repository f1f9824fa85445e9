# goldterm/utils/__init__.py
# -*- coding: utf-8 -*-
"""
Unified utils API (digits, input normalization, calculations).

Import examples
---------------
from goldterm.utils import (
    to_local, to_western, format_grouped_local,
    normalize_input, NumericField,
    price_from_world, implied_rate, split_denomination, calculate,
)
"""

from __future__ import annotations

from .digits import (
    to_local,
    to_western,
    to_local_digits,
    to_western_digits,
    format_grouped_local,
)
from .inputs import NormalizedInput, normalize_input, clamp, NumericField
from .calc import price_from_world, implied_rate, split_denomination, calculate

__all__ = [
    # digits
    "to_local",
    "to_western",
    "to_local_digits",
    "to_western_digits",
    "format_grouped_local",
    # inputs
    "NormalizedInput",
    "normalize_input",
    "clamp",
    "NumericField",
    # calc
    "price_from_world",
    "implied_rate",
    "split_denomination",
    "calculate",
]
