# goldterm/utils/digits.py
# -*- coding: utf-8 -*-
"""
Digit conversion & lightweight parsing utilities (Myanmar ↔ English).

Scope
-----
This module provides:
  • Conversion between Myanmar digits (၀..၉) and ASCII (English) digits.
  • Rendering numbers with Myanmar digits for display.
  • Best-effort parsing of user text (either script) into a float.

Design principles
-----------------
- Keep functions *pure* and side‑effect free.
- The digit mapping is a fixed bijection; every other character passes through
  the string-level converters untouched.
- Parsing never raises: unparseable text becomes 0.0 (typing "." or "" is
  normal while editing and must not fault the calculation layer).
"""

from __future__ import annotations

import math
import re
from typing import Optional, Union

__all__ = [
    # conversion
    "to_local_digits",
    "to_western_digits",
    # display / parsing
    "to_local",
    "to_western",
    "format_grouped_local",
    # glyph tables
    "WESTERN_DIGITS",
    "LOCAL_DIGITS",
]

Number = Union[int, float]

# Myanmar digits: ၀၁၂၃၄၅၆၇၈၉ (U+1040..U+1049)
WESTERN_DIGITS = "0123456789"
LOCAL_DIGITS = "၀၁၂၃၄၅၆၇၈၉"

E2M = str.maketrans(WESTERN_DIGITS, LOCAL_DIGITS)   # ASCII → Myanmar
M2E = str.maketrans(LOCAL_DIGITS, WESTERN_DIGITS)   # Myanmar → ASCII

_NOT_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_NUMBER = re.compile(r"\d*\.?\d*")


def to_local_digits(s: str) -> str:
    """Convert ASCII digits to Myanmar digits. Non-digit characters are preserved."""
    return s.translate(E2M)


def to_western_digits(s: str) -> str:
    """Convert Myanmar digits to ASCII digits. Non-digit characters are preserved."""
    return s.translate(M2E)


def _number_text(value: Number) -> str:
    """Plain text for a number: integral floats lose their '.0' (4000.0 -> '4000')."""
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    return str(value)


def to_local(value: Optional[Union[Number, str]]) -> str:
    """Render a number or numeric string with Myanmar digits, 1:1 per character.

    >>> to_local(4000)
    '၄၀၀၀'
    >>> to_local("$1,234.5")
    '$၁,၂၃၄.၅'
    """
    if value is None:
        return ""
    text = value if isinstance(value, str) else _number_text(value)
    return to_local_digits(text)


def to_western(text: str) -> float:
    """Parse text in either script into a float; 0.0 when nothing parses.

    Steps
    -----
    1) Myanmar digits -> ASCII
    2) drop every character that is not a digit or '.'
    3) parse the leading ``digits[.digits]`` run ('1.2.3' -> 1.2)

    A run of digits too long for a double parses to ``inf``; callers that need a
    finite value must check.
    """
    if not isinstance(text, str):
        text = "" if text is None else str(text)
    clean = _NOT_NUMERIC.sub("", to_western_digits(text))
    head = _LEADING_NUMBER.match(clean).group(0)
    if not head.strip("."):
        return 0.0
    return float(head)


def format_grouped_local(value: Optional[Number], decimals: int = 0) -> str:
    """Thousands-grouped rendering with Myanmar digits, e.g. 8542446.88 -> '၈,၅၄၂,၄၄၇'."""
    if value is None:
        return ""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return ""
    if not math.isfinite(v):
        return ""
    return to_local_digits(f"{v:,.{max(0, int(decimals))}f}")
