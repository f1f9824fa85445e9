# goldterm/utils/inputs.py
# -*- coding: utf-8 -*-
"""
Keystroke normalization for numeric input fields.

normalize_input(raw, minimum, maximum) turns the raw text of a field into a
clamped numeric value plus a display string in Myanmar digits. The display is
never clamped: a user typing past the bounds still sees what they typed, while
the value handed to the calculation layer always lies in [minimum, maximum].

NumericField wraps that into the small amount of state an input box needs
(value, display text, focus).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from goldterm.config.constants import INPUT_MIN, INPUT_MAX
from goldterm.utils.digits import to_local, to_local_digits, to_western

__all__ = ["NormalizedInput", "normalize_input", "clamp", "NumericField"]


@dataclass(frozen=True)
class NormalizedInput:
    numeric_value: float
    display_text: str


def clamp(value: float, minimum: float = INPUT_MIN, maximum: float = INPUT_MAX) -> float:
    return max(minimum, min(value, maximum))


def _display_for(raw: str) -> str:
    """Myanmar digits for display; only the first '.' stays a decimal separator."""
    text = to_local_digits(raw)
    parts = text.split(".")
    if len(parts) > 2:
        text = parts[0] + "." + "".join(parts[1:])
    return text


def normalize_input(
    raw: str,
    minimum: float = INPUT_MIN,
    maximum: float = INPUT_MAX,
) -> Optional[NormalizedInput]:
    """Normalize one keystroke's worth of field text.

    Returns None when the text does not parse to a finite number; the caller
    should then ignore the keystroke and keep its previous state.
    """
    if raw == "":
        return NormalizedInput(0.0, "")

    numeric = to_western(raw)
    if not math.isfinite(numeric):
        return None

    return NormalizedInput(clamp(numeric, minimum, maximum), _display_for(raw))


class NumericField:
    """One numeric input box: clamped value + free-form display text.

    The display text follows the user's keystrokes while focused. When the
    value changes from outside (e.g. a live fetch) or focus is lost, the
    display is re-rendered from the value; a zero value shows as empty.
    """

    def __init__(self, value: float = 0.0, *, minimum: float = INPUT_MIN, maximum: float = INPUT_MAX) -> None:
        self.minimum = minimum
        self.maximum = maximum
        self.focused = False
        self.value = clamp(float(value), minimum, maximum)
        self.display = ""
        self._sync_display()

    def _sync_display(self) -> None:
        if self.value == 0 and not self.focused:
            self.display = ""
        else:
            self.display = to_local(self.value)

    # ---------- user events ----------
    def type_text(self, raw: str) -> bool:
        """Apply the field's new raw text. Returns False if the keystroke was ignored."""
        result = normalize_input(raw, self.minimum, self.maximum)
        if result is None:
            return False
        self.value = result.numeric_value
        self.display = result.display_text
        return True

    def focus(self) -> None:
        self.focused = True
        self._sync_display()

    def blur(self) -> None:
        self.focused = False
        self._sync_display()

    # ---------- external updates ----------
    def set_value(self, value: float) -> None:
        """Replace the value from outside the field and re-render the display."""
        self.value = clamp(float(value), self.minimum, self.maximum)
        self._sync_display()

    def __repr__(self) -> str:
        return f"NumericField(value={self.value!r}, display={self.display!r}, focused={self.focused})"
