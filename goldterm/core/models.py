# goldterm/core/models.py
# -*- coding: utf-8 -*-
"""
Value types shared by the engine, the fetch pipeline and the controller.

All types are immutable; the controller replaces its PriceState snapshot
(dataclasses.replace) instead of mutating it in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from goldterm.core.errors import ErrorCode, PriceFetchError


class CalculationMode(str, Enum):
    PRICE = "PRICE"                # local price from world price + rate
    IMPLIED_RATE = "IMPLIED_RATE"  # rate from world price + observed local price


class FetchStatus(str, Enum):
    IDLE = "IDLE"
    FETCHING = "FETCHING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class Denomination:
    """Large-number breakdown: lakhs (100,000s) + what is left."""
    lakhs: int
    remainder: int


@dataclass(frozen=True)
class CalculationResult:
    primary: float
    lakhs: int
    remainder: int


@dataclass(frozen=True)
class PriceState:
    """
    Snapshot of everything the presentation layer needs about prices.

    Invariant: is_live implies fetch_status == SUCCEEDED.
    """
    world_price: float
    exchange_rate: float
    local_gold_price: float
    is_live: bool = False
    fetch_status: FetchStatus = FetchStatus.IDLE
    last_error: Optional[ErrorCode] = None
    is_fetching: bool = False           # UI flag; clears after the settle delay
    error_message: Optional[str] = None  # localized, set on failure only


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one live price fetch: Succeeded(price) or Failed(error[, status])."""
    price: Optional[float] = None
    error: Optional[ErrorCode] = None
    status: Optional[int] = None  # HTTP status for HTTP_ERROR

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def succeeded(cls, price: float) -> "FetchOutcome":
        return cls(price=float(price))

    @classmethod
    def failed(cls, error: ErrorCode, status: Optional[int] = None) -> "FetchOutcome":
        return cls(error=error, status=status)

    @classmethod
    def from_error(cls, exc: PriceFetchError) -> "FetchOutcome":
        return cls(error=exc.code, status=exc.status)
