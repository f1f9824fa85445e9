# goldterm/core/errors.py
# -*- coding: utf-8 -*-
"""
Error taxonomy for the live price fetch.

Each failure is raised as a PriceFetchError subclass where it is detected and
converted into a Failed outcome at the adapter boundary (infra/gold_api_adapter.py).
Nothing in here ever reaches the presentation layer as an exception.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    TIMEOUT = "TIMEOUT"
    HTTP_ERROR = "HTTP_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    NETWORK = "NETWORK"
    CANCELLED = "CANCELLED"


class PriceFetchError(Exception):
    """Base class for every fetch failure."""
    code: ErrorCode = ErrorCode.NETWORK

    def __init__(self, message: str = "", *, status: Optional[int] = None) -> None:
        super().__init__(message or self.code.value)
        self.status = status


class FetchTimeout(PriceFetchError):
    """Deadline exceeded before a complete response was read."""
    code = ErrorCode.TIMEOUT


class HttpStatusError(PriceFetchError):
    """Server answered with a non-2xx status."""
    code = ErrorCode.HTTP_ERROR

    def __init__(self, status: int) -> None:
        super().__init__(f"HTTP_ERROR_{status}", status=status)


class InvalidPayload(PriceFetchError):
    """Body is not JSON, not an object, or has no numeric 'price'."""
    code = ErrorCode.INVALID_FORMAT


class PriceOutOfBounds(PriceFetchError):
    """'price' is present but not finite or outside the plausible band."""
    code = ErrorCode.OUT_OF_BOUNDS


class NetworkFailure(PriceFetchError):
    """Connection/transport level failure (DNS, refused, reset, ...)."""
    code = ErrorCode.NETWORK


class FetchCancelled(PriceFetchError):
    """Aborted through its cancel token (superseded by a newer fetch)."""
    code = ErrorCode.CANCELLED
