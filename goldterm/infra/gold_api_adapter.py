# goldterm/infra/gold_api_adapter.py
# -*- coding: utf-8 -*-
"""
gold-api.com adapter (world spot price, XAU in USD / troy ounce).

- fetch_live_price(cancel=None) -> FetchOutcome

Expected payload: a JSON object with at least a numeric "price" field; every
other field is ignored. Every failure is turned into FetchOutcome.failed(...)
here; callers never see an exception.
"""

from __future__ import annotations
import logging
import math
import time
from typing import Any, Optional

import requests

from goldterm.config.constants import (
    GOLD_API_URL,
    API_TIMEOUT_MS,
    MIN_VALID_GOLD_PRICE,
    MAX_VALID_GOLD_PRICE,
)
from goldterm.core.errors import PriceFetchError, InvalidPayload, PriceOutOfBounds, ErrorCode
from goldterm.core.models import FetchOutcome
from goldterm.utils.net import CancelToken, Clock, default_headers, get_json_bounded

log = logging.getLogger(__name__)


def extract_price(data: Any) -> float:
    """Validate a decoded payload and return its plausible 'price'.

    Raises InvalidPayload when 'price' is missing or not a number, and
    PriceOutOfBounds when it is not finite or outside
    [MIN_VALID_GOLD_PRICE, MAX_VALID_GOLD_PRICE] (both inclusive).
    """
    if not isinstance(data, dict):
        raise InvalidPayload(f"expected a JSON object, got {type(data).__name__}")
    price = data.get("price")
    # bool is an int subclass; a JSON true is not a price
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise InvalidPayload(f"'price' is not a number: {price!r}")
    try:
        price = float(price)
    except OverflowError:
        # JSON integers are unbounded
        raise PriceOutOfBounds("implausible price: too large for a float") from None
    if not math.isfinite(price) or price < MIN_VALID_GOLD_PRICE or price > MAX_VALID_GOLD_PRICE:
        raise PriceOutOfBounds(f"implausible price: {price!r}")
    return price


class GoldApiAdapter:
    """Stateless fetcher for the live XAU price."""

    def __init__(
        self,
        *,
        url: str = GOLD_API_URL,
        timeout_ms: int = API_TIMEOUT_MS,
        session: Optional[requests.Session] = None,
        user_agent: Optional[str] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.url = url
        self.timeout_ms = timeout_ms
        self.session = session
        self.user_agent = user_agent
        self.clock = clock

    def fetch_live_price(self, cancel: Optional[CancelToken] = None) -> FetchOutcome:
        """One bounded GET + validation. Always returns; never raises."""
        try:
            data = get_json_bounded(
                self.url,
                timeout_ms=self.timeout_ms,
                session=self.session,
                headers=default_headers(self.user_agent),
                cancel=cancel,
                clock=self.clock,
            )
            price = extract_price(data)
        except PriceFetchError as e:
            if e.code == ErrorCode.CANCELLED:
                log.debug("Gold price fetch cancelled")
            else:
                log.warning("Failed to fetch gold price (%s): %s", e.code.value, e)
            return FetchOutcome.from_error(e)

        log.info("Live gold price: %s USD/oz", price)
        return FetchOutcome.succeeded(price)
