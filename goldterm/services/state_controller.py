# goldterm/services/state_controller.py
# -*- coding: utf-8 -*-
"""
AppStateController: owns the calculator state and the live price fetch.

Listens:
  - RefreshRequested(source="...")

Publishes:
  - PriceStateChanged(state)      on every PriceState change
  - ModeChanged(mode)
  - LivePriceFetched(price)
  - PriceFetchFailed(code, message, status)

Notes:
  - With a dispatcher (a Tk-style after(delay_ms, fn), e.g.
    set_dispatcher(root.after)) the fetch runs on a worker thread and its
    completion is marshalled back through the dispatcher, so every state
    change happens on the UI thread. Without one (headless use) fetches run
    inline on the caller's thread and delays are ignored.
  - At most one fetch is current. Starting a new one cancels the previous
    fetch's token; a superseded outcome is dropped.
"""

from __future__ import annotations
import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Dict, Optional, Union

from goldterm.config.constants import (
    DEFAULT_WORLD_PRICE,
    DEFAULT_EXCHANGE_RATE,
    DEFAULT_MMK_GOLD_PRICE,
    FETCH_SETTLE_MS,
    FETCH_ERROR_MESSAGE,
    STATUS_CONNECTING,
    STATUS_LIVE,
    STATUS_MANUAL,
    LABELS,
)
from goldterm.core.errors import ErrorCode
from goldterm.core.events import (
    EventBus,
    RefreshRequested,
    PriceStateChanged,
    ModeChanged,
    LivePriceFetched,
    PriceFetchFailed,
)
from goldterm.core.models import CalculationMode, CalculationResult, FetchOutcome, FetchStatus, PriceState
from goldterm.infra.gold_api_adapter import GoldApiAdapter
from goldterm.utils import calc
from goldterm.utils.inputs import NumericField
from goldterm.utils.net import CancelToken

log = logging.getLogger(__name__)

Dispatcher = Callable[[int, Callable[[], None]], Any]

WORLD_PRICE = "world_price"
EXCHANGE_RATE = "exchange_rate"
LOCAL_GOLD_PRICE = "local_gold_price"


def call_now(_delay_ms: int, fn: Callable[[], None]) -> None:
    """Headless dispatcher: run immediately, no delay."""
    fn()


class AppStateController:
    """Mode, three numeric inputs, provenance and fetch status, plus derived results."""

    def __init__(
        self,
        bus: EventBus,
        adapter: GoldApiAdapter,
        *,
        dispatcher: Optional[Dispatcher] = None,
        settle_ms: int = FETCH_SETTLE_MS,
    ) -> None:
        self.bus = bus
        self.adapter = adapter
        self.settle_ms = max(0, int(settle_ms))
        self._dispatcher: Dispatcher = dispatcher or call_now
        self._lock = threading.Lock()        # guards the in-flight slot only
        self._inflight: Optional[CancelToken] = None

        self.mode = CalculationMode.PRICE
        self.fields: Dict[str, NumericField] = {
            WORLD_PRICE: NumericField(DEFAULT_WORLD_PRICE),
            EXCHANGE_RATE: NumericField(DEFAULT_EXCHANGE_RATE),
            LOCAL_GOLD_PRICE: NumericField(DEFAULT_MMK_GOLD_PRICE),
        }
        self._state = PriceState(
            world_price=self.fields[WORLD_PRICE].value,
            exchange_rate=self.fields[EXCHANGE_RATE].value,
            local_gold_price=self.fields[LOCAL_GOLD_PRICE].value,
        )

        self._unsubscribe = self.bus.subscribe(RefreshRequested, self._on_refresh_requested)

    # ---------- public API ----------
    @property
    def state(self) -> PriceState:
        return self._state

    def set_dispatcher(self, after_callable: Dispatcher) -> None:
        """UI injects root.after to ensure state changes happen on the UI thread."""
        self._dispatcher = after_callable

    def mount(self, *, blocking: bool = False) -> CancelToken:
        """Startup hook: one automatic live fetch."""
        return self.fetch_live_price(blocking=blocking)

    def close(self) -> None:
        """Cancel any in-flight fetch and stop listening on the bus."""
        with self._lock:
            token, self._inflight = self._inflight, None
        if token is not None:
            token.cancel()
        self._unsubscribe()

    def fetch_live_price(self, *, blocking: bool = False) -> CancelToken:
        """Start a live fetch, superseding any fetch already in flight.

        Returns the new fetch's cancel token. With blocking=True, or when no
        dispatcher is set, the request runs on the calling thread.
        """
        token = CancelToken()
        with self._lock:
            prev, self._inflight = self._inflight, token
        if prev is not None:
            log.debug("Superseding in-flight gold price fetch")
            prev.cancel()

        self._update(
            fetch_status=FetchStatus.FETCHING,
            is_fetching=True,
            is_live=False,
            last_error=None,
            error_message=None,
        )

        # call_now would run _complete on the worker thread
        if blocking or self._dispatcher is call_now:
            self._worker(token)
        else:
            t = threading.Thread(
                target=self._worker,
                args=(token,),
                name="GoldPriceFetchWorker",
                daemon=True,
            )
            t.start()
        return token

    def set_mode(self, mode: Union[CalculationMode, str]) -> None:
        """Switch formula. Numeric inputs are kept; no refetch."""
        mode = CalculationMode(mode)
        if mode == self.mode:
            return
        self.mode = mode
        self.bus.publish(ModeChanged(mode=mode))

    # ---------- field events ----------
    def input_world_price(self, raw: str) -> bool:
        """Keystroke in the world price box. Any applied edit makes the price manual."""
        field = self.fields[WORLD_PRICE]
        if not field.type_text(raw):
            return False
        self._update(world_price=field.value, is_live=False)
        return True

    def input_exchange_rate(self, raw: str) -> bool:
        field = self.fields[EXCHANGE_RATE]
        if not field.type_text(raw):
            return False
        self._update(exchange_rate=field.value)
        return True

    def input_local_price(self, raw: str) -> bool:
        field = self.fields[LOCAL_GOLD_PRICE]
        if not field.type_text(raw):
            return False
        self._update(local_gold_price=field.value)
        return True

    def focus_field(self, name: str) -> None:
        self.fields[name].focus()

    def blur_field(self, name: str) -> None:
        self.fields[name].blur()

    # ---------- derived values ----------
    @property
    def calculated_price(self) -> float:
        s = self._state
        return calc.price_from_world(s.world_price, s.exchange_rate)

    @property
    def implied_rate(self) -> float:
        s = self._state
        return calc.implied_rate(s.local_gold_price, s.world_price)

    def result(self) -> CalculationResult:
        s = self._state
        return calc.calculate(self.mode, s.world_price, s.exchange_rate, s.local_gold_price)

    def result_label(self) -> str:
        return LABELS["CALCULATED_PRICE"] if self.mode == CalculationMode.PRICE else LABELS["IMPLIED_RATE"]

    def formula_label(self) -> str:
        return LABELS["FORMULA_PRICE"] if self.mode == CalculationMode.PRICE else LABELS["FORMULA_RATE"]

    def status_text(self) -> str:
        """Localized provenance line: connecting / error / live / manual."""
        s = self._state
        if s.is_fetching:
            return STATUS_CONNECTING
        if s.error_message:
            return s.error_message
        return STATUS_LIVE if s.is_live else STATUS_MANUAL

    # ---------- internals ----------
    def _on_refresh_requested(self, evt: RefreshRequested) -> None:
        log.debug("Refresh requested (source=%s)", evt.source)
        self.fetch_live_price()

    def _worker(self, token: CancelToken) -> None:
        try:
            outcome = self.adapter.fetch_live_price(token)
        except Exception:
            # the adapter converts every fetch failure itself; this is a bug path
            log.exception("Gold price adapter raised")
            outcome = FetchOutcome.failed(ErrorCode.NETWORK)
        self._dispatch(0, lambda: self._complete(token, outcome))

    def _complete(self, token: CancelToken, outcome: FetchOutcome) -> None:
        with self._lock:
            if self._inflight is not token:
                log.debug("Dropping superseded fetch outcome: %s", outcome)
                return
            self._inflight = None

        if outcome.ok:
            field = self.fields[WORLD_PRICE]
            field.set_value(outcome.price)
            self._update(
                world_price=field.value,
                is_live=True,
                fetch_status=FetchStatus.SUCCEEDED,
                last_error=None,
                error_message=None,
            )
            self.bus.publish(LivePriceFetched(price=field.value))
        else:
            self._update(
                is_live=False,
                fetch_status=FetchStatus.FAILED,
                last_error=outcome.error,
                error_message=FETCH_ERROR_MESSAGE,
            )
            self.bus.publish(PriceFetchFailed(code=outcome.error, message=FETCH_ERROR_MESSAGE, status=outcome.status))

        self._dispatch(self.settle_ms, self._settle)

    def _settle(self) -> None:
        """Clear the 'fetching' UI flag unless a newer fetch has started meanwhile."""
        with self._lock:
            busy = self._inflight is not None
        if not busy and self._state.is_fetching:
            self._update(is_fetching=False)

    def _update(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        self.bus.publish(PriceStateChanged(state=self._state))

    def _dispatch(self, delay_ms: int, fn: Callable[[], None]) -> None:
        self._dispatcher(delay_ms, fn)
