import queue
import threading

import pytest

from goldterm.config.constants import (
    DEFAULT_EXCHANGE_RATE,
    DEFAULT_MMK_GOLD_PRICE,
    DEFAULT_WORLD_PRICE,
    FETCH_ERROR_MESSAGE,
    LABELS,
    STATUS_CONNECTING,
    STATUS_LIVE,
    STATUS_MANUAL,
)
from goldterm.core.errors import ErrorCode
from goldterm.core.events import (
    LivePriceFetched,
    ModeChanged,
    PriceFetchFailed,
    PriceStateChanged,
    RefreshRequested,
)
from goldterm.core.models import CalculationMode, FetchOutcome, FetchStatus
from goldterm.services.state_controller import (
    EXCHANGE_RATE,
    LOCAL_GOLD_PRICE,
    WORLD_PRICE,
    AppStateController,
)
from goldterm.utils.digits import to_local

from fakes import QueuedDispatcher

OK = FetchOutcome.succeeded(2345.6)
HTTP_503 = FetchOutcome.failed(ErrorCode.HTTP_ERROR, 503)
BELOW_BAND = FetchOutcome.failed(ErrorCode.OUT_OF_BOUNDS)
TIMED_OUT = FetchOutcome.failed(ErrorCode.TIMEOUT)


def record(bus, etype):
    seen = []
    bus.subscribe(etype, seen.append)
    return seen


def test_initial_state(make_controller):
    c = make_controller()
    s = c.state
    assert (s.world_price, s.exchange_rate, s.local_gold_price) == (
        DEFAULT_WORLD_PRICE, DEFAULT_EXCHANGE_RATE, DEFAULT_MMK_GOLD_PRICE)
    assert s.is_live is False
    assert s.fetch_status == FetchStatus.IDLE
    assert s.last_error is None
    assert c.mode == CalculationMode.PRICE
    assert c.status_text() == STATUS_MANUAL


def test_mount_success_goes_live(make_controller, bus):
    fetched = record(bus, LivePriceFetched)
    c = make_controller(OK)
    c.mount(blocking=True)

    s = c.state
    assert s.world_price == 2345.6
    assert s.is_live is True
    assert s.fetch_status == FetchStatus.SUCCEEDED
    assert s.is_fetching is False
    assert c.fields[WORLD_PRICE].display == to_local(2345.6)
    assert c.status_text() == STATUS_LIVE
    assert fetched == [LivePriceFetched(price=2345.6)]


@pytest.mark.parametrize("outcome, code", [
    (HTTP_503, ErrorCode.HTTP_ERROR),
    (BELOW_BAND, ErrorCode.OUT_OF_BOUNDS),
    (TIMED_OUT, ErrorCode.TIMEOUT),
])
def test_failure_keeps_prior_world_price(make_controller, bus, outcome, code):
    failed = record(bus, PriceFetchFailed)
    c = make_controller(outcome)
    c.fetch_live_price(blocking=True)

    s = c.state
    assert s.world_price == DEFAULT_WORLD_PRICE
    assert s.is_live is False
    assert s.fetch_status == FetchStatus.FAILED
    assert s.last_error == code
    assert s.error_message == FETCH_ERROR_MESSAGE
    assert c.status_text() == FETCH_ERROR_MESSAGE
    assert failed[0].code == code


def test_failure_after_success_retains_last_good_value(make_controller):
    c = make_controller(OK, HTTP_503)
    c.fetch_live_price(blocking=True)
    c.fetch_live_price(blocking=True)
    assert c.state.world_price == 2345.6
    assert c.state.is_live is False
    assert c.state.last_error == ErrorCode.HTTP_ERROR


def test_http_status_is_reported(make_controller, bus):
    failed = record(bus, PriceFetchFailed)
    make_controller(HTTP_503).fetch_live_price(blocking=True)
    assert failed[0].status == 503


def test_manual_edit_clears_live_even_with_same_value(make_controller):
    c = make_controller(OK)
    c.mount(blocking=True)
    assert c.state.is_live

    assert c.input_world_price(to_local(2345.6)) is True
    assert c.state.world_price == 2345.6
    assert c.state.is_live is False
    assert c.status_text() == STATUS_MANUAL


def test_rejected_keystroke_is_not_an_edit(make_controller):
    c = make_controller(OK)
    c.mount(blocking=True)
    assert c.input_world_price("9" * 400) is False
    assert c.state.is_live is True
    assert c.state.world_price == 2345.6


def test_other_fields_do_not_touch_provenance(make_controller):
    c = make_controller(OK)
    c.mount(blocking=True)
    c.input_exchange_rate("၄၅၀၀")
    c.input_local_price("7000000")
    s = c.state
    assert (s.exchange_rate, s.local_gold_price) == (4500.0, 7_000_000.0)
    assert s.is_live is True


def test_inputs_are_clamped(make_controller):
    c = make_controller()
    c.input_exchange_rate("99999999999")
    assert c.state.exchange_rate == 999_999_999
    assert c.fields[EXCHANGE_RATE].display == to_local("99999999999")


def test_mode_switch_keeps_inputs_and_does_not_fetch(make_controller, bus):
    modes = record(bus, ModeChanged)
    c = make_controller()
    c.input_local_price("6200000")
    before = c.state

    c.set_mode(CalculationMode.IMPLIED_RATE)

    assert c.state == before
    assert c.adapter.tokens == []
    assert modes == [ModeChanged(mode=CalculationMode.IMPLIED_RATE)]
    assert c.result().primary == pytest.approx(6_200_000 * 1.873 / 4000)
    assert (c.result().lakhs, c.result().remainder) == (62, 0)
    assert c.result_label() == LABELS["IMPLIED_RATE"]
    assert c.formula_label() == LABELS["FORMULA_RATE"]

    c.set_mode("PRICE")
    assert c.result().primary == pytest.approx(c.calculated_price)
    assert c.formula_label() == LABELS["FORMULA_PRICE"]


def test_derived_values(make_controller):
    c = make_controller()
    assert c.calculated_price == pytest.approx(4000 / 1.873 * 4000)
    assert c.implied_rate == pytest.approx(6_200_000 * 1.873 / 4000)
    c.input_world_price("")
    assert c.calculated_price == 0.0
    assert c.implied_rate == 0.0


def test_fetching_flag_clears_after_settle_delay(make_controller):
    after = QueuedDispatcher()
    c = make_controller(OK, dispatcher=after, settle_ms=800)
    c.fetch_live_price(blocking=True)
    assert c.state.fetch_status == FetchStatus.FETCHING
    assert c.state.is_live is False
    assert c.status_text() == STATUS_CONNECTING

    assert after.run_next() == 0          # completion
    assert c.state.is_live is True
    assert c.state.is_fetching is True
    assert c.status_text() == STATUS_CONNECTING

    assert after.run_next() == 800        # settle
    assert c.state.is_fetching is False
    assert c.status_text() == STATUS_LIVE


def test_new_fetch_supersedes_in_flight_one(make_controller):
    after = QueuedDispatcher()
    c = make_controller(FetchOutcome.succeeded(1111.0), FetchOutcome.succeeded(2222.0), dispatcher=after)
    first = c.fetch_live_price(blocking=True)
    second = c.fetch_live_price(blocking=True)

    assert first.cancelled
    assert not second.cancelled

    after.run_all()
    assert c.state.world_price == 2222.0
    assert c.state.is_live is True
    assert c.state.is_fetching is False


def test_settle_waits_for_newer_fetch(make_controller):
    after = QueuedDispatcher()
    c = make_controller(OK, OK, dispatcher=after)
    c.fetch_live_price(blocking=True)
    after.run_next()                      # first completion, queues settle
    c.fetch_live_price(blocking=True)     # second fetch in flight
    after.run_next()                      # first settle: must not clear
    assert c.state.is_fetching is True
    after.run_all()
    assert c.state.is_fetching is False


def test_is_live_never_true_unless_succeeded(make_controller, bus):
    states = record(bus, PriceStateChanged)
    c = make_controller(OK, HTTP_503, OK)
    for _ in range(3):
        c.fetch_live_price(blocking=True)
    c.input_world_price("3000")
    assert states
    for evt in states:
        if evt.state.is_live:
            assert evt.state.fetch_status == FetchStatus.SUCCEEDED


def test_adapter_bug_becomes_a_failure(bus):
    class Broken:
        def fetch_live_price(self, cancel=None):
            raise RuntimeError("boom")

    c = AppStateController(bus, Broken())
    c.fetch_live_price(blocking=True)
    assert c.state.fetch_status == FetchStatus.FAILED
    assert c.state.last_error == ErrorCode.NETWORK
    assert c.state.world_price == DEFAULT_WORLD_PRICE


def test_headless_refresh_completes_on_callers_thread(make_controller, bus):
    threads = []
    bus.subscribe(LivePriceFetched, lambda evt: threads.append(threading.current_thread()))
    c = make_controller(OK)

    bus.publish(RefreshRequested(source="ui"))

    assert threads == [threading.current_thread()]
    assert c.state.world_price == 2345.6
    assert c.state.is_live is True


def test_refresh_with_dispatcher_fetches_on_worker_thread(make_controller, bus):
    pending = queue.Queue()
    fetch_threads = []
    applied_threads = []
    bus.subscribe(LivePriceFetched, lambda evt: applied_threads.append(threading.current_thread()))
    c = make_controller(OK, dispatcher=lambda delay_ms, fn: pending.put(fn))
    c.adapter.on_fetch = lambda: fetch_threads.append(threading.current_thread())

    bus.publish(RefreshRequested(source="ui"))

    complete = pending.get(timeout=5)
    assert fetch_threads and fetch_threads[0] is not threading.current_thread()
    assert c.state.fetch_status == FetchStatus.FETCHING
    assert c.state.world_price == DEFAULT_WORLD_PRICE

    complete()
    assert applied_threads == [threading.current_thread()]
    assert c.state.world_price == 2345.6
    assert c.state.fetch_status == FetchStatus.SUCCEEDED


def test_worker_completion_does_not_race_manual_edits(make_controller, bus):
    pending = queue.Queue()
    c = make_controller(OK, dispatcher=lambda delay_ms, fn: pending.put(fn))

    c.fetch_live_price()
    complete = pending.get(timeout=5)
    c.input_exchange_rate("၅၀၀၀")
    complete()

    assert c.state.exchange_rate == 5000
    assert c.state.world_price == 2345.6


def test_close_cancels_and_unsubscribes(make_controller, bus):
    after = QueuedDispatcher()
    c = make_controller(OK, dispatcher=after)
    token = c.fetch_live_price(blocking=True)
    c.close()
    assert token.cancelled

    after.run_all()
    assert c.state.is_live is False
    bus.publish(RefreshRequested(source="ui"))
    assert len(c.adapter.tokens) == 1


def test_focus_and_blur(make_controller):
    c = make_controller()
    c.input_local_price("")
    assert c.fields[LOCAL_GOLD_PRICE].display == ""
    c.focus_field(LOCAL_GOLD_PRICE)
    assert c.fields[LOCAL_GOLD_PRICE].display == "၀"
    c.blur_field(LOCAL_GOLD_PRICE)
    assert c.fields[LOCAL_GOLD_PRICE].display == ""
