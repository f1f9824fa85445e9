# goldterm/core/events.py
# -*- coding: utf-8 -*-
"""
Lightweight event system for the gold terminal.

- A minimal pub/sub EventBus with type-based subscriptions.
- Handlers are called synchronously on publish() (the dispatcher's thread).
- Returns an unsubscribe() callable from subscribe() for easy cleanup.
- Optional 'subscribe_all' to observe every event (useful for logging).

Usage:
    from goldterm.core.events import EventBus, ModeChanged

    bus = EventBus()
    unsubscribe = bus.subscribe(ModeChanged, lambda evt: print(evt.mode))
    bus.publish(ModeChanged(mode=CalculationMode.IMPLIED_RATE))
    unsubscribe()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Type, TypeVar, Generic, Protocol

from goldterm.core.errors import ErrorCode
from goldterm.core.models import CalculationMode, PriceState

log = logging.getLogger(__name__)


# ---------- Base marker ----------

class Event:
    """Marker base class for all events."""
    ...


# ---------- Events ----------

@dataclass(frozen=True)
class RefreshRequested(Event):
    """Request a live price fetch now (button, startup, ...)."""
    source: str = "ui"  # "ui" | "startup" | ...


@dataclass(frozen=True)
class PriceStateChanged(Event):
    """New PriceState snapshot (any field may have changed)."""
    state: PriceState


@dataclass(frozen=True)
class ModeChanged(Event):
    mode: CalculationMode


@dataclass(frozen=True)
class LivePriceFetched(Event):
    """A live fetch succeeded; world price is now 'price' and provenance is live."""
    price: float


@dataclass(frozen=True)
class PriceFetchFailed(Event):
    """A live fetch failed; 'message' is the localized text for the user."""
    code: ErrorCode
    message: str
    status: Optional[int] = None


# ---------- Typing helpers ----------

E = TypeVar("E", bound=Event)


class EventHandler(Protocol, Generic[E]):
    """Callable protocol for event handlers."""
    def __call__(self, evt: E) -> None: ...


# ---------- EventBus ----------

class EventBus:
    """
    Type-based pub/sub event bus.

    - subscribe(EventType, handler) -> unsubscribe()
    - subscribe_all(handler) -> unsubscribe()
    - publish(EventInstance)

    Notes:
        * Handlers are invoked synchronously in the caller's thread.
        * Handlers are isolated: an exception in one handler is logged and
          won't stop the others.
    """

    def __init__(self) -> None:
        self._subs: Dict[Type[Event], List[Callable[[Event], None]]] = {}
        self._any_subs: List[Callable[[Event], None]] = []

    # ---- subscription ----
    def subscribe(self, etype: Type[E], handler: EventHandler[E]) -> Callable[[], None]:
        """
        Subscribe to a specific event type.

        Returns:
            A zero-arg function that, when called, unsubscribes this handler.
        """
        self._subs.setdefault(etype, []).append(handler)  # type: ignore[arg-type]

        def _unsubscribe() -> None:
            lst = self._subs.get(etype, [])
            try:
                lst.remove(handler)  # type: ignore[arg-type]
            except ValueError:
                pass

        return _unsubscribe

    def subscribe_all(self, handler: Callable[[Event], None]) -> Callable[[], None]:
        """Subscribe to ALL events. Returns a zero-arg unsubscribe function."""
        self._any_subs.append(handler)

        def _unsubscribe() -> None:
            try:
                self._any_subs.remove(handler)
            except ValueError:
                pass

        return _unsubscribe

    # ---- publish ----
    def publish(self, evt: Event) -> None:
        """Publish an event instance to matching subscribers, then to 'any' subscribers."""
        handlers = list(self._subs.get(type(evt), []))
        handlers.extend(self._any_subs)

        for h in handlers:
            try:
                h(evt)  # type: ignore[arg-type]
            except Exception:
                log.exception("Event handler %r failed on %s", h, type(evt).__name__)

    # ---- management ----
    def clear(self) -> None:
        """Remove all subscriptions."""
        self._subs.clear()
        self._any_subs.clear()
