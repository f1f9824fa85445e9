from __future__ import annotations

import pytest

from goldterm.core.events import EventBus
from goldterm.services.state_controller import AppStateController

from fakes import FakeClock, ScriptedAdapter


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def make_controller(bus):
    def _make(*outcomes, dispatcher=None, settle_ms: int = 800) -> AppStateController:
        return AppStateController(bus, ScriptedAdapter(*outcomes), dispatcher=dispatcher, settle_ms=settle_ms)
    return _make
