# goldterm/main.py
# -*- coding: utf-8 -*-
"""Headless entry point: wire services, do the startup fetch, print a snapshot in Myanmar digits."""
from __future__ import annotations

import logging

from goldterm.config.constants import LABELS
from goldterm.config.log_setup import configure_logging
from goldterm.core.di import register_default_services, container
from goldterm.core.models import CalculationMode
from goldterm.services.state_controller import AppStateController
from goldterm.utils.digits import format_grouped_local, to_local

log = logging.getLogger(__name__)


def render_snapshot(controller: AppStateController) -> str:
    """Plain-text view of what a UI would show for the current mode."""
    s = controller.state
    res = controller.result()
    lines = [
        LABELS["APP_TITLE"],
        f"{LABELS['WORLD_PRICE']}: ${format_grouped_local(s.world_price, 2)} [{controller.status_text()}]",
    ]
    if controller.mode == CalculationMode.PRICE:
        lines.append(f"{LABELS['EXCHANGE_RATE']}: K{format_grouped_local(s.exchange_rate)}")
    else:
        lines.append(f"{LABELS['MMK_PRICE']}: K{format_grouped_local(s.local_gold_price)}")
    lines.append(f"{controller.result_label()}: {format_grouped_local(res.primary)} {LABELS['KYAT']}")
    lines.append(f"  {to_local(res.lakhs)} {LABELS['LAKHS']} {to_local(res.remainder)} {LABELS['KYAT']}")
    lines.append(controller.formula_label())
    return "\n".join(lines)


def main() -> None:
    # 1) Register default services (bus, settings, gold_api, controller)
    register_default_services()

    # 2) Logging from settings
    settings = container.resolve("settings")
    configure_logging(settings.log_level())

    # 3) Trace every event at DEBUG
    bus = container.resolve("bus")
    bus.subscribe_all(lambda evt: log.debug("event: %r", evt))

    # 4) Mount: one automatic live fetch (inline, no UI loop to marshal to)
    controller: AppStateController = container.resolve("controller")
    controller.mount(blocking=True)

    # 5) Show both modes
    print(render_snapshot(controller))
    controller.set_mode(CalculationMode.IMPLIED_RATE)
    print()
    print(render_snapshot(controller))
    controller.close()


if __name__ == "__main__":
    main()
