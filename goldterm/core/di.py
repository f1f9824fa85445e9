# goldterm/core/di.py
# -*- coding: utf-8 -*-
"""
Dependency Injection (DI) container for the gold terminal.

Responsibilities
----------------
- Provide a tiny, explicit DI container with lazy singletons.
- Centralize wiring of app services (bus, settings, gold_api, controller).
- Keep consumers decoupled from construction details & concrete modules.

Usage
-----
    from goldterm.core.di import container, register_default_services

    register_default_services()  # once at startup (e.g., in main.py)

    bus        = container.resolve("bus")
    settings   = container.resolve("settings")
    controller = container.resolve("controller")
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Optional


# ---------- Minimal DI Container ----------

class Container:
    """Name -> factory registry; each service is built on first resolve and cached."""
    def __init__(self) -> None:
        self._factories: Dict[str, Callable[[], Any]] = {}
        self._instances: Dict[str, Any] = {}

    def register(self, name: str, factory: Callable[[], Any], *, override: bool = False) -> None:
        """Register a zero-arg factory. Re-registering needs override=True and drops the cached instance."""
        if not callable(factory):
            raise TypeError(f"Factory for '{name}' must be callable.")
        if name in self._factories and not override:
            raise KeyError(f"Service already registered: {name}")
        self._factories[name] = factory
        self._instances.pop(name, None)

    def resolve(self, name: str) -> Any:
        """Return the cached instance for `name`, building it on first use."""
        if name in self._instances:
            return self._instances[name]
        if name not in self._factories:
            raise KeyError(f"Service not registered: {name}")
        instance = self._factories[name]()
        self._instances[name] = instance
        return instance

    def try_resolve(self, name: str, default: Optional[Any] = None) -> Any:
        """Like resolve(), but returns `default` for unknown names."""
        try:
            return self.resolve(name)
        except KeyError:
            return default

    def reset(self) -> None:
        """Forget every registration."""
        self._factories.clear()
        self._instances.clear()


# Global container instance
container = Container()


def register_default_services(target: Optional[Container] = None, *, override: bool = False) -> Container:
    """
    Register core app services into `target` (the global container by default).

    Registered Names
    ----------------
    - "bus"        -> EventBus()
    - "settings"   -> SettingsManager()
    - "gold_api"   -> GoldApiAdapter(user_agent=settings.user_agent())
    - "controller" -> AppStateController(bus, gold_api, settle_ms=settings.settle_ms())
    """
    c = target if target is not None else container

    # Local imports to avoid import-cycles at module import time
    from goldterm.core.events import EventBus
    from goldterm.config.settings import SettingsManager
    from goldterm.infra.gold_api_adapter import GoldApiAdapter
    from goldterm.services.state_controller import AppStateController

    c.register("bus", lambda: EventBus(), override=override)
    c.register("settings", lambda: SettingsManager(), override=override)
    c.register(
        "gold_api",
        lambda: GoldApiAdapter(user_agent=c.resolve("settings").user_agent()),
        override=override,
    )
    c.register(
        "controller",
        lambda: AppStateController(
            c.resolve("bus"),
            c.resolve("gold_api"),
            settle_ms=c.resolve("settings").settle_ms(),
        ),
        override=override,
    )
    return c
