# goldterm/config/settings.py
# -*- coding: utf-8 -*-
"""
Runtime settings for the gold terminal.

Features:
  - Defaults come from config/constants.py.
  - A few operational knobs can be overridden from the environment
    (or a local .env file, loaded with python-dotenv).
  - Nothing is persisted: settings live for the session only.

Overridable keys:
  GOLDTERM_SETTLE_MS   -> delay (ms) before the "fetching" flag clears
  GOLDTERM_LOG_LEVEL   -> logging level name (DEBUG, INFO, ...)
  GOLDTERM_USER_AGENT  -> User-Agent header for the price request
"""

from __future__ import annotations
import logging
import os
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from .constants import (
    FETCH_SETTLE_MS,
    USER_AGENT,
    ENV_SETTLE_MS,
    ENV_LOG_LEVEL,
    ENV_USER_AGENT,
)

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class SettingsManager:
    """Session settings: defaults overlaid with environment values."""

    def __init__(self, env: Optional[Mapping[str, str]] = None, *, use_dotenv: bool = True) -> None:
        self.default_settings: Dict[str, Any] = {
            "settle_ms": int(FETCH_SETTLE_MS),
            "log_level": "INFO",
            "user_agent": USER_AGENT,
        }
        if env is None:
            if use_dotenv:
                load_dotenv()
            env = os.environ
        self.settings: Dict[str, Any] = self._load(env)

    # ---------- load ----------
    def _load(self, env: Mapping[str, str]) -> Dict[str, Any]:
        """Overlay environment values onto defaults. Never raises."""
        merged = self.default_settings.copy()

        raw = (env.get(ENV_SETTLE_MS) or "").strip()
        if raw:
            try:
                merged["settle_ms"] = max(0, int(raw))
            except ValueError:
                logging.getLogger(__name__).warning("Ignoring invalid %s=%r", ENV_SETTLE_MS, raw)

        level = (env.get(ENV_LOG_LEVEL) or "").strip().upper()
        if level in _LEVELS:
            merged["log_level"] = level

        agent = (env.get(ENV_USER_AGENT) or "").strip()
        if agent:
            merged["user_agent"] = agent

        return merged

    # ---------- generic API ----------
    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting, returning default if missing."""
        return self.settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a setting for the rest of the session."""
        self.settings[key] = value

    # ---------- helpers ----------
    def settle_ms(self) -> int:
        try:
            return max(0, int(self.settings.get("settle_ms", FETCH_SETTLE_MS)))
        except (TypeError, ValueError):
            return int(FETCH_SETTLE_MS)

    def set_settle_ms(self, ms: int) -> None:
        self.set("settle_ms", max(0, int(ms)))

    def log_level(self) -> str:
        return str(self.settings.get("log_level", "INFO"))

    def user_agent(self) -> str:
        return str(self.settings.get("user_agent") or USER_AGENT)
