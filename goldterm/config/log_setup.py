# goldterm/config/log_setup.py
# -*- coding: utf-8 -*-
"""Logging setup. Modules use logging.getLogger(__name__); call configure_logging() once at startup."""

from __future__ import annotations
import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger (idempotent: basicConfig is a no-op once handlers exist)."""
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
