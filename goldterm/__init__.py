# goldterm/__init__.py
# -*- coding: utf-8 -*-
"""Myanmar gold price terminal: world spot price x USD/MMK rate -> MMK per kyat thar."""

__version__ = "2.0.0"
