"""Altitude tracker: samples position and barometric altitude, exports GPX."""

__version__ = "0.1.0"
