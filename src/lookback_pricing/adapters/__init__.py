"""
Adapters for callers outside Python's exception model.

Usage
-----
>>> from lookback_pricing.adapters import LookbackBoundary
>>> boundary = LookbackBoundary()
>>> boundary.year_fraction("01-01-2024", "01-07-2024", 1)  # doctest: +ELLIPSIS
0.49...
"""

from .boundary import SENTINEL, ErrorContext, LookbackBoundary

__all__ = [
    "SENTINEL",
    "ErrorContext",
    "LookbackBoundary",
]
