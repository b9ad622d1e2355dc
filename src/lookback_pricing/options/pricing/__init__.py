"""
Closed-form option pricing.

Provides:
- Floating-strike lookback call and put (Goldman-Sosin-Gatto)
"""

from lookback_pricing.options.pricing.lookback_analytic import (
    lookback_call,
    lookback_price,
    lookback_put,
)

__all__ = [
    "lookback_call",
    "lookback_put",
    "lookback_price",
]
