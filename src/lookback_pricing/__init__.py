"""
lookback-pricing: Monte Carlo pricing and Greeks for lookback options.

Quick Start
-----------
>>> from lookback_pricing import ContractParameters, GreeksEngine
>>> contract = ContractParameters.from_dates(
...     spot=100.0, value_date="01-01-2024", maturity_date="01-01-2025",
...     volatility=0.2, rate=0.05, option="c", fd_step=0.01,
... )
>>> greeks = GreeksEngine(contract)
>>> price = greeks.price(n_paths=1_000_000)

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Dates and Day Counts
# =============================================================================
from lookback_pricing.dates import (
    CalendarDate,
    DayCountConvention,
    MalformedDateError,
    UnknownConventionError,
    days_difference,
    is_leap,
    year_fraction,
    year_fraction_from_text,
)

# =============================================================================
# Contract, Pricing, Greeks
# =============================================================================
from lookback_pricing.options import (
    ContractParameters,
    CurveResult,
    GreeksEngine,
    InvalidParameterError,
    LookbackGreeks,
    LookbackMCEngine,
    OptionType,
    PathCountPolicy,
    PriceEstimate,
    delta_curve,
    lookback_call,
    lookback_price,
    lookback_put,
    price_curve,
)

# =============================================================================
# Boundary Adapter
# =============================================================================
from lookback_pricing.adapters import ErrorContext, LookbackBoundary

# =============================================================================
# Configuration
# =============================================================================
from lookback_pricing.config.settings import SETTINGS

__all__ = [
    # Version
    "__version__",
    # Dates
    "CalendarDate",
    "DayCountConvention",
    "MalformedDateError",
    "UnknownConventionError",
    "days_difference",
    "is_leap",
    "year_fraction",
    "year_fraction_from_text",
    # Contract
    "ContractParameters",
    "OptionType",
    "InvalidParameterError",
    # Pricing
    "LookbackMCEngine",
    "PriceEstimate",
    "lookback_call",
    "lookback_put",
    "lookback_price",
    # Greeks
    "GreeksEngine",
    "LookbackGreeks",
    "PathCountPolicy",
    # Curves
    "CurveResult",
    "price_curve",
    "delta_curve",
    # Boundary
    "ErrorContext",
    "LookbackBoundary",
    # Config
    "SETTINGS",
]
