"""
Lookback option contracts, pricing and Greeks.

Provides:
- ContractParameters: validated, immutable contract inputs
- LookbackMCEngine: Monte Carlo pricer with exact extremum sampling
- GreeksEngine: finite-difference Greeks with a path-count policy
- Closed-form lookback prices for validation
"""

from lookback_pricing.options.contract import ContractParameters
from lookback_pricing.options.curves import CurveResult, delta_curve, price_curve
from lookback_pricing.options.greeks import GreeksEngine, LookbackGreeks, PathCountPolicy
from lookback_pricing.options.payoffs import OptionType, lookback_payoff
from lookback_pricing.options.pricing import lookback_call, lookback_price, lookback_put
from lookback_pricing.options.simulation import LookbackMCEngine, PriceEstimate
from lookback_pricing.options.validation import InvalidParameterError, validate_contract

__all__ = [
    # Contract
    "ContractParameters",
    "OptionType",
    "InvalidParameterError",
    "validate_contract",
    "lookback_payoff",
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
]
