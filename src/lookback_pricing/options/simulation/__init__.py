"""
Monte Carlo simulation for lookback option pricing.

Provides:
- Exact Brownian-bridge sampling of running extrema
- Parallel Monte Carlo pricing engine with antithetic pairs
- Convergence analysis tools
"""

from lookback_pricing.options.simulation.bridge import (
    clamp_uniforms,
    sample_log_extremum,
)
from lookback_pricing.options.simulation.monte_carlo import (
    LookbackMCEngine,
    PriceEstimate,
    convergence_analysis,
    partition_draws,
    price_lookback_mc,
)

__all__ = [
    # Bridge
    "clamp_uniforms",
    "sample_log_extremum",
    # Monte Carlo
    "LookbackMCEngine",
    "PriceEstimate",
    "convergence_analysis",
    "partition_draws",
    "price_lookback_mc",
]
