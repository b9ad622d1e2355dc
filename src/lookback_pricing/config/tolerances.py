"""
Centralized tolerance framework for lookback pricing.

All tolerances are derived from precision requirements, not ad hoc tuning.
See: docs/TOLERANCE_JUSTIFICATION.md for derivation details.

Tolerance Tiers:
    Tier 1 (Analytical): Machine-precision achievable, deterministic results
    Tier 2 (Textbook): Published closed-form values quoted to 2 decimals
    Tier 3 (Stochastic): CLT-derived, Monte Carlo estimates

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo error bounds
    [T1] Goldman, Sosin & Gatto (1979) - Path-dependent options
"""

from typing import Final

import numpy as np

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================

#: Day-count fractions are ratios of small integers
#: Tolerance: a few ulps of a value of order 1-100
DAY_COUNT_TOLERANCE: Final[float] = 1e-12

#: ACT/ACT ISDA additivity across a split date.
#: Exact unless the split changes a leap-year denominator; one day over
#: 365 vs 366 differs by ~7.5e-6 per boundary crossed.
ISDA_ADDITIVITY_TOLERANCE: Final[float] = 1e-4

#: Greeks numerical stability (finite difference derivatives)
#: Tolerance: sqrt(machine_epsilon) ≈ 1.5e-8
GREEKS_NUMERICAL_TOLERANCE: Final[float] = 1e-8


# =============================================================================
# Tier 2: Textbook Tolerances
# =============================================================================

#: Hull lookback examples are quoted to 2 decimal places
HULL_EXAMPLE_TOLERANCE: Final[float] = 0.01


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================


def mc_tolerance(n_paths: int, sigma: float = 10.0, confidence: float = 4.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of MC estimate is σ/√N.

    Parameters
    ----------
    n_paths : int
        Number of Monte Carlo draws
    sigma : float
        Estimated standard deviation of the (pair-averaged) payoff.
        Default 10.0 covers at-the-money lookbacks on a spot of 100.
    confidence : float
        Number of standard deviations (default 4)

    Returns
    -------
    float
        Absolute tolerance for MC vs analytical comparison

    Examples
    --------
    >>> round(mc_tolerance(1_000_000), 3)
    0.04
    """
    if n_paths <= 0:
        raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")
    return confidence * sigma / np.sqrt(n_paths)


#: Closed-form vs MC lookback price with ~500k antithetic pairs, spot 100
ANALYTIC_MC_TOLERANCE: Final[float] = 0.1

#: Greeks vs bumped closed form (common random numbers keep this tight)
GREEKS_VALIDATION_TOLERANCE: Final[float] = 0.05


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    # Tier 1: Analytical
    "day_count": DAY_COUNT_TOLERANCE,
    "isda_additivity": ISDA_ADDITIVITY_TOLERANCE,
    "greeks_numerical": GREEKS_NUMERICAL_TOLERANCE,
    # Tier 2: Textbook
    "hull_example": HULL_EXAMPLE_TOLERANCE,
    # Tier 3: Stochastic
    "analytic_mc": ANALYTIC_MC_TOLERANCE,
    "greeks_validation": GREEKS_VALIDATION_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Parameters
    ----------
    name : str
        Tolerance name (see TOLERANCE_REGISTRY keys)

    Returns
    -------
    float
        Tolerance value

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
