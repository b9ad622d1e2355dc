"""
Exact sampling of the running extremum of a Brownian bridge.

Given the log-price at both ends of an interval, the minimum (maximum) of a
Brownian motion with variance σ²T pinned at those ends has a closed-form
conditional law. Inverting it with one uniform draw gives an exact sample,
so no time stepping (and no discretization bias) is needed.

[T1] For x0 = ln S(0), xT = ln S(T), U ~ Uniform(0, 1):
    min = (x0 + xT - sqrt((xT - x0)² - 2σ²T ln(1 - U))) / 2
    max = (x0 + xT + sqrt((xT - x0)² - 2σ²T ln(1 - U))) / 2

References
----------
[T1] Glasserman (2003) Section 6.4 - Brownian bridge extrema
[T1] Crépey (2013) Section 6.9.1 - Lookback options, Black-Scholes case
"""

import numpy as np


def clamp_uniforms(uniforms: np.ndarray, epsilon: float) -> np.ndarray:
    """
    Clamp uniform draws to [epsilon, 1 - epsilon].

    Keeps ln(1 - U) finite when a generator returns exactly 0.
    """
    return np.clip(uniforms, epsilon, 1.0 - epsilon)


def sample_log_extremum(
    log_start: float,
    log_end: np.ndarray,
    variance: float,
    uniforms: np.ndarray,
    minimum: bool,
) -> np.ndarray:
    """
    Sample the log of the running minimum or maximum on each path.

    Parameters
    ----------
    log_start : float
        ln S(0), shared by all paths
    log_end : np.ndarray
        ln S(T) per path
    variance : float
        Total variance σ²T of the log-price over the interval
    uniforms : np.ndarray
        Clamped uniforms, same shape as log_end
    minimum : bool
        True for the running minimum, False for the maximum

    Returns
    -------
    np.ndarray
        Log of the sampled extremum per path

    Notes
    -----
    Rounding can push the radicand slightly below zero when the endpoint
    move and the variance are both tiny; it is clamped to zero.
    """
    spread = log_end - log_start
    radicand = spread * spread - 2.0 * variance * np.log1p(-uniforms)
    root = np.sqrt(np.maximum(radicand, 0.0))

    midpoint = 0.5 * (log_start + log_end)
    if minimum:
        return midpoint - 0.5 * root
    return midpoint + 0.5 * root
