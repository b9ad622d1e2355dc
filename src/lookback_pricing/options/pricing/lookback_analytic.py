"""
Closed-form prices for floating-strike lookback options under GBM.

Used as the oracle the Monte Carlo engine converges to.

References
----------
[T1] Goldman, M. B., Sosin, H. B., & Gatto, M. A. (1979). Path dependent
     options: "Buy at the low, sell at the high". Journal of Finance.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives, Ch. 26.
"""

from typing import Optional

import numpy as np
from scipy import stats

from lookback_pricing.options.payoffs import OptionType


def _validate_inputs(spot: float, rate: float, volatility: float, time_to_expiry: float) -> None:
    """Validate closed-form inputs."""
    if spot <= 0:
        raise ValueError(f"CRITICAL: spot must be > 0, got {spot}")
    if volatility <= 0:
        raise ValueError(f"CRITICAL: volatility must be > 0, got {volatility}")
    if time_to_expiry < 0:
        raise ValueError(f"CRITICAL: time_to_expiry must be >= 0, got {time_to_expiry}")
    if rate <= 0:
        # σ²/(2r) is singular at r = 0
        raise ValueError(f"CRITICAL: closed form requires rate > 0, got {rate}")


def lookback_call(
    spot: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
    running_min: Optional[float] = None,
) -> float:
    """
    Floating-strike lookback call: S(T) - min S(t).

    [T1] c = S N(a1) - S σ²/(2r) N(-a1)
             - S_min e^(-rT) [N(a2) - σ²/(2r) e^(Y1) N(-a3)]

    Parameters
    ----------
    spot : float
        Current spot price
    rate : float
        Risk-free rate (decimal, > 0)
    volatility : float
        Volatility (decimal)
    time_to_expiry : float
        Time to expiry (years)
    running_min : float, optional
        Minimum observed so far (default: spot, a newly issued contract)

    Returns
    -------
    float
        Call price

    Examples
    --------
    >>> round(lookback_call(50, 0.10, 0.40, 0.25), 2)
    8.04
    """
    _validate_inputs(spot, rate, volatility, time_to_expiry)
    s_min = spot if running_min is None else running_min
    if s_min <= 0 or s_min > spot:
        raise ValueError(f"CRITICAL: running_min must be in (0, spot], got {s_min}")

    if time_to_expiry == 0:
        return float(spot - s_min)

    vol_sqrt_t = volatility * np.sqrt(time_to_expiry)
    log_ratio = np.log(spot / s_min)
    k = volatility**2 / (2.0 * rate)

    a1 = (log_ratio + (rate + 0.5 * volatility**2) * time_to_expiry) / vol_sqrt_t
    a2 = a1 - vol_sqrt_t
    a3 = (log_ratio + (-rate + 0.5 * volatility**2) * time_to_expiry) / vol_sqrt_t
    y1 = -2.0 * (rate - 0.5 * volatility**2) * log_ratio / volatility**2

    price = (
        spot * stats.norm.cdf(a1)
        - spot * k * stats.norm.cdf(-a1)
        - s_min
        * np.exp(-rate * time_to_expiry)
        * (stats.norm.cdf(a2) - k * np.exp(y1) * stats.norm.cdf(-a3))
    )
    return float(price)


def lookback_put(
    spot: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
    running_max: Optional[float] = None,
) -> float:
    """
    Floating-strike lookback put: max S(t) - S(T).

    [T1] p = S_max e^(-rT) [N(b1) - σ²/(2r) e^(Y2) N(-b3)]
             + S σ²/(2r) N(-b2) - S N(b2)

    Examples
    --------
    >>> round(lookback_put(50, 0.10, 0.40, 0.25), 2)
    7.79
    """
    _validate_inputs(spot, rate, volatility, time_to_expiry)
    s_max = spot if running_max is None else running_max
    if s_max < spot:
        raise ValueError(f"CRITICAL: running_max must be >= spot, got {s_max}")

    if time_to_expiry == 0:
        return float(s_max - spot)

    vol_sqrt_t = volatility * np.sqrt(time_to_expiry)
    log_ratio = np.log(s_max / spot)
    k = volatility**2 / (2.0 * rate)

    b1 = (log_ratio + (-rate + 0.5 * volatility**2) * time_to_expiry) / vol_sqrt_t
    b2 = b1 - vol_sqrt_t
    b3 = (log_ratio + (rate - 0.5 * volatility**2) * time_to_expiry) / vol_sqrt_t
    y2 = 2.0 * (rate - 0.5 * volatility**2) * log_ratio / volatility**2

    price = (
        s_max
        * np.exp(-rate * time_to_expiry)
        * (stats.norm.cdf(b1) - k * np.exp(y2) * stats.norm.cdf(-b3))
        + spot * k * stats.norm.cdf(-b2)
        - spot * stats.norm.cdf(b2)
    )
    return float(price)


def lookback_price(
    spot: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> float:
    """Closed-form price of a newly issued floating-strike lookback."""
    if OptionType.parse(option_type) is OptionType.CALL:
        return lookback_call(spot, rate, volatility, time_to_expiry)
    return lookback_put(spot, rate, volatility, time_to_expiry)
