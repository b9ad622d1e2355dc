"""
Price and delta profiles across spot.

Samples spots 0, dx·S0, 2dx·S0, ... strictly below 2·S0 and evaluates the
contract's price or delta at each, holding vol, rate and maturity fixed.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from lookback_pricing.options.greeks import GreeksEngine


@dataclass(frozen=True)
class CurveResult:
    """
    Parallel x/y samples.

    Attributes
    ----------
    x : np.ndarray
        Spot values
    y : np.ndarray
        Price or delta at each spot
    """

    x: np.ndarray
    y: np.ndarray

    def __len__(self) -> int:
        return len(self.x)

    def truncate(self, capacity: int) -> "CurveResult":
        """First min(len, capacity) points."""
        if capacity < 0:
            raise ValueError(f"CRITICAL: capacity must be >= 0, got {capacity}")
        return CurveResult(x=self.x[:capacity], y=self.y[:capacity])


def spot_grid(spot: float, dx: float) -> np.ndarray:
    """
    Spots k·dx·S0 for k = 0, 1, ... while below 2·S0.

    Raises
    ------
    ValueError
        If dx <= 0
    """
    if not dx > 0:
        raise ValueError(f"CRITICAL: dx must be > 0, got {dx}")
    step = dx * spot
    n_points = int(np.ceil(2.0 * spot / step))
    grid = step * np.arange(n_points)
    # ceil can admit one point equal to 2·S0 through rounding
    return grid[grid < 2.0 * spot]


def price_curve(greeks: GreeksEngine, dx: float, n_paths: Optional[int] = None) -> CurveResult:
    """
    Price across spot.

    Parameters
    ----------
    greeks : GreeksEngine
        Engine bound to the contract
    dx : float
        Grid spacing as a fraction of S0 (e.g. 0.1 for 20 points)
    n_paths : int, optional
        Antithetic pairs per point (default: engine default)
    """
    x = spot_grid(greeks.contract.spot, dx)
    y = np.array([greeks.price(spot=float(s), n_paths=n_paths) for s in x])
    return CurveResult(x=x, y=y)


def delta_curve(greeks: GreeksEngine, dx: float, n_paths: Optional[int] = None) -> CurveResult:
    """
    Delta across spot.

    Points within 2h of zero use the forward-difference delta.
    """
    x = spot_grid(greeks.contract.spot, dx)
    y = np.array([greeks.delta(spot=float(s), n_paths=n_paths) for s in x])
    return CurveResult(x=x, y=y)
