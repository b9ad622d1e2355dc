"""
Finite-difference Greeks for lookback options.

Every Greek re-prices the contract with bumped inputs through the Monte Carlo
engine. All bumps of one Greek use the same path count and the same worker
seeds (common random numbers), so most of the sampling noise cancels in the
difference.

[T1] Delta: (P(S+2h) - P(S-2h)) / (4h)
[T1] Gamma: (P(S+2h) + P(S-2h) - 2P(S)) / (2h)²
[T1] Vega:  0.01 · (P(σ+h) - P(σ-h)) / (2h)   per vol point
[T1] Rho:   0.01 · (P(r+h) - P(r-h)) / (2h)   per rate point
[T1] Theta: (P(T-d) - P(T+d)) / (2d), d a few calendar days

Path counts follow N = c · step^(-p) (default p = 4), which balances the
O(step²) truncation error of a central difference against the O(1/√N)
sampling error. The count is clamped to [min_paths, max_paths].

See: Glasserman (2003) Ch. 7 - Estimating sensitivities
"""

import logging
from dataclasses import dataclass
from typing import Optional

from lookback_pricing.config.settings import SETTINGS, GreeksConfig
from lookback_pricing.options.contract import ContractParameters
from lookback_pricing.options.simulation.monte_carlo import LookbackMCEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathCountPolicy:
    """
    Paths per bump as a function of the finite-difference step.

    N(step) = clamp(round(coefficient · step^(-exponent)), min_paths, max_paths)

    Attributes
    ----------
    coefficient : float
        Scale c (> 0)
    exponent : float
        Power p (>= 0); p = 0 gives a fixed count
    min_paths : int
        Lower bound (>= 1)
    max_paths : int
        Upper bound (>= min_paths)

    Examples
    --------
    >>> PathCountPolicy(max_paths=10**9).n_paths(0.1)
    10000
    """

    coefficient: float = 1.0
    exponent: float = 4.0
    min_paths: int = 10_000
    max_paths: int = 20_000_000

    def __post_init__(self) -> None:
        """Validate policy."""
        if not self.coefficient > 0:
            raise ValueError(f"CRITICAL: coefficient must be > 0, got {self.coefficient}")
        if not self.exponent >= 0:
            raise ValueError(f"CRITICAL: exponent must be >= 0, got {self.exponent}")
        if self.min_paths < 1:
            raise ValueError(f"CRITICAL: min_paths must be >= 1, got {self.min_paths}")
        if self.max_paths < self.min_paths:
            raise ValueError(
                f"CRITICAL: max_paths ({self.max_paths}) must be >= min_paths ({self.min_paths})"
            )

    @classmethod
    def from_config(cls, config: GreeksConfig) -> "PathCountPolicy":
        """Build the default policy from a GreeksConfig."""
        return cls(
            coefficient=config.path_coefficient,
            exponent=config.path_exponent,
            min_paths=config.min_paths,
            max_paths=config.max_paths,
        )

    def n_paths(self, step: float) -> int:
        """Paths to use for a bump of size step."""
        if not step > 0:
            raise ValueError(f"CRITICAL: step must be > 0, got {step}")
        raw = self.coefficient * step ** (-self.exponent)
        return int(min(max(round(raw), self.min_paths), self.max_paths))


@dataclass(frozen=True)
class LookbackGreeks:
    """
    Immutable bundle of finite-difference Greeks.

    Attributes
    ----------
    delta : float
        dV/dS
    gamma : float
        d²V/dS²
    vega : float
        dV/dσ per 1% vol change
    rho : float
        dV/dr per 1% rate change
    theta : float
        -dV/dT per year
    """

    delta: float
    gamma: float
    vega: float
    rho: float
    theta: float


class GreeksEngine:
    """
    Finite-difference Greeks around a validated contract.

    Parameters
    ----------
    contract : ContractParameters
        Validated contract; its fd_step h sets the bump sizes
    engine : LookbackMCEngine, optional
        Pricing engine (default: one built for the contract's option type)
    path_policy : PathCountPolicy, optional
        Paths per bump for delta, gamma, vega and rho
    theta_policy : PathCountPolicy, optional
        Paths per bump for theta (default: path_policy)
    config : GreeksConfig, optional
        Bump sizes and scales (default SETTINGS.greeks)

    Examples
    --------
    >>> contract = ContractParameters.from_dates(100, "01-01-2024", "01-01-2025", 0.2, 0.05, "c", 0.05)
    >>> greeks = GreeksEngine(contract, path_policy=PathCountPolicy(max_paths=100_000))
    >>> greeks.delta()  # doctest: +SKIP
    """

    def __init__(
        self,
        contract: ContractParameters,
        engine: Optional[LookbackMCEngine] = None,
        path_policy: Optional[PathCountPolicy] = None,
        theta_policy: Optional[PathCountPolicy] = None,
        config: Optional[GreeksConfig] = None,
    ):
        self.contract = contract
        self.config = SETTINGS.greeks if config is None else config
        self.engine = LookbackMCEngine(contract.option_type) if engine is None else engine

        if self.engine.option_type is not contract.option_type:
            raise ValueError(
                f"CRITICAL: engine prices {self.engine.option_type.value} "
                f"but contract is a {contract.option_type.value}"
            )

        self.path_policy = (
            PathCountPolicy.from_config(self.config) if path_policy is None else path_policy
        )
        self.theta_policy = self.path_policy if theta_policy is None else theta_policy

    # -------------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------------

    def price(
        self,
        spot: Optional[float] = None,
        volatility: Optional[float] = None,
        rate: Optional[float] = None,
        maturity: Optional[float] = None,
        n_paths: Optional[int] = None,
    ) -> float:
        """Price with any input overridden; the rest come from the contract."""
        c = self.contract
        return self.engine.price(
            c.spot if spot is None else spot,
            c.volatility if volatility is None else volatility,
            c.rate if rate is None else rate,
            c.time_to_maturity if maturity is None else maturity,
            n_paths,
        )

    def _resolve_paths(self, policy: PathCountPolicy, step: float, n_paths: Optional[int], greek: str) -> int:
        n = policy.n_paths(step) if n_paths is None else n_paths
        logger.debug(f"{greek}: step={step:.6g}, N={n}")
        return n

    # -------------------------------------------------------------------------
    # Spot Greeks
    # -------------------------------------------------------------------------

    def delta(self, spot: Optional[float] = None, n_paths: Optional[int] = None) -> float:
        """
        Delta by central difference in spot with step 2h.

        Falls back to a forward difference when S - 2h <= 0 so no negative
        spot is ever priced.

        Parameters
        ----------
        spot : float, optional
            Spot to differentiate at (default: contract spot)
        n_paths : int, optional
            Override the path-count policy
        """
        s = self.contract.spot if spot is None else spot
        step = 2.0 * self.contract.fd_step
        n = self._resolve_paths(self.path_policy, step, n_paths, "delta")

        up = self.price(spot=s + step, n_paths=n)
        if s - step <= 0:
            logger.info(f"delta: S={s} within 2h of zero, using forward difference")
            return (up - self.price(spot=s, n_paths=n)) / step

        down = self.price(spot=s - step, n_paths=n)
        return (up - down) / (2.0 * step)

    def gamma(self, spot: Optional[float] = None, n_paths: Optional[int] = None) -> float:
        """
        Gamma by second central difference in spot with step 2h.

        Falls back to a forward second difference when S - 2h <= 0.
        """
        s = self.contract.spot if spot is None else spot
        step = 2.0 * self.contract.fd_step
        n = self._resolve_paths(self.path_policy, step, n_paths, "gamma")

        mid = self.price(spot=s, n_paths=n)
        up = self.price(spot=s + step, n_paths=n)
        if s - step <= 0:
            logger.info(f"gamma: S={s} within 2h of zero, using forward difference")
            up2 = self.price(spot=s + 2.0 * step, n_paths=n)
            return (up2 - 2.0 * up + mid) / step**2

        down = self.price(spot=s - step, n_paths=n)
        return (up + down - 2.0 * mid) / step**2

    # -------------------------------------------------------------------------
    # Parameter Greeks
    # -------------------------------------------------------------------------

    def vega(self, n_paths: Optional[int] = None) -> float:
        """
        Vega per one-point vol move, central difference with step h.

        When h >= σ the down bump would price a non-positive volatility, so
        a forward difference is used instead.
        """
        h = self.contract.fd_step
        sigma = self.contract.volatility
        n = self._resolve_paths(self.path_policy, h, n_paths, "vega")

        up = self.price(volatility=sigma + h, n_paths=n)
        if h >= sigma:
            logger.info(f"vega: h={h} >= sigma={sigma}, using forward difference")
            return self.config.vol_scale * (up - self.price(n_paths=n)) / h

        down = self.price(volatility=sigma - h, n_paths=n)
        return self.config.vol_scale * (up - down) / (2.0 * h)

    def rho(self, n_paths: Optional[int] = None) -> float:
        """
        Rho per one-point rate move.

        Central difference with step h when h <= r; otherwise a forward
        difference so no negative rate is probed. The switch is a heuristic
        carried over for compatibility, not a numerical requirement.
        """
        h = self.contract.fd_step
        r = self.contract.rate
        n = self._resolve_paths(self.path_policy, h, n_paths, "rho")

        up = self.price(rate=r + h, n_paths=n)
        if h <= r:
            down = self.price(rate=r - h, n_paths=n)
            return self.config.rate_scale * (up - down) / (2.0 * h)

        logger.info(f"rho: h={h} > r={r}, using forward difference")
        return self.config.rate_scale * (up - self.price(n_paths=n)) / h

    def theta_step(self) -> float:
        """
        Theta bump in years.

        theta_bump_days (3) calendar days, or near_expiry_bump_days (0.5)
        when at most near_expiry_days (4) remain.
        """
        cfg = self.config
        days = cfg.theta_bump_days
        if self.contract.time_to_maturity <= cfg.near_expiry_days / cfg.days_per_year:
            days = cfg.near_expiry_bump_days
        return days / cfg.days_per_year

    def theta(self, n_paths: Optional[int] = None) -> float:
        """
        Theta (-dV/dT per year), central difference in time to maturity.

        Uses a forward difference if the down bump would cross expiry.
        """
        d = self.theta_step()
        ttm = self.contract.time_to_maturity
        n = self._resolve_paths(self.theta_policy, d, n_paths, "theta")

        longer = self.price(maturity=ttm + d, n_paths=n)
        if ttm - d < 0:
            logger.info(f"theta: T={ttm:.6f} shorter than bump {d:.6f}, using forward difference")
            return (self.price(n_paths=n) - longer) / d

        shorter = self.price(maturity=ttm - d, n_paths=n)
        return (shorter - longer) / (2.0 * d)

    def all_greeks(self, n_paths: Optional[int] = None) -> LookbackGreeks:
        """
        Compute every Greek, one after another.

        Parameters
        ----------
        n_paths : int, optional
            Override the path-count policy for every Greek

        Returns
        -------
        LookbackGreeks
            delta, gamma, vega, rho, theta
        """
        return LookbackGreeks(
            delta=self.delta(n_paths=n_paths),
            gamma=self.gamma(n_paths=n_paths),
            vega=self.vega(n_paths=n_paths),
            rho=self.rho(n_paths=n_paths),
            theta=self.theta(n_paths=n_paths),
        )
