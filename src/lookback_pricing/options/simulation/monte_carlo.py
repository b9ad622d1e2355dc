"""
Monte Carlo pricing engine for floating-strike lookback options.

Implements:
- Terminal log-price sampling under GBM with antithetic pairs (+Z, -Z)
- Exact Brownian-bridge sampling of the running minimum/maximum
- Parallel accumulation with one deterministic generator per worker

[T1] MC converges to the analytical lookback price at rate 1/√N
[T1] Same N, worker count, seed and batch size => bit-identical estimate

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import numpy as np

from lookback_pricing.config.settings import SETTINGS
from lookback_pricing.options.payoffs import OptionType, lookback_payoff
from lookback_pricing.options.simulation.bridge import clamp_uniforms, sample_log_extremum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceEstimate:
    """
    Monte Carlo lookback price estimate.

    Attributes
    ----------
    price : float
        Discounted expected payoff
    standard_error : float
        Standard error of price, from the antithetic pair averages
    n_paths : int
        Antithetic pairs drawn (2 * n_paths payoffs)
    n_workers : int
        Workers the draws were partitioned across
    discount_factor : float
        exp(-rT)
    """

    price: float
    standard_error: float
    n_paths: int
    n_workers: int
    discount_factor: float

    @property
    def confidence_interval(self) -> tuple[float, float]:
        """95% confidence interval (z = 1.96)."""
        half_width = 1.96 * self.standard_error
        return (self.price - half_width, self.price + half_width)

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.price)


@dataclass(frozen=True)
class _PartialSums:
    """Per-worker payoff sums, combined by plain addition."""

    payoff_sum: float
    payoff_sq_sum: float
    n_draws: int


def partition_draws(n_paths: int, n_workers: int) -> list[int]:
    """
    Split n_paths draws across workers.

    The first n_paths % n_workers workers take one extra draw, so the
    split depends only on (n_paths, n_workers).

    Examples
    --------
    >>> partition_draws(10, 4)
    [3, 3, 2, 2]
    """
    base, extra = divmod(n_paths, n_workers)
    return [base + (1 if i < extra else 0) for i in range(n_workers)]


class LookbackMCEngine:
    """
    Monte Carlo pricing engine for lookback options.

    Parameters
    ----------
    option_type : OptionType
        CALL (payoff on the running minimum) or PUT (running maximum)
    n_workers : int, optional
        Worker threads per price call (default SETTINGS.simulation.n_workers)
    seed : int, optional
        Global seed; worker i draws from SeedSequence(seed, spawn_key=(i,))
    batch_size : int, optional
        Draws generated per vectorized batch inside a worker

    Examples
    --------
    >>> engine = LookbackMCEngine(OptionType.CALL, n_workers=4)
    >>> result = engine.estimate(spot=100, volatility=0.2, rate=0.05, maturity=1.0, n_paths=200_000)
    >>> print(f"Price: {result.price:.4f} ± {result.standard_error:.4f}")
    """

    def __init__(
        self,
        option_type: OptionType,
        n_workers: Optional[int] = None,
        seed: Optional[int] = None,
        batch_size: Optional[int] = None,
    ):
        config = SETTINGS.simulation

        self.option_type = OptionType.parse(option_type)
        self.n_workers = config.n_workers if n_workers is None else n_workers
        self.seed = config.seed if seed is None else seed
        self.batch_size = config.batch_size if batch_size is None else batch_size
        self.default_paths = config.default_paths
        self.uniform_epsilon = config.uniform_epsilon

        if self.n_workers <= 0:
            raise ValueError(f"CRITICAL: n_workers must be > 0, got {self.n_workers}")
        if self.batch_size <= 0:
            raise ValueError(f"CRITICAL: batch_size must be > 0, got {self.batch_size}")
        if self.seed < 0:
            raise ValueError(f"CRITICAL: seed must be >= 0, got {self.seed}")

    def worker_generators(self) -> list[np.random.Generator]:
        """
        Fresh, independently seeded generators indexed by worker id.

        A new list is built for every price call, so no generator state
        survives between calls or is shared between workers.
        """
        return [
            np.random.Generator(
                np.random.PCG64(np.random.SeedSequence(self.seed, spawn_key=(worker,)))
            )
            for worker in range(self.n_workers)
        ]

    def price(
        self,
        spot: float,
        volatility: float,
        rate: float,
        maturity: float,
        n_paths: Optional[int] = None,
    ) -> float:
        """
        Discounted Monte Carlo lookback price.

        Parameters
        ----------
        spot : float
            Spot price S
        volatility : float
            Volatility σ
        rate : float
            Risk-free rate r
        maturity : float
            Time to maturity T in years
        n_paths : int, optional
            Antithetic pairs N (2N payoffs). Default SETTINGS.simulation.default_paths.

        Returns
        -------
        float
            Price estimate
        """
        return self.estimate(spot, volatility, rate, maturity, n_paths).price

    def estimate(
        self,
        spot: float,
        volatility: float,
        rate: float,
        maturity: float,
        n_paths: Optional[int] = None,
    ) -> PriceEstimate:
        """
        Discounted Monte Carlo lookback price with its standard error.

        [T1] Per draw: one Z gives ln S(T)± = ln S + (r - σ²/2)T ∓ σ√T Z,
        two clamped uniforms give the bridge extremum of each branch, and the
        two branch payoffs are summed. The mean over 2N payoffs is
        discounted by exp(-rT).

        Raises
        ------
        ValueError
            If n_paths <= 0, or spot, volatility or maturity is negative
        """
        if n_paths is None:
            n_paths = self.default_paths
        if n_paths <= 0:
            raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")
        if spot < 0:
            raise ValueError(f"CRITICAL: spot must be >= 0, got {spot}")
        if volatility < 0:
            raise ValueError(f"CRITICAL: volatility must be >= 0, got {volatility}")
        if maturity < 0:
            raise ValueError(f"CRITICAL: maturity must be >= 0, got {maturity}")

        discount_factor = float(np.exp(-rate * maturity))

        if spot == 0:
            # A GBM started at zero stays at zero: every payoff is 0
            return PriceEstimate(
                price=0.0,
                standard_error=0.0,
                n_paths=n_paths,
                n_workers=self.n_workers,
                discount_factor=discount_factor,
            )

        start_time = time.perf_counter()

        log_spot = float(np.log(spot))
        drift = (rate - 0.5 * volatility**2) * maturity
        diffusion = volatility * np.sqrt(maturity)
        variance = volatility**2 * maturity

        sizes = partition_draws(n_paths, self.n_workers)
        generators = self.worker_generators()

        def run(worker: int) -> _PartialSums:
            return self._run_worker(
                generators[worker], sizes[worker], log_spot, drift, diffusion, variance
            )

        if self.n_workers == 1:
            partials = [run(0)]
        else:
            with ThreadPoolExecutor(max_workers=self.n_workers) as executor:
                # map() yields in worker order, keeping the reduction order fixed
                partials = list(executor.map(run, range(self.n_workers)))

        payoff_sum = sum(p.payoff_sum for p in partials)
        payoff_sq_sum = sum(p.payoff_sq_sum for p in partials)

        mean_payoff = payoff_sum / n_paths
        if n_paths > 1:
            sample_var = max(payoff_sq_sum - n_paths * mean_payoff**2, 0.0) / (n_paths - 1)
            se = float(np.sqrt(sample_var / n_paths))
        else:
            se = float("nan")

        elapsed = time.perf_counter() - start_time
        logger.debug(
            f"Lookback {self.option_type.value}: S={spot}, sigma={volatility}, r={rate}, "
            f"T={maturity:.6f}, N={n_paths}, workers={self.n_workers} "
            f"in {elapsed:.3f}s"
        )

        return PriceEstimate(
            price=discount_factor * mean_payoff,
            standard_error=discount_factor * se,
            n_paths=n_paths,
            n_workers=self.n_workers,
            discount_factor=discount_factor,
        )

    def _run_worker(
        self,
        rng: np.random.Generator,
        n_draws: int,
        log_spot: float,
        drift: float,
        diffusion: float,
        variance: float,
    ) -> _PartialSums:
        """
        Accumulate pair-averaged payoffs for one worker's share of draws.

        Returns
        -------
        _PartialSums
            Sum and sum of squares of (payoff+ + payoff-) / 2
        """
        minimum = self.option_type is OptionType.CALL
        payoff_sum = 0.0
        payoff_sq_sum = 0.0

        remaining = n_draws
        while remaining > 0:
            m = min(self.batch_size, remaining)
            remaining -= m

            z = rng.standard_normal(m)
            u = clamp_uniforms(rng.random((2, m)), self.uniform_epsilon)

            log_plus = log_spot + drift - diffusion * z
            log_minus = log_spot + drift + diffusion * z

            ext_plus = sample_log_extremum(log_spot, log_plus, variance, u[0], minimum)
            ext_minus = sample_log_extremum(log_spot, log_minus, variance, u[1], minimum)

            pair = lookback_payoff(
                self.option_type, np.exp(log_plus), np.exp(ext_plus)
            ) + lookback_payoff(self.option_type, np.exp(log_minus), np.exp(ext_minus))
            half = 0.5 * pair

            payoff_sum += float(half.sum())
            payoff_sq_sum += float(np.dot(half, half))

        return _PartialSums(payoff_sum=payoff_sum, payoff_sq_sum=payoff_sq_sum, n_draws=n_draws)


def price_lookback_mc(
    spot: float,
    volatility: float,
    rate: float,
    time_to_expiry: float,
    option_type: OptionType,
    n_paths: int = 1_000_000,
    n_workers: Optional[int] = None,
    seed: Optional[int] = None,
) -> PriceEstimate:
    """
    Convenience function to price a lookback option via MC.

    Parameters
    ----------
    spot : float
        Current spot price
    volatility : float
        Volatility (decimal)
    rate : float
        Risk-free rate (decimal)
    time_to_expiry : float
        Time to expiry in years
    option_type : OptionType
        CALL or PUT
    n_paths : int, default 1_000_000
        Antithetic pairs
    n_workers : int, optional
        Worker threads
    seed : int, optional
        Global seed

    Returns
    -------
    PriceEstimate
        Monte Carlo pricing result
    """
    engine = LookbackMCEngine(option_type, n_workers=n_workers, seed=seed)
    return engine.estimate(spot, volatility, rate, time_to_expiry, n_paths)


def convergence_analysis(
    engine: LookbackMCEngine,
    spot: float,
    volatility: float,
    rate: float,
    maturity: float,
    analytical_price: float,
    path_counts: tuple[int, ...] = (1_000, 10_000, 100_000, 1_000_000),
) -> dict:
    """
    Analyze MC convergence to the analytical lookback price.

    [T1] MC error should converge at rate 1/√N.

    Parameters
    ----------
    engine : LookbackMCEngine
        Engine to price with
    spot, volatility, rate, maturity : float
        Market and contract inputs
    analytical_price : float
        Closed-form price (see lookback_analytic)
    path_counts : tuple[int, ...]
        Numbers of antithetic pairs to test

    Returns
    -------
    dict
        {"results": [...], "convergence_rate": slope, "se_convergence_rate": slope}
    """
    results = []

    for n in path_counts:
        estimate = engine.estimate(spot, volatility, rate, maturity, n)
        error = abs(estimate.price - analytical_price)
        low, high = estimate.confidence_interval

        results.append(
            {
                "n_paths": n,
                "mc_price": estimate.price,
                "analytical_price": analytical_price,
                "absolute_error": error,
                "standard_error": estimate.standard_error,
                "within_ci": low <= analytical_price <= high,
            }
        )

    return {
        "results": results,
        "convergence_rate": _log_log_slope(results, "absolute_error"),
        "se_convergence_rate": _log_log_slope(results, "standard_error"),
    }


def _log_log_slope(results: list[dict], key: str) -> float:
    """
    Least-squares slope of log(results[key]) against log(N).

    [T1] Theory predicts -0.5. The standard-error slope is a stable
    estimate; the absolute-error slope is noisy.
    """
    log_n = np.log([r["n_paths"] for r in results])
    log_y = np.log([r[key] + 1e-12 for r in results])
    slope, _ = np.polyfit(log_n, log_y, 1)
    return float(slope)
