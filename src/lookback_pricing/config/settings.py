"""
Frozen configuration settings for lookback option pricing.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Environment overrides are resolved once, when SETTINGS is built.
See: docs/TOLERANCE_JUSTIFICATION.md for tolerance derivations.
"""

import os
from dataclasses import dataclass, field

from lookback_pricing.dates.day_count import DayCountConvention


def _env_int(name: str, default: int) -> int:
    """
    Read a positive integer override from the environment.

    Parameters
    ----------
    name : str
        Environment variable name
    default : int
        Value used when the variable is unset

    Returns
    -------
    int
        Resolved value

    Raises
    ------
    ValueError
        If the variable is set but is not a positive integer
    """
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"CRITICAL: {name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"CRITICAL: {name} must be > 0, got {value}")
    return value


def _resolve_n_workers() -> int:
    """
    Resolve worker count for the Monte Carlo reduction.

    Priority:
    1. LOOKBACK_N_WORKERS environment variable (if set)
    2. Default: number of CPUs, capped at 8
    """
    return _env_int("LOOKBACK_N_WORKERS", min(os.cpu_count() or 1, 8))


def _resolve_max_greek_paths() -> int:
    """Resolve the upper bound on paths per Greek bump (LOOKBACK_MAX_GREEK_PATHS)."""
    return _env_int("LOOKBACK_MAX_GREEK_PATHS", 20_000_000)


# =============================================================================
# Simulation Configuration
# =============================================================================

@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable Monte Carlo configuration.

    Attributes
    ----------
    seed : int
        Global seed; each worker derives its stream from (seed, worker_index)
    default_paths : int
        Antithetic pairs used when a price call does not specify N
    n_workers : int
        Worker threads per price call. Override with LOOKBACK_N_WORKERS.
    batch_size : int
        Draws generated per vectorized batch inside a worker
    uniform_epsilon : float
        Uniform draws are clamped to [eps, 1 - eps]
    """

    seed: int = 0x9E3779B97F4A7C15
    default_paths: int = 5_000_000
    n_workers: int = field(default_factory=_resolve_n_workers)
    batch_size: int = 250_000
    uniform_epsilon: float = 1e-15


# =============================================================================
# Greeks Configuration
# =============================================================================

@dataclass(frozen=True)
class GreeksConfig:
    """
    Immutable finite-difference configuration.

    Attributes
    ----------
    path_coefficient : float
        c in N = c * step^(-p)
    path_exponent : float
        p in N = c * step^(-p)
    min_paths : int
        Lower bound on paths per bump
    max_paths : int
        Upper bound on paths per bump. Override with LOOKBACK_MAX_GREEK_PATHS.
    theta_bump_days : float
        Calendar days bumped for theta
    near_expiry_days : float
        At or below this many days to expiry theta uses the short bump
    near_expiry_bump_days : float
        Calendar days bumped for theta near expiry
    days_per_year : float
        Converts theta bumps to year units
    vol_scale : float
        Vega is reported per one-point vol move
    rate_scale : float
        Rho is reported per one-point rate move
    """

    path_coefficient: float = 1.0
    path_exponent: float = 4.0
    min_paths: int = 10_000
    max_paths: int = field(default_factory=_resolve_max_greek_paths)
    theta_bump_days: float = 3.0
    near_expiry_days: float = 4.0
    near_expiry_bump_days: float = 0.5
    days_per_year: float = 365.0
    vol_scale: float = 0.01
    rate_scale: float = 0.01


# =============================================================================
# Contract Configuration
# =============================================================================

@dataclass(frozen=True)
class ContractConfig:
    """
    Immutable contract validation bounds.

    Attributes
    ----------
    min_fd_step : float
        Smallest finite-difference step accepted (inclusive)
    max_fd_step : float
        Finite-difference step must be strictly below this
    default_convention : DayCountConvention
        Convention used when a contract is built from dates without one
    """

    min_fd_step: float = 0.005
    max_fd_step: float = 1.0
    default_convention: DayCountConvention = DayCountConvention.ACT_ACT_ISDA


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from lookback_pricing.config.settings import SETTINGS
    >>> SETTINGS.simulation.seed
    """

    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    greeks: GreeksConfig = field(default_factory=GreeksConfig)
    contract: ContractConfig = field(default_factory=ContractConfig)


# Singleton instance - import this
SETTINGS = Settings()
