"""
Centralized pytest fixtures for lookback-pricing test suite.

This module provides shared fixtures used across all test categories:
- unit/
- validation/
- properties/

Fixture Categories:
1. Tolerance tiers
2. Market parameters - the standard at-the-money contract
3. Hull examples - textbook lookback values
4. Engines - small, fast pricing and Greeks engines
"""

from dataclasses import dataclass

import pytest

from lookback_pricing.dates.day_count import DayCountConvention
from lookback_pricing.options.contract import ContractParameters
from lookback_pricing.options.greeks import GreeksEngine, PathCountPolicy
from lookback_pricing.options.payoffs import OptionType
from lookback_pricing.options.simulation.monte_carlo import LookbackMCEngine

# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    Derived from precision requirements, not ad hoc.
    See: docs/TOLERANCE_JUSTIFICATION.md
    """

    # Deterministic arithmetic (day counts, homogeneity)
    exact: float = 1e-12

    # Hull values quoted to 2 decimals
    textbook: float = 0.01

    # Monte Carlo vs closed form, in standard errors
    mc_sigmas: float = 4.0


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# MARKET PARAMETERS
# =============================================================================

@dataclass(frozen=True)
class MarketParams:
    """Standard market parameters for lookback tests."""

    spot: float = 100.0
    rate: float = 0.05
    volatility: float = 0.20
    time_to_expiry: float = 1.0


@pytest.fixture
def market_params() -> MarketParams:
    """Standard ATM market parameters."""
    return MarketParams()


# =============================================================================
# HULL TEXTBOOK EXAMPLES
# =============================================================================

@dataclass(frozen=True)
class HullLookbackExample:
    """Hull (2018) Ch. 26 floating lookback example."""

    spot: float = 50.0
    rate: float = 0.10
    volatility: float = 0.40
    time_to_expiry: float = 0.25
    expected_call: float = 8.04
    expected_put: float = 7.79


@pytest.fixture
def hull_lookback() -> HullLookbackExample:
    """Newly issued lookbacks on a non-dividend stock."""
    return HullLookbackExample()


# =============================================================================
# CONTRACTS AND ENGINES
# =============================================================================

#: Worker count used throughout the suite (independent of the host CPU count)
TEST_WORKERS = 2

#: Paths per Greek bump, small enough to keep the suite fast
TEST_GREEK_PATHS = 100_000


@pytest.fixture
def call_contract() -> ContractParameters:
    """S0=100, σ=20%, r=5%, one ACT/ACT ISDA year from 01-01-2024."""
    return ContractParameters.from_dates(
        spot=100.0,
        value_date="01-01-2024",
        maturity_date="01-01-2025",
        volatility=0.20,
        rate=0.05,
        option="c",
        fd_step=0.01,
        convention=DayCountConvention.ACT_ACT_ISDA,
    )


@pytest.fixture
def put_contract() -> ContractParameters:
    """Put twin of call_contract."""
    return ContractParameters.from_dates(
        spot=100.0,
        value_date="01-01-2024",
        maturity_date="01-01-2025",
        volatility=0.20,
        rate=0.05,
        option="p",
        fd_step=0.01,
        convention=DayCountConvention.ACT_ACT_ISDA,
    )


@pytest.fixture
def call_engine() -> LookbackMCEngine:
    """Two-worker call engine with the default seed."""
    return LookbackMCEngine(OptionType.CALL, n_workers=TEST_WORKERS)


@pytest.fixture
def put_engine() -> LookbackMCEngine:
    """Two-worker put engine with the default seed."""
    return LookbackMCEngine(OptionType.PUT, n_workers=TEST_WORKERS)


@pytest.fixture
def fast_policy() -> PathCountPolicy:
    """Fixed path count for every bump."""
    return PathCountPolicy(exponent=0.0, min_paths=TEST_GREEK_PATHS, max_paths=TEST_GREEK_PATHS)


@pytest.fixture
def call_greeks(call_contract, call_engine, fast_policy) -> GreeksEngine:
    """Greeks engine for the standard call."""
    return GreeksEngine(call_contract, engine=call_engine, path_policy=fast_policy)


@pytest.fixture
def put_greeks(put_contract, put_engine, fast_policy) -> GreeksEngine:
    """Greeks engine for the standard put."""
    return GreeksEngine(put_contract, engine=put_engine, path_policy=fast_policy)
