"""
Property-based tests for contract validation.

Properties tested:
1. Every input inside the valid region builds a contract
2. Each rule alone rejects its invalid region with its own identifier
3. Greek path counts stay within the policy bounds for every valid step
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from lookback_pricing.options.contract import ContractParameters
from lookback_pricing.options.greeks import PathCountPolicy
from lookback_pricing.options.validation import InvalidParameterError

# =============================================================================
# Strategy Definitions
# =============================================================================

spot_strategy = st.floats(min_value=1e-6, max_value=1e6, allow_nan=False, allow_infinity=False)
vol_strategy = st.floats(min_value=1e-6, max_value=5.0, allow_nan=False, allow_infinity=False)
rate_strategy = st.floats(min_value=0.0, max_value=1.0, allow_nan=False, allow_infinity=False)
ttm_strategy = st.floats(min_value=0.0, max_value=50.0, allow_nan=False, allow_infinity=False)
step_strategy = st.floats(min_value=0.005, max_value=1.0, exclude_max=True, allow_nan=False)
option_strategy = st.sampled_from(["c", "C", "p", "P", "call", "put", ord("c"), ord("P")])
non_positive = st.floats(max_value=0.0, allow_nan=False)


def build(**overrides) -> ContractParameters:
    kwargs = dict(spot=100.0, volatility=0.2, rate=0.05, option_type="c", fd_step=0.01, time_to_maturity=1.0)
    kwargs.update(overrides)
    return ContractParameters(**kwargs)


class TestValidRegion:
    """Inputs inside the valid region always build."""

    @given(
        spot=spot_strategy,
        vol=vol_strategy,
        rate=rate_strategy,
        ttm=ttm_strategy,
        step=step_strategy,
        option=option_strategy,
    )
    @settings(max_examples=300)
    def test_builds(self, spot, vol, rate, ttm, step, option) -> None:
        contract = build(
            spot=spot, volatility=vol, rate=rate, time_to_maturity=ttm, fd_step=step, option_type=option
        )
        assert contract.spot == spot
        assert contract.fd_step == step


class TestInvalidRegion:
    """Each rule rejects its region, identified by rule name."""

    @given(spot=non_positive)
    def test_spot(self, spot) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            build(spot=spot)
        assert exc_info.value.rule == "spot"

    @given(vol=non_positive)
    def test_volatility(self, vol) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            build(volatility=vol)
        assert exc_info.value.rule == "volatility"

    @given(rate=st.floats(max_value=-1e-12, allow_nan=False))
    def test_rate(self, rate) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            build(rate=rate)
        assert exc_info.value.rule == "rate"

    @given(ttm=st.floats(max_value=-1e-12, allow_nan=False))
    def test_time_to_maturity(self, ttm) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            build(time_to_maturity=ttm)
        assert exc_info.value.rule == "time_to_maturity"

    @given(step=st.floats(max_value=0.005, exclude_max=True, allow_nan=False))
    def test_step_too_small(self, step) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            build(fd_step=step)
        assert exc_info.value.rule == "fd_step_min"

    @given(step=st.floats(min_value=1.0, allow_nan=False))
    def test_step_too_large(self, step) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            build(fd_step=step)
        assert exc_info.value.rule == "fd_step_max"

    @given(option=st.text(max_size=5).filter(lambda s: s.strip().lower() not in {"c", "p", "call", "put"}))
    def test_option_kind(self, option) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            build(option_type=option)
        assert exc_info.value.rule == "option_kind"


class TestPathCountBounds:
    """Policy output stays in [min_paths, max_paths]."""

    @given(step=step_strategy)
    def test_default_policy_bounds(self, step) -> None:
        policy = PathCountPolicy()
        assert policy.min_paths <= policy.n_paths(step) <= policy.max_paths
        assert policy.n_paths(2 * step) <= policy.n_paths(step)
