"""
Tests for finite-difference Greeks.

Uses a recording engine to check which inputs each Greek bumps, plus exact
structural identities that hold under common random numbers:
- Lookback prices are homogeneous of degree one in spot, so Δ = P/S and Γ = 0
"""

import pytest

from lookback_pricing.config.settings import GreeksConfig
from lookback_pricing.options.contract import ContractParameters
from lookback_pricing.options.greeks import GreeksEngine, LookbackGreeks, PathCountPolicy
from lookback_pricing.options.payoffs import OptionType
from lookback_pricing.options.simulation.monte_carlo import LookbackMCEngine


class RecordingEngine(LookbackMCEngine):
    """Engine that records every (spot, vol, rate, maturity, n_paths) priced."""

    def __init__(self, option_type, **kwargs):
        super().__init__(option_type, n_workers=1, **kwargs)
        self.calls = []

    def price(self, spot, volatility, rate, maturity, n_paths=None):
        self.calls.append((spot, volatility, rate, maturity, n_paths))
        return super().price(spot, volatility, rate, maturity, 1_000)


class FailingEngine(LookbackMCEngine):
    """Engine whose every price call fails."""

    def price(self, spot, volatility, rate, maturity, n_paths=None):
        raise RuntimeError("pricing backend unavailable")


def contract(**overrides) -> ContractParameters:
    kwargs = dict(spot=100.0, volatility=0.2, rate=0.05, option_type="c", fd_step=0.01, time_to_maturity=1.0)
    kwargs.update(overrides)
    return ContractParameters(**kwargs)


def recording_greeks(**overrides):
    c = contract(**overrides)
    engine = RecordingEngine(c.option_type)
    policy = PathCountPolicy(exponent=0.0, min_paths=10, max_paths=10)
    return GreeksEngine(c, engine=engine, path_policy=policy), engine


class TestPathCountPolicy:
    """N = c · step^(-p), clamped."""

    def test_inverse_fourth_power(self):
        policy = PathCountPolicy(min_paths=1, max_paths=10**9)
        assert policy.n_paths(0.1) == 10_000
        assert policy.n_paths(0.02) == 6_250_000

    def test_coefficient(self):
        policy = PathCountPolicy(coefficient=4.0, min_paths=1, max_paths=10**9)
        assert policy.n_paths(0.1) == 40_000

    def test_upper_bound(self):
        assert PathCountPolicy(max_paths=1_000_000).n_paths(0.005) == 1_000_000

    def test_lower_bound(self):
        assert PathCountPolicy(min_paths=50_000).n_paths(0.5) == 50_000

    def test_fixed_count(self):
        assert PathCountPolicy(exponent=0.0, min_paths=1, max_paths=10**9).n_paths(0.01) == 1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"coefficient": 0.0},
            {"exponent": -1.0},
            {"min_paths": 0},
            {"min_paths": 100, "max_paths": 10},
        ],
    )
    def test_invalid_policy(self, kwargs):
        with pytest.raises(ValueError, match="CRITICAL"):
            PathCountPolicy(**kwargs)

    def test_invalid_step(self):
        with pytest.raises(ValueError, match="step must be > 0"):
            PathCountPolicy().n_paths(0.0)

    def test_from_config(self):
        config = GreeksConfig(path_coefficient=2.0, path_exponent=3.0, min_paths=5, max_paths=500)
        policy = PathCountPolicy.from_config(config)
        assert policy == PathCountPolicy(coefficient=2.0, exponent=3.0, min_paths=5, max_paths=500)


class TestBumps:
    """Which inputs each Greek prices."""

    def test_delta_bumps_spot_by_2h(self):
        greeks, engine = recording_greeks()
        greeks.delta()
        spots = [call[0] for call in engine.calls]
        assert spots == pytest.approx([100.02, 99.98])

    def test_delta_at_other_spot(self):
        greeks, engine = recording_greeks()
        greeks.delta(spot=50.0)
        assert [call[0] for call in engine.calls] == pytest.approx([50.02, 49.98])

    def test_delta_forward_near_zero(self):
        greeks, engine = recording_greeks()
        greeks.delta(spot=0.0)
        assert [call[0] for call in engine.calls] == pytest.approx([0.02, 0.0])

    def test_gamma_three_points(self):
        greeks, engine = recording_greeks()
        greeks.gamma()
        assert sorted(call[0] for call in engine.calls) == pytest.approx([99.98, 100.0, 100.02])

    def test_vega_bumps_vol_by_h(self):
        greeks, engine = recording_greeks()
        greeks.vega()
        assert [call[1] for call in engine.calls] == pytest.approx([0.21, 0.19])

    def test_vega_forward_when_step_exceeds_vol(self):
        greeks, engine = recording_greeks(volatility=0.01, fd_step=0.02)
        greeks.vega()
        assert [call[1] for call in engine.calls] == pytest.approx([0.03, 0.01])

    def test_rho_central_when_step_below_rate(self):
        greeks, engine = recording_greeks()
        greeks.rho()
        assert [call[2] for call in engine.calls] == pytest.approx([0.06, 0.04])

    def test_rho_forward_when_step_exceeds_rate(self):
        greeks, engine = recording_greeks(rate=0.0)
        greeks.rho()
        rates = [call[2] for call in engine.calls]
        assert rates == pytest.approx([0.01, 0.0])
        assert min(rates) >= 0.0

    def test_theta_three_day_bump(self):
        greeks, engine = recording_greeks()
        greeks.theta()
        d = 3.0 / 365.0
        assert sorted(call[3] for call in engine.calls) == pytest.approx([1.0 - d, 1.0 + d])

    def test_theta_near_expiry_bump(self):
        greeks, engine = recording_greeks(time_to_maturity=2.0 / 365.0)
        assert greeks.theta_step() == pytest.approx(0.5 / 365.0)
        greeks.theta()
        assert min(call[3] for call in engine.calls) == pytest.approx(1.5 / 365.0)

    def test_theta_never_crosses_expiry(self):
        greeks, engine = recording_greeks(time_to_maturity=0.0)
        greeks.theta()
        maturities = [call[3] for call in engine.calls]
        assert min(maturities) == 0.0
        assert max(maturities) == pytest.approx(0.5 / 365.0)

    def test_bumps_keep_other_inputs(self):
        greeks, engine = recording_greeks()
        greeks.vega()
        for spot, _, rate, maturity, _ in engine.calls:
            assert (spot, rate, maturity) == (100.0, 0.05, 1.0)


class TestPathCounts:
    """Each Greek prices every bump with the same policy-derived count."""

    def test_policy_step_per_greek(self):
        c = contract()
        engine = RecordingEngine(c.option_type)
        policy = PathCountPolicy(min_paths=1, max_paths=10**12)
        greeks = GreeksEngine(c, engine=engine, path_policy=policy)

        greeks.delta()
        greeks.vega()
        counts = [call[4] for call in engine.calls]
        assert counts == [policy.n_paths(0.02)] * 2 + [policy.n_paths(0.01)] * 2

    def test_theta_policy(self):
        c = contract()
        engine = RecordingEngine(c.option_type)
        theta_policy = PathCountPolicy(exponent=0.0, min_paths=77, max_paths=77)
        greeks = GreeksEngine(c, engine=engine, theta_policy=theta_policy)
        greeks.theta()
        assert {call[4] for call in engine.calls} == {77}

    def test_explicit_override(self):
        greeks, engine = recording_greeks()
        greeks.rho(n_paths=1234)
        assert {call[4] for call in engine.calls} == {1234}


class TestEngineWiring:
    """Construction and failure propagation."""

    def test_default_engine_matches_contract(self):
        greeks = GreeksEngine(contract(option_type="p"))
        assert greeks.engine.option_type is OptionType.PUT

    def test_mismatched_engine_rejected(self):
        with pytest.raises(ValueError, match="engine prices put"):
            GreeksEngine(contract(), engine=LookbackMCEngine(OptionType.PUT, n_workers=1))

    def test_pricing_failure_propagates(self):
        greeks = GreeksEngine(contract(), engine=FailingEngine(OptionType.CALL, n_workers=1))
        with pytest.raises(RuntimeError, match="pricing backend unavailable"):
            greeks.delta()


class TestStructuralIdentities:
    """[T1] Homogeneity in spot under common random numbers."""

    def test_delta_equals_price_over_spot(self, call_greeks):
        price = call_greeks.price(n_paths=call_greeks.path_policy.min_paths)
        assert call_greeks.delta() == pytest.approx(price / 100.0, rel=1e-6)

    def test_put_delta_equals_price_over_spot(self, put_greeks):
        price = put_greeks.price(n_paths=put_greeks.path_policy.min_paths)
        assert put_greeks.delta() == pytest.approx(price / 100.0, rel=1e-6)

    def test_gamma_vanishes(self, call_greeks):
        gamma = call_greeks.gamma()
        assert gamma == pytest.approx(0.0, abs=1e-5)
        assert gamma >= -1e-5

    def test_all_greeks(self, call_greeks):
        result = call_greeks.all_greeks()
        assert isinstance(result, LookbackGreeks)
        assert result.delta > 0
        assert result.vega > 0
        assert result.theta < 0

    def test_repeatable(self, call_greeks):
        assert call_greeks.vega() == call_greeks.vega()
