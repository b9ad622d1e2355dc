#!/usr/bin/env python3
"""
Lookback Price, Greeks and Spot Profile Demo.

Prices a one-year floating-strike lookback by Monte Carlo, checks it against
the Goldman-Sosin-Gatto closed form, and prints the finite-difference
Greeks and a price/delta profile across spot.

Key Concepts:
- Exact Brownian-bridge extremum: no time-stepping bias
- Common random numbers: every bump of a Greek reuses the same draws
- Path-count policy: N = step^-4, clamped

Usage:
    python examples/01_lookback_greeks.py            # Full run
    python examples/01_lookback_greeks.py --ci       # CI mode (fewer paths)
"""

import argparse
import logging
import sys

# Add src to path if running as script
sys.path.insert(0, "src")

from lookback_pricing import (
    ContractParameters,
    GreeksEngine,
    PathCountPolicy,
    delta_curve,
    lookback_price,
    price_curve,
)


def print_header(title: str) -> None:
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def main() -> None:
    parser = argparse.ArgumentParser(description="Lookback price and Greeks demo")
    parser.add_argument("--ci", action="store_true", help="CI mode (fewer paths)")
    parser.add_argument("--option", default="c", help="'c' for call, 'p' for put")
    parser.add_argument("--verbose", action="store_true", help="Log every Monte Carlo run")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    n_paths = 100_000 if args.ci else 2_000_000
    max_greek_paths = 100_000 if args.ci else 5_000_000

    contract = ContractParameters.from_dates(
        spot=100.0,
        value_date="01-01-2024",
        maturity_date="01-01-2025",
        volatility=0.20,
        rate=0.05,
        option=args.option,
        fd_step=0.01,
    )
    greeks = GreeksEngine(contract, path_policy=PathCountPolicy(max_paths=max_greek_paths))

    print_header(f"LOOKBACK {contract.option_type.value.upper()}")
    print(f"\n  S0={contract.spot}, sigma={contract.volatility:.0%}, r={contract.rate:.0%}")
    print(f"  T={contract.time_to_maturity:.6f} years (ACT/ACT ISDA)")

    estimate = greeks.engine.estimate(
        contract.spot, contract.volatility, contract.rate, contract.time_to_maturity, n_paths
    )
    analytic = lookback_price(
        contract.spot, contract.rate, contract.volatility, contract.time_to_maturity, contract.option_type
    )
    low, high = estimate.confidence_interval
    print(f"\n  Monte Carlo:   {estimate.price:.4f} ± {estimate.standard_error:.4f}  ({n_paths:,} pairs)")
    print(f"  95% CI:        [{low:.4f}, {high:.4f}]")
    print(f"  Closed form:   {analytic:.4f}")

    print_header("GREEKS")
    result = greeks.all_greeks()
    print(f"\n  Delta:  {result.delta:10.6f}")
    print(f"  Gamma:  {result.gamma:10.6f}")
    print(f"  Vega:   {result.vega:10.6f}  (per vol point)")
    print(f"  Rho:    {result.rho:10.6f}  (per rate point)")
    print(f"  Theta:  {result.theta:10.6f}  (per year)")

    print_header("SPOT PROFILE")
    curve_paths = 20_000 if args.ci else 200_000
    prices = price_curve(greeks, 0.25, curve_paths)
    deltas = delta_curve(greeks, 0.25, curve_paths)
    print("\n     Spot       Price      Delta")
    print("  " + "-" * 32)
    for s, p, d in zip(prices.x, prices.y, deltas.y):
        print(f"  {s:7.2f}  {p:10.4f}  {d:9.5f}")


if __name__ == "__main__":
    main()
