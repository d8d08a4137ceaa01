"""
Console entry point: compare, benchmark, inspect and converge the pricers.

Usage
-----
ito-pricing compare --samples 1000000 --seed 42
ito-pricing benchmark --sizes 100000 1000000
ito-pricing paths --count 10
ito-pricing convergence --sizes 1000 10000 100000 -v
"""

import argparse
import logging
import sys
import time
from dataclasses import asdict
from typing import Optional, Sequence

import pandas as pd

from ito_pricing.config.settings import SETTINGS
from ito_pricing.errors import PricingError
from ito_pricing.options.market import MarketParameters
from ito_pricing.options.pricing.black_scholes import (
    BlackScholesModel,
    put_call_parity_check,
)
from ito_pricing.options.simulation.execution import ExecutionPolicy, PricingConfiguration
from ito_pricing.options.simulation.monte_carlo import MonteCarloPricer, convergence_analysis
from ito_pricing.validation.gates import GateStatus, ValidationEngine

logger = logging.getLogger(__name__)

DEFAULT_SIZES = (100_000, 1_000_000, 10_000_000)


def _common_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(add_help=False)
    p.add_argument("--spot", type=float, default=100.0, help="Spot price S0 (default: 100)")
    p.add_argument("--strike", type=float, default=100.0, help="Strike K (default: 100)")
    p.add_argument("--rate", type=float, default=0.05, help="Risk-free rate r (default: 0.05)")
    p.add_argument(
        "--volatility", type=float, default=0.20, help="Volatility sigma (default: 0.20)"
    )
    p.add_argument(
        "--maturity", type=float, default=1.0, help="Time to maturity in years (default: 1.0)"
    )
    p.add_argument(
        "--seed",
        type=int,
        default=SETTINGS.monte_carlo.seed,
        help=f"Random seed (default: {SETTINGS.monte_carlo.seed})",
    )
    p.add_argument(
        "--samples",
        type=int,
        default=SETTINGS.monte_carlo.sample_count,
        help=f"Monte Carlo sample count (default: {SETTINGS.monte_carlo.sample_count})",
    )
    p.add_argument(
        "--policy",
        choices=[policy.value for policy in ExecutionPolicy],
        default=ExecutionPolicy.AUTOMATIC.value,
        help="Execution policy (default: automatic)",
    )
    p.add_argument(
        "-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG"
    )
    return p


def build_parser() -> argparse.ArgumentParser:
    common = _common_parser()
    parser = argparse.ArgumentParser(
        prog="ito-pricing",
        description="European option pricing under Black-Scholes-Merton.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser(
        "compare",
        parents=[common],
        help="Black-Scholes vs Monte Carlo, with put-call parity and validation gates",
    )

    bench = sub.add_parser(
        "benchmark", parents=[common], help="Time the sequential and parallel pipelines"
    )
    bench.add_argument(
        "--sizes",
        type=int,
        nargs="+",
        default=list(DEFAULT_SIZES),
        help="Sample counts to time (default: 1e5 1e6 1e7)",
    )

    paths = sub.add_parser(
        "paths", parents=[common], help="Print simulated terminal prices"
    )
    paths.add_argument("--count", type=int, default=10, help="Number of paths (default: 10)")

    conv = sub.add_parser(
        "convergence", parents=[common], help="Standard error and bias vs sample count"
    )
    conv.add_argument(
        "--sizes",
        type=int,
        nargs="+",
        default=[1_000, 10_000, 100_000, 1_000_000],
        help="Sample counts (default: 1e3 1e4 1e5 1e6)",
    )
    return parser


def _market_from_args(args: argparse.Namespace) -> MarketParameters:
    return MarketParameters(
        spot=args.spot,
        strike=args.strike,
        rate=args.rate,
        volatility=args.volatility,
        time_to_maturity=args.maturity,
    )


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _run_compare(args: argparse.Namespace) -> int:
    market = _market_from_args(args)
    config = PricingConfiguration(
        sample_count=args.samples, seed=args.seed, execution_policy=args.policy
    )

    model = BlackScholesModel(market)
    bs_call, bs_put = model.call_price(), model.put_price()

    start = time.perf_counter()
    result = MonteCarloPricer(config).price(market)
    elapsed = time.perf_counter() - start

    print(f"Market: S={market.spot}, K={market.strike}, r={market.rate}, "
          f"sigma={market.volatility}, T={market.time_to_maturity}")
    print(f"Monte Carlo: N={args.samples:,}, seed={args.seed}, "
          f"policy={result.policy.value}, {elapsed:.3f}s")
    print()

    table = pd.DataFrame(
        {
            "black_scholes": [bs_call, bs_put],
            "monte_carlo": [result.call.price, result.put.price],
            "half_width_95": [
                result.call.confidence_half_width,
                result.put.confidence_half_width,
            ],
            "abs_error": [abs(result.call.price - bs_call), abs(result.put.price - bs_put)],
        },
        index=["call", "put"],
    )
    print(table.to_string(float_format=lambda x: f"{x:.6f}"))
    print()

    greeks = pd.DataFrame(
        [asdict(model.call_greeks()), asdict(model.put_greeks())], index=["call", "put"]
    )
    print("Greeks (Black-Scholes):")
    print(greeks.to_string(float_format=lambda x: f"{x:.6f}"))
    print()

    holds, error = put_call_parity_check(
        result.call.price,
        result.put.price,
        market.spot,
        market.strike,
        market.rate,
        market.time_to_maturity,
        tolerance=result.call.confidence_half_width,
    )
    print(f"Put-call parity: C - P = {result.price_difference:.6f}, "
          f"S - K*exp(-rT) = {market.parity_value:.6f}, error = {error:.6f} "
          f"({'within' if holds else 'outside'} call half-width)")

    report = ValidationEngine().validate(result, market)
    print(f"Validation: {report.overall_status.value.upper()}")
    for gate in report.results:
        if gate.status != GateStatus.PASS:
            print(f"  {gate.status.value.upper()} [{gate.gate_name}] {gate.message}")

    return 0 if report.passed else 1


def _run_benchmark(args: argparse.Namespace) -> int:
    market = _market_from_args(args)
    rows = []

    for n in args.sizes:
        timings = {}
        for policy in (ExecutionPolicy.SEQUENTIAL, ExecutionPolicy.PARALLEL):
            config = PricingConfiguration(
                sample_count=n, seed=args.seed, execution_policy=policy
            )
            start = time.perf_counter()
            result = MonteCarloPricer(config).price(market)
            timings[policy] = (time.perf_counter() - start, result)
            logger.info(f"N={n:,} {policy.value}: {timings[policy][0]:.3f}s")

        seq_time, seq_result = timings[ExecutionPolicy.SEQUENTIAL]
        par_time, par_result = timings[ExecutionPolicy.PARALLEL]
        rows.append(
            {
                "n_paths": n,
                "sequential_sec": seq_time,
                "parallel_sec": par_time,
                "speedup": seq_time / par_time if par_time > 0 else float("nan"),
                "call_sequential": seq_result.call.price,
                "call_parallel": par_result.call.price,
            }
        )

    print(pd.DataFrame(rows).to_string(index=False, float_format=lambda x: f"{x:.4f}"))
    return 0


def _run_paths(args: argparse.Namespace) -> int:
    market = _market_from_args(args)
    pricer = MonteCarloPricer(
        PricingConfiguration(sample_count=max(args.count, 2), seed=args.seed)
    )

    print(f"Terminal prices (S0={market.spot}, T={market.time_to_maturity}, seed={args.seed}):")
    for i in range(args.count):
        s_t = pricer.simulate_terminal_price(
            market.spot, market.rate, market.volatility, market.time_to_maturity
        )
        print(f"  path {i + 1:>3}: {s_t:.6f}")
    return 0


def _run_convergence(args: argparse.Namespace) -> int:
    market = _market_from_args(args)
    bs_call = bs_put = None
    if market.vol_sqrt_t > 0:
        model = BlackScholesModel(market)
        bs_call, bs_put = model.call_price(), model.put_price()

    frame = convergence_analysis(
        market,
        sample_counts=args.sizes,
        seed=args.seed,
        analytical_call=bs_call,
        analytical_put=bs_put,
        execution_policy=args.policy,
    )
    print(frame.to_string(index=False))
    print(f"\nSE convergence rate: {frame.attrs['se_convergence_rate']:.4f} (theory: -0.5)")
    return 0


_COMMANDS = {
    "compare": _run_compare,
    "benchmark": _run_benchmark,
    "paths": _run_paths,
    "convergence": _run_convergence,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return _COMMANDS[args.command](args)
    except PricingError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
