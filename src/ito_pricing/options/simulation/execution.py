"""
Execution strategies for the Monte Carlo pricer.

Two pipelines produce the same kind of output, a SimulatedPaths batch:

- Sequential: one thread, draws consumed in order 0..N-1, each batch of
  draws is simulated and paid off before the next batch is drawn.
- Parallel: every draw is materialized on the caller thread first
  (the sampler is never shared), then the stateless transforms
  (terminal price, call payoff, put payoff) fan out over a thread pool.
  numpy ufuncs release the GIL, so the work runs concurrently.

The AUTOMATIC policy picks a pipeline by sample count. The threshold is a
performance heuristic only; both pipelines consume the sampler identically.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

import numpy as np

from ito_pricing.config.settings import SETTINGS
from ito_pricing.errors import InvalidConfigurationError
from ito_pricing.options.market import MarketParameters
from ito_pricing.options.payoffs.base import call_payoff, put_payoff
from ito_pricing.options.simulation.gbm import simulate_terminal_price
from ito_pricing.options.simulation.sampler import NormalSampler

logger = logging.getLogger(__name__)

_MAX_SEED = 2**64


class ExecutionPolicy(Enum):
    """How the pricer schedules its simulation work."""

    AUTOMATIC = "automatic"
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


def _is_int(value: object) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


@dataclass(frozen=True)
class PricingConfiguration:
    """
    Immutable Monte Carlo configuration.

    Attributes
    ----------
    sample_count : int
        Number of simulated terminal prices (>= 2, the sample variance needs two)
    seed : int, optional
        Seed in [0, 2**64). None draws fresh OS entropy (not reproducible).
    execution_policy : ExecutionPolicy or str
        AUTOMATIC, SEQUENTIAL or PARALLEL. Strings are coerced.
    parallel_threshold : int
        AUTOMATIC runs the parallel pipeline when sample_count >= this
    max_workers : int, optional
        Thread count for the parallel pipeline (None = os.cpu_count())
    batch_size : int
        Draws per step of the sequential pipeline
    parallel_chunk_size : int
        Upper bound on draws per parallel work item

    Raises
    ------
    InvalidConfigurationError
        On construction, if any field is out of range
    """

    sample_count: int = SETTINGS.monte_carlo.sample_count
    seed: Optional[int] = None
    execution_policy: Union[ExecutionPolicy, str] = ExecutionPolicy.AUTOMATIC
    parallel_threshold: int = SETTINGS.monte_carlo.parallel_threshold
    max_workers: Optional[int] = SETTINGS.monte_carlo.max_workers
    batch_size: int = SETTINGS.monte_carlo.batch_size
    parallel_chunk_size: int = SETTINGS.monte_carlo.parallel_chunk_size

    def __post_init__(self) -> None:
        """Validate and normalize fields."""
        if not _is_int(self.sample_count) or self.sample_count < 2:
            raise InvalidConfigurationError(
                f"CRITICAL: sample_count must be an integer >= 2, got {self.sample_count!r}"
            )
        if self.seed is not None and (
            not _is_int(self.seed) or not 0 <= self.seed < _MAX_SEED
        ):
            raise InvalidConfigurationError(
                f"CRITICAL: seed must be None or an integer in [0, 2**64), got {self.seed!r}"
            )

        policy = self.execution_policy
        if isinstance(policy, str):
            try:
                policy = ExecutionPolicy(policy.strip().lower())
            except ValueError as e:
                valid = ", ".join(p.value for p in ExecutionPolicy)
                raise InvalidConfigurationError(
                    f"CRITICAL: unknown execution_policy {self.execution_policy!r}. "
                    f"Valid: {valid}"
                ) from e
        if not isinstance(policy, ExecutionPolicy):
            raise InvalidConfigurationError(
                f"CRITICAL: execution_policy must be an ExecutionPolicy, got {policy!r}"
            )
        # Frozen dataclass workaround: use object.__setattr__
        object.__setattr__(self, "execution_policy", policy)

        for name in ("parallel_threshold", "batch_size", "parallel_chunk_size"):
            value = getattr(self, name)
            if not _is_int(value) or value < 1:
                raise InvalidConfigurationError(
                    f"CRITICAL: {name} must be an integer >= 1, got {value!r}"
                )
        if self.max_workers is not None and (
            not _is_int(self.max_workers) or self.max_workers < 1
        ):
            raise InvalidConfigurationError(
                f"CRITICAL: max_workers must be None or an integer >= 1, got {self.max_workers!r}"
            )


@dataclass(frozen=True)
class SimulatedPaths:
    """
    Per-path outputs of one pipeline run.

    Lives for the duration of one pricing call. Index i of every array
    belongs to draw i, so call_payoffs[i] and put_payoffs[i] come from the
    same terminal price.

    Attributes
    ----------
    terminal_prices : np.ndarray
        Simulated S(T), shape (N,)
    call_payoffs : np.ndarray
        max(S(T) - K, 0), shape (N,)
    put_payoffs : np.ndarray
        max(K - S(T), 0), shape (N,)
    """

    terminal_prices: np.ndarray
    call_payoffs: np.ndarray
    put_payoffs: np.ndarray

    @property
    def n_paths(self) -> int:
        """Number of simulated paths."""
        return int(self.terminal_prices.shape[0])


Pipeline = Callable[[NormalSampler, MarketParameters, PricingConfiguration], SimulatedPaths]


def run_sequential(
    sampler: NormalSampler,
    market: MarketParameters,
    config: PricingConfiguration,
) -> SimulatedPaths:
    """
    Single-threaded pipeline.

    For each batch of `config.batch_size` draws (the last batch may be
    shorter): draw, simulate S(T), evaluate both payoffs on that S(T).
    With batch_size = 1 this is the one-path-at-a-time loop.

    S(T) is kept for every path, not only per batch: 8N bytes beyond the two
    payoff arrays, so callers can check payoffs against their own S(T).

    Parameters
    ----------
    sampler : NormalSampler
        Sampler owned by the calling pricer
    market : MarketParameters
        Validated market inputs
    config : PricingConfiguration
        Sample count and batch size

    Returns
    -------
    SimulatedPaths
        Per-path terminal prices and payoffs, in draw order
    """
    n = config.sample_count
    batch = config.batch_size

    terminal_prices = np.empty(n)
    call_payoffs = np.empty(n)
    put_payoffs = np.empty(n)

    for start in range(0, n, batch):
        stop = min(start + batch, n)
        z = sampler.draw_batch(stop - start)

        # Simulate S(T) once, price both legs from it
        s_t = simulate_terminal_price(
            market.spot, market.rate, market.volatility, market.time_to_maturity, z
        )
        terminal_prices[start:stop] = s_t
        call_payoffs[start:stop] = call_payoff(s_t, market.strike)
        put_payoffs[start:stop] = put_payoff(s_t, market.strike)

    return SimulatedPaths(
        terminal_prices=terminal_prices,
        call_payoffs=call_payoffs,
        put_payoffs=put_payoffs,
    )


def _chunk_bounds(n: int, n_chunks: int) -> list[tuple[int, int]]:
    """Split range(n) into n_chunks contiguous, near-equal slices."""
    edges = np.linspace(0, n, n_chunks + 1).astype(np.int64)
    return [(int(lo), int(hi)) for lo, hi in zip(edges[:-1], edges[1:]) if hi > lo]


def _resolve_workers(config: PricingConfiguration) -> int:
    return config.max_workers or os.cpu_count() or 1


def run_parallel(
    sampler: NormalSampler,
    market: MarketParameters,
    config: PricingConfiguration,
) -> SimulatedPaths:
    """
    Data-parallel pipeline.

    1. Draw all N normals on the caller thread (the sampler is not thread-safe).
    2. Map the draws to terminal prices concurrently, one slice per task.
    3. Map terminal prices to call payoffs and to put payoffs concurrently,
       as two independent passes.

    Workers write disjoint slices of preallocated arrays and only read the
    draw buffer, so no lock is needed. The executor is shut down before
    returning.

    Parameters
    ----------
    sampler : NormalSampler
        Sampler owned by the calling pricer
    market : MarketParameters
        Validated market inputs
    config : PricingConfiguration
        Sample count, worker count and chunk size

    Returns
    -------
    SimulatedPaths
        Per-path terminal prices and payoffs, in draw order
    """
    n = config.sample_count
    workers = _resolve_workers(config)

    # Arena of draws: filled once here, read-only afterwards
    draws = sampler.draw_batch(n)
    draws.setflags(write=False)

    n_chunks = max(workers, -(-n // config.parallel_chunk_size))
    bounds = _chunk_bounds(n, min(n_chunks, n))

    terminal_prices = np.empty(n)
    call_payoffs = np.empty(n)
    put_payoffs = np.empty(n)

    def simulate_slice(lo: int, hi: int) -> None:
        terminal_prices[lo:hi] = simulate_terminal_price(
            market.spot,
            market.rate,
            market.volatility,
            market.time_to_maturity,
            draws[lo:hi],
        )

    def call_slice(lo: int, hi: int) -> None:
        call_payoffs[lo:hi] = call_payoff(terminal_prices[lo:hi], market.strike)

    def put_slice(lo: int, hi: int) -> None:
        put_payoffs[lo:hi] = put_payoff(terminal_prices[lo:hi], market.strike)

    logger.debug(f"Parallel pipeline: {n} paths, {len(bounds)} slices, {workers} workers")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        # Stage 2: terminal prices. result() re-raises worker errors.
        for future in [executor.submit(simulate_slice, lo, hi) for lo, hi in bounds]:
            future.result()

        # Stage 3: both payoff passes, submitted together
        futures = [executor.submit(call_slice, lo, hi) for lo, hi in bounds]
        futures += [executor.submit(put_slice, lo, hi) for lo, hi in bounds]
        for future in futures:
            future.result()

    return SimulatedPaths(
        terminal_prices=terminal_prices,
        call_payoffs=call_payoffs,
        put_payoffs=put_payoffs,
    )


_PIPELINES: dict[ExecutionPolicy, Pipeline] = {
    ExecutionPolicy.SEQUENTIAL: run_sequential,
    ExecutionPolicy.PARALLEL: run_parallel,
}


def resolve_policy(config: PricingConfiguration) -> ExecutionPolicy:
    """
    Resolve AUTOMATIC into a concrete policy.

    AUTOMATIC -> PARALLEL when sample_count >= parallel_threshold,
    otherwise SEQUENTIAL. Explicit policies are returned unchanged.
    """
    if config.execution_policy is ExecutionPolicy.AUTOMATIC:
        if config.sample_count >= config.parallel_threshold:
            return ExecutionPolicy.PARALLEL
        return ExecutionPolicy.SEQUENTIAL
    return config.execution_policy


def resolve_pipeline(config: PricingConfiguration) -> tuple[ExecutionPolicy, Pipeline]:
    """
    Resolve the configuration to a pipeline function, once per pricing call.

    Returns
    -------
    tuple[ExecutionPolicy, Pipeline]
        The concrete policy and the function implementing it
    """
    policy = resolve_policy(config)
    return policy, _PIPELINES[policy]
