"""
Geometric Brownian Motion (GBM) terminal-price simulation.

European payoffs only need S(T), so a single exact log-normal step is taken
from 0 to T. No time grid is stored.

[T1] GBM SDE under Q: dS = rS dt + σS dW
[T1] Exact solution: S(T) = S(0) * exp((r - σ²/2)T + σ√T * Z)

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering", Ch. 3.2
"""

from typing import Optional, Union

import numpy as np

from ito_pricing.options.market import MarketParameters
from ito_pricing.options.simulation.sampler import NormalSampler

ArrayLike = Union[float, np.ndarray]


def simulate_terminal_price(
    spot: float,
    rate: float,
    volatility: float,
    time_to_maturity: float,
    z: ArrayLike,
) -> ArrayLike:
    """
    Map standard-normal draw(s) to terminal price(s).

    [T1] drift = (r - σ²/2) * T
    [T1] diffusion = σ * √T * Z
    [T1] S(T) = S(0) * exp(drift + diffusion)

    Pure function of its inputs, safe to call concurrently on disjoint
    slices of a draw buffer. With σ = 0 the diffusion term vanishes and
    every path lands on the deterministic forward S(0) * exp(rT).

    Parameters
    ----------
    spot : float
        Initial price S(0)
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal, >= 0)
    time_to_maturity : float
        Horizon in years (> 0, checked upstream)
    z : float or np.ndarray
        Standard-normal draw(s)

    Returns
    -------
    float or np.ndarray
        Terminal price(s), same shape as `z`
    """
    drift = (rate - 0.5 * volatility * volatility) * time_to_maturity
    vol_sqrt_t = volatility * np.sqrt(time_to_maturity)
    return spot * np.exp(drift + vol_sqrt_t * z)


def generate_terminal_values(
    market: MarketParameters,
    n_paths: int,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Generate terminal values from a fresh sampler.

    Convenience for diagnostics and tests. The pricer keeps its own sampler
    and does not call this.

    Parameters
    ----------
    market : MarketParameters
        Market inputs
    n_paths : int
        Number of paths
    seed : int, optional
        Random seed

    Returns
    -------
    np.ndarray
        Terminal values, shape (n_paths,)
    """
    if n_paths <= 0:
        raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")

    z = NormalSampler(seed).draw_batch(n_paths)
    return simulate_terminal_price(
        market.spot, market.rate, market.volatility, market.time_to_maturity, z
    )


def validate_gbm_simulation(
    market: MarketParameters,
    n_paths: int = 100_000,
    seed: int = 42,
) -> dict:
    """
    Validate GBM simulation against theoretical moments.

    [T1] Under the risk-neutral measure:
    - E[S(T)] = S(0) * exp(r*T) (forward price)
    - E[log(S(T)/S(0))] = (r - σ²/2)T
    - Var[log(S(T)/S(0))] = σ²T

    Parameters
    ----------
    market : MarketParameters
        Market inputs
    n_paths : int, default 100000
        Number of paths for validation
    seed : int, default 42
        Random seed

    Returns
    -------
    dict
        Validation results with theoretical vs simulated values
    """
    terminal = generate_terminal_values(market, n_paths, seed)

    expected_mean = market.forward
    expected_log_var = market.volatility**2 * market.time_to_maturity

    simulated_mean = float(terminal.mean())
    log_returns = np.log(terminal / market.spot)
    simulated_log_mean = float(log_returns.mean())
    simulated_log_var = float(log_returns.var(ddof=1))

    se_mean = float(terminal.std(ddof=1) / np.sqrt(n_paths))
    # σ = 0: every path equals the forward, so the z-score is defined as 0
    if market.volatility > 0 and se_mean > 0:
        z_score = (simulated_mean - expected_mean) / se_mean
    else:
        z_score = 0.0

    return {
        "n_paths": n_paths,
        "theoretical_mean": expected_mean,
        "simulated_mean": simulated_mean,
        "mean_error": abs(simulated_mean - expected_mean),
        "mean_error_pct": abs(simulated_mean - expected_mean) / expected_mean * 100,
        "mean_se": se_mean,
        "mean_z_score": z_score,
        "theoretical_log_mean": market.drift,
        "simulated_log_mean": simulated_log_mean,
        "theoretical_log_variance": expected_log_var,
        "simulated_log_variance": simulated_log_var,
        "validation_passed": abs(z_score) < 4.0,
    }
