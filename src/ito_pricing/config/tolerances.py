"""
Centralized tolerance framework for option pricing checks.

Tolerances are derived from precision requirements, not ad hoc tuning.

Tolerance Tiers:
    Tier 1 (Analytical): Machine-precision achievable, deterministic results
    Tier 2 (Approximation): Closed-form approximations with published error bounds
    Tier 3 (Stochastic): CLT-derived, Monte Carlo estimates

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Abramowitz & Stegun (1964) 26.2.17
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo error bounds
"""

from typing import Final

import numpy as np

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================

#: No-arbitrage bounds on analytical prices
ANTI_PATTERN_TOLERANCE: Final[float] = 1e-10

#: Put-call parity for the closed-form pricer: C - P = S - K*exp(-rT)
PUT_CALL_PARITY_TOLERANCE: Final[float] = 1e-8


# =============================================================================
# Tier 2: Approximation Tolerances
# =============================================================================

#: Abramowitz & Stegun 26.2.17 absolute error bound on the normal CDF
NORMAL_CDF_APPROX_TOLERANCE: Final[float] = 7.5e-8


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================

#: Two-sided 95% normal quantile used for confidence half-widths
CONFIDENCE_Z_95: Final[float] = 1.96


def mc_tolerance(n_paths: int, sigma: float = 15.0, confidence: float = 3.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance in price units.

    [T1] Standard error of an MC estimate is σ_payoff/√N.

    Parameters
    ----------
    n_paths : int
        Number of Monte Carlo paths
    sigma : float
        Estimated standard deviation of the discounted payoff
        (default 15.0, roughly an ATM call on S=100, σ=20%, T=1)
    confidence : float
        Number of standard deviations (default 3 for 99.7% CI)

    Returns
    -------
    float
        Absolute tolerance for MC vs analytical comparison

    Examples
    --------
    >>> round(mc_tolerance(100_000), 3)
    0.142
    """
    if n_paths <= 0:
        raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")
    return confidence * sigma / np.sqrt(n_paths)


#: MC tolerance for 10,000 paths: 3 * 15 / sqrt(10000) = 0.45
MC_10K_TOLERANCE: Final[float] = 0.45

#: MC tolerance for 100,000 paths: 3 * 15 / sqrt(100000) ≈ 0.14
MC_100K_TOLERANCE: Final[float] = 0.15

#: MC tolerance for 1,000,000 paths: 3 * 15 / sqrt(1e6) = 0.045
MC_1M_TOLERANCE: Final[float] = 0.05


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    # Tier 1
    "anti_pattern": ANTI_PATTERN_TOLERANCE,
    "put_call_parity": PUT_CALL_PARITY_TOLERANCE,
    # Tier 2
    "normal_cdf_approx": NORMAL_CDF_APPROX_TOLERANCE,
    # Tier 3
    "mc_10k": MC_10K_TOLERANCE,
    "mc_100k": MC_100K_TOLERANCE,
    "mc_1m": MC_1M_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Parameters
    ----------
    name : str
        Tolerance name (see TOLERANCE_REGISTRY keys)

    Returns
    -------
    float
        Tolerance value

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
