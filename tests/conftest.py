"""
Centralized pytest fixtures for the ito-pricing test suite.

Fixture Categories:
1. Tolerance tiers - analytical vs stochastic comparisons
2. Market Parameters - standard ATM / ITM / OTM conditions
3. Monte Carlo configurations - small, fast, seeded
"""

from dataclasses import dataclass

import pytest

from ito_pricing.options.market import MarketParameters
from ito_pricing.options.simulation.execution import (
    ExecutionPolicy,
    PricingConfiguration,
)

# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    Derived from precision requirements, not ad hoc.
    """

    # Anti-pattern tests: Very tight (fundamental violations)
    anti_pattern: float = 1e-10

    # Validation tests: Library precision
    validation: float = 1e-6

    # Policy comparison on identical draws (elementwise ops, same order)
    identical_draws: float = 1e-12


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# MARKET PARAMETERS
# =============================================================================

#: Hull-style reference case used throughout: BS call ≈ 10.4506, put ≈ 5.5735
ATM_CALL_PRICE: float = 10.450583572185565
ATM_PUT_PRICE: float = 5.573526022256971


@pytest.fixture
def atm_market() -> MarketParameters:
    """S=100, K=100, r=5%, σ=20%, T=1."""
    return MarketParameters(
        spot=100.0,
        strike=100.0,
        rate=0.05,
        volatility=0.20,
        time_to_maturity=1.0,
    )


@pytest.fixture
def itm_call_market() -> MarketParameters:
    """Call deep in the money (K=80)."""
    return MarketParameters(
        spot=100.0,
        strike=80.0,
        rate=0.05,
        volatility=0.20,
        time_to_maturity=1.0,
    )


@pytest.fixture
def otm_call_market() -> MarketParameters:
    """Call out of the money (K=120), shorter maturity."""
    return MarketParameters(
        spot=100.0,
        strike=120.0,
        rate=0.03,
        volatility=0.25,
        time_to_maturity=0.5,
    )


@pytest.fixture
def zero_vol_market() -> MarketParameters:
    """σ = 0: every path lands on the forward."""
    return MarketParameters(
        spot=100.0,
        strike=100.0,
        rate=0.05,
        volatility=0.0,
        time_to_maturity=1.0,
    )


# =============================================================================
# MONTE CARLO CONFIGURATIONS
# =============================================================================

@pytest.fixture
def sequential_config() -> PricingConfiguration:
    """Small seeded sequential run."""
    return PricingConfiguration(
        sample_count=10_000,
        seed=42,
        execution_policy=ExecutionPolicy.SEQUENTIAL,
    )


@pytest.fixture
def parallel_config() -> PricingConfiguration:
    """Small seeded parallel run with several slices."""
    return PricingConfiguration(
        sample_count=10_000,
        seed=42,
        execution_policy=ExecutionPolicy.PARALLEL,
        max_workers=4,
        parallel_chunk_size=1_500,
    )
