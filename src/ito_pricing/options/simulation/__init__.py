"""
Monte Carlo simulation for option pricing.

Provides:
- Seeded standard-normal sampling
- GBM terminal-price simulation
- Sequential and parallel execution pipelines
- Monte Carlo call/put pricing on shared paths
- Convergence analysis tools
"""

from ito_pricing.options.simulation.execution import (
    ExecutionPolicy,
    PricingConfiguration,
    SimulatedPaths,
    resolve_pipeline,
    resolve_policy,
    run_parallel,
    run_sequential,
)
from ito_pricing.options.simulation.gbm import (
    generate_terminal_values,
    simulate_terminal_price,
    validate_gbm_simulation,
)
from ito_pricing.options.simulation.monte_carlo import (
    CallPutResult,
    MonteCarloPricer,
    convergence_analysis,
    price_european_call_and_put,
)
from ito_pricing.options.simulation.sampler import NormalSampler
from ito_pricing.options.simulation.statistics import (
    PricingResult,
    aggregate_payoffs,
    discount_factor,
)

__all__ = [
    # Sampling
    "NormalSampler",
    # GBM
    "generate_terminal_values",
    "simulate_terminal_price",
    "validate_gbm_simulation",
    # Statistics
    "PricingResult",
    "aggregate_payoffs",
    "discount_factor",
    # Execution
    "ExecutionPolicy",
    "PricingConfiguration",
    "SimulatedPaths",
    "resolve_pipeline",
    "resolve_policy",
    "run_parallel",
    "run_sequential",
    # Monte Carlo
    "CallPutResult",
    "MonteCarloPricer",
    "convergence_analysis",
    "price_european_call_and_put",
]
