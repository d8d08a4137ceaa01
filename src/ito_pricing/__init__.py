"""
ito-pricing: European option pricing under Black-Scholes-Merton.

Closed-form and Monte Carlo prices, cross-validated against each other
and against put-call parity.

Quick Start
-----------
>>> from ito_pricing import price_european_call_and_put, black_scholes_call
>>> result = price_european_call_and_put(100, 100, 0.05, 0.20, 1.0, seed=42)
>>> result.call.contains(black_scholes_call(100, 100, 0.05, 0.20, 1.0))
True

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Errors
# =============================================================================
from ito_pricing.errors import (
    InvalidConfigurationError,
    InvalidMarketParametersError,
    PricingError,
)

# =============================================================================
# Market Parameters
# =============================================================================
from ito_pricing.options.market import MarketParameters
from ito_pricing.options.payoffs.base import OptionType

# =============================================================================
# Monte Carlo - Primary API
# =============================================================================
from ito_pricing.options.simulation import (
    CallPutResult,
    ExecutionPolicy,
    MonteCarloPricer,
    NormalSampler,
    PricingConfiguration,
    PricingResult,
    convergence_analysis,
    price_european_call_and_put,
)

# =============================================================================
# Analytical Pricing
# =============================================================================
from ito_pricing.options.pricing import (
    BlackScholesModel,
    Greeks,
    black_scholes_call,
    black_scholes_put,
    normal_cdf,
    put_call_parity_check,
)

# =============================================================================
# Configuration
# =============================================================================
from ito_pricing.config.settings import SETTINGS

# =============================================================================
# Validation
# =============================================================================
from ito_pricing.validation import (
    GateStatus,
    ValidationEngine,
    ensure_valid,
    validate_call_put_result,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "PricingError",
    "InvalidConfigurationError",
    "InvalidMarketParametersError",
    # Market
    "MarketParameters",
    "OptionType",
    # Monte Carlo
    "CallPutResult",
    "ExecutionPolicy",
    "MonteCarloPricer",
    "NormalSampler",
    "PricingConfiguration",
    "PricingResult",
    "convergence_analysis",
    "price_european_call_and_put",
    # Analytical
    "BlackScholesModel",
    "Greeks",
    "black_scholes_call",
    "black_scholes_put",
    "normal_cdf",
    "put_call_parity_check",
    # Config
    "SETTINGS",
    # Validation
    "GateStatus",
    "ValidationEngine",
    "ensure_valid",
    "validate_call_put_result",
]
