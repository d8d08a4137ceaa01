"""
Analytical option pricing.

Provides:
- Black-Scholes closed-form prices with lazily computed Greeks
- Standard normal density and the Abramowitz-Stegun CDF approximation
"""

from ito_pricing.options.pricing.black_scholes import (
    BlackScholesModel,
    Greeks,
    black_scholes_call,
    black_scholes_put,
    put_call_parity_check,
)
from ito_pricing.options.pricing.normal import normal_cdf, normal_pdf

__all__ = [
    "BlackScholesModel",
    "Greeks",
    "black_scholes_call",
    "black_scholes_put",
    "put_call_parity_check",
    "normal_cdf",
    "normal_pdf",
]
