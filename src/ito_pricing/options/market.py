"""
Market parameters for Black-Scholes-Merton pricing.

[T1] Single underlying, constant rate and volatility, no dividends.
"""

import math
from dataclasses import dataclass

import numpy as np

from ito_pricing.errors import InvalidMarketParametersError


@dataclass(frozen=True)
class MarketParameters:
    """
    Market inputs for one pricing call.

    Validated on construction. Downstream pricing stages assume the
    invariants hold and do not re-check them.

    Attributes
    ----------
    spot : float
        Current price of the underlying (S > 0)
    strike : float
        Strike price (K > 0)
    rate : float
        Risk-free rate, continuously compounded (sign unrestricted)
    volatility : float
        Annualized volatility (σ >= 0)
    time_to_maturity : float
        Time to expiry in years (τ > 0)
    """

    spot: float
    strike: float
    rate: float
    volatility: float
    time_to_maturity: float

    def __post_init__(self) -> None:
        """Validate parameters."""
        for name in ("spot", "strike", "rate", "volatility", "time_to_maturity"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidMarketParametersError(
                    f"CRITICAL: {name} must be finite, got {value}"
                )
        if self.spot <= 0:
            raise InvalidMarketParametersError(
                f"CRITICAL: spot must be > 0, got {self.spot}"
            )
        if self.strike <= 0:
            raise InvalidMarketParametersError(
                f"CRITICAL: strike must be > 0, got {self.strike}"
            )
        if self.volatility < 0:
            raise InvalidMarketParametersError(
                f"CRITICAL: volatility must be >= 0, got {self.volatility}"
            )
        if self.time_to_maturity <= 0:
            raise InvalidMarketParametersError(
                f"CRITICAL: time_to_maturity must be > 0, got {self.time_to_maturity}"
            )

    @property
    def drift(self) -> float:
        """Risk-neutral log drift over the horizon: (r - σ²/2)τ."""
        return (self.rate - 0.5 * self.volatility**2) * self.time_to_maturity

    @property
    def vol_sqrt_t(self) -> float:
        """Total volatility over the horizon: σ√τ."""
        return self.volatility * np.sqrt(self.time_to_maturity)

    @property
    def discount_factor(self) -> float:
        """Discount factor: exp(-rτ)."""
        return float(np.exp(-self.rate * self.time_to_maturity))

    @property
    def forward(self) -> float:
        """Forward price: S * exp(rτ)."""
        return float(self.spot * np.exp(self.rate * self.time_to_maturity))

    @property
    def parity_value(self) -> float:
        """[T1] Put-call parity target: C - P = S - K*exp(-rτ)."""
        return self.spot - self.strike * self.discount_factor
