"""
Black-Scholes option pricing with Greeks.

Closed-form prices for European options on a non-dividend-paying underlying,
used as the reference the Monte Carlo engine is checked against.

Intermediate values (d1, d2) and each Greeks set are computed on first
access and memoized. A model is immutable, so nothing is ever invalidated.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives (10th ed.).
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Callable

import numpy as np
from scipy import stats

from ito_pricing.config.tolerances import PUT_CALL_PARITY_TOLERANCE
from ito_pricing.errors import InvalidMarketParametersError
from ito_pricing.options.market import MarketParameters
from ito_pricing.options.payoffs.base import OptionType


@dataclass(frozen=True)
class Greeks:
    """
    Immutable Black-Scholes sensitivities.

    Raw partial derivatives, not rescaled to market quoting units.

    Attributes
    ----------
    delta : float
        dV/dS
    gamma : float
        d²V/dS²
    vega : float
        dV/dσ (per 1.00 change in volatility)
    theta : float
        dV/dt (per year)
    rho : float
        dV/dr (per 1.00 change in rate)
    """

    delta: float = 0.0
    gamma: float = 0.0
    vega: float = 0.0
    theta: float = 0.0
    rho: float = 0.0


class BlackScholesModel:
    """
    Analytical European option model.

    Parameters
    ----------
    market : MarketParameters
        Validated market inputs
    cdf : Callable, default scipy.stats.norm.cdf
        Standard normal CDF. Pass ``normal.normal_cdf`` for the
        Abramowitz-Stegun approximation.
    pdf : Callable, default scipy.stats.norm.pdf
        Standard normal density used by the Greeks. Pass
        ``normal.normal_pdf`` alongside ``normal.normal_cdf``.

    Raises
    ------
    InvalidMarketParametersError
        If σ√T == 0 (d1 is undefined)

    Examples
    --------
    >>> market = MarketParameters(100.0, 100.0, 0.05, 0.20, 1.0)
    >>> round(BlackScholesModel(market).call_price(), 2)
    10.45
    """

    def __init__(
        self,
        market: MarketParameters,
        cdf: Callable[[float], float] = stats.norm.cdf,
        pdf: Callable[[float], float] = stats.norm.pdf,
    ):
        if market.vol_sqrt_t == 0:
            raise InvalidMarketParametersError(
                f"CRITICAL: volatility * sqrt(time_to_maturity) must be > 0, "
                f"got volatility={market.volatility}"
            )
        self._market = market
        self._cdf = cdf
        self._pdf = pdf

    @property
    def market(self) -> MarketParameters:
        """Market inputs."""
        return self._market

    @cached_property
    def _d1_d2(self) -> tuple[float, float]:
        """
        [T1] d1 = (ln(S/K) + (r + σ²/2)T) / (σ√T)
        [T1] d2 = d1 - σ√T
        """
        m = self._market
        vol_sqrt_t = m.vol_sqrt_t
        d1 = (
            np.log(m.spot / m.strike) + (m.rate + 0.5 * m.volatility**2) * m.time_to_maturity
        ) / vol_sqrt_t
        return float(d1), float(d1 - vol_sqrt_t)

    @property
    def d1(self) -> float:
        return self._d1_d2[0]

    @property
    def d2(self) -> float:
        return self._d1_d2[1]

    def call_price(self) -> float:
        """[T1] C = S*N(d1) - K*e^(-rT)*N(d2)"""
        m = self._market
        price = m.spot * self._cdf(self.d1) - m.strike * m.discount_factor * self._cdf(self.d2)
        return float(price)

    def put_price(self) -> float:
        """[T1] P = C - S + K*e^(-rT) (put-call parity)"""
        m = self._market
        return self.call_price() - m.spot + m.strike * m.discount_factor

    def price(self, option_type: OptionType) -> float:
        if option_type == OptionType.CALL:
            return self.call_price()
        return self.put_price()

    @cached_property
    def _call_greeks(self) -> Greeks:
        m = self._market
        cdf = self._cdf
        sqrt_t = np.sqrt(m.time_to_maturity)
        phi_d1 = self._pdf(self.d1)

        return Greeks(
            delta=float(cdf(self.d1)),
            gamma=float(phi_d1 / (m.spot * m.volatility * sqrt_t)),
            vega=float(m.spot * phi_d1 * sqrt_t),
            theta=float(
                -(m.spot * phi_d1 * m.volatility) / (2.0 * sqrt_t)
                - m.rate * m.strike * m.discount_factor * cdf(self.d2)
            ),
            rho=float(m.strike * m.time_to_maturity * m.discount_factor * cdf(self.d2)),
        )

    @cached_property
    def _put_greeks(self) -> Greeks:
        m = self._market
        cdf = self._cdf
        call = self._call_greeks
        sqrt_t = np.sqrt(m.time_to_maturity)
        phi_d1 = self._pdf(self.d1)

        # Gamma and vega are shared with the call
        return Greeks(
            delta=float(cdf(self.d1) - 1.0),
            gamma=call.gamma,
            vega=call.vega,
            theta=float(
                -(m.spot * phi_d1 * m.volatility) / (2.0 * sqrt_t)
                + m.rate * m.strike * m.discount_factor * cdf(-self.d2)
            ),
            rho=float(-m.strike * m.time_to_maturity * m.discount_factor * cdf(-self.d2)),
        )

    def call_greeks(self) -> Greeks:
        """
        Call Greeks.

        [T1] Delta = N(d1)
        [T1] Gamma = n(d1) / (S σ √T)
        [T1] Vega = S n(d1) √T
        [T1] Theta = -S n(d1) σ / (2√T) - r K e^(-rT) N(d2)
        [T1] Rho = K T e^(-rT) N(d2)
        """
        return self._call_greeks

    def put_greeks(self) -> Greeks:
        """
        Put Greeks.

        [T1] Delta = N(d1) - 1
        [T1] Theta = -S n(d1) σ / (2√T) + r K e^(-rT) N(-d2)
        [T1] Rho = -K T e^(-rT) N(-d2)
        """
        return self._put_greeks

    def greeks(self, option_type: OptionType) -> Greeks:
        if option_type == OptionType.CALL:
            return self.call_greeks()
        return self.put_greeks()


def black_scholes_call(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_maturity: float,
) -> float:
    """
    Price a European call using Black-Scholes.

    Examples
    --------
    >>> round(black_scholes_call(100, 100, 0.05, 0.20, 1.0), 4)
    10.4506
    """
    market = MarketParameters(spot, strike, rate, volatility, time_to_maturity)
    return BlackScholesModel(market).call_price()


def black_scholes_put(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_maturity: float,
) -> float:
    """
    Price a European put using Black-Scholes.

    Examples
    --------
    >>> round(black_scholes_put(100, 100, 0.05, 0.20, 1.0), 4)
    5.5735
    """
    market = MarketParameters(spot, strike, rate, volatility, time_to_maturity)
    return BlackScholesModel(market).put_price()


def put_call_parity_check(
    call_price: float,
    put_price: float,
    spot: float,
    strike: float,
    rate: float,
    time_to_maturity: float,
    tolerance: float = PUT_CALL_PARITY_TOLERANCE,
) -> tuple[bool, float]:
    """
    Verify put-call parity holds.

    [T1] Put-Call Parity: C - P = S - K*e^(-rT)

    Parameters
    ----------
    call_price : float
        Call option price
    put_price : float
        Put option price
    spot : float
        Spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate
    time_to_maturity : float
        Time to expiry
    tolerance : float, default 1e-8
        Acceptable absolute error

    Returns
    -------
    tuple[bool, float]
        (parity_holds, error)
    """
    actual_diff = call_price - put_price
    expected_diff = spot - strike * np.exp(-rate * time_to_maturity)

    error = float(abs(actual_diff - expected_diff))
    parity_holds = error < tolerance

    return parity_holds, error
