"""
Vanilla European payoffs.

Payoffs are pure, vectorized functions of the terminal price. The call and
put are evaluated on the identical terminal-price array so both legs of a
Monte Carlo result share their paths.
"""

from enum import Enum
from typing import Union

import numpy as np

ArrayLike = Union[float, np.ndarray]


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


def call_payoff(terminal: ArrayLike, strike: float) -> ArrayLike:
    """
    European call payoff.

    [T1] Call payoff: max(S(T) - K, 0)

    Parameters
    ----------
    terminal : float or np.ndarray
        Terminal price(s) S(T)
    strike : float
        Strike price K

    Returns
    -------
    float or np.ndarray
        Undiscounted payoff, same shape as `terminal`
    """
    return np.maximum(terminal - strike, 0.0)


def put_payoff(terminal: ArrayLike, strike: float) -> ArrayLike:
    """
    European put payoff.

    [T1] Put payoff: max(K - S(T), 0)

    Parameters
    ----------
    terminal : float or np.ndarray
        Terminal price(s) S(T)
    strike : float
        Strike price K

    Returns
    -------
    float or np.ndarray
        Undiscounted payoff, same shape as `terminal`
    """
    return np.maximum(strike - terminal, 0.0)


def payoff(terminal: ArrayLike, strike: float, option_type: OptionType) -> ArrayLike:
    """Dispatch to the call or put payoff."""
    if option_type == OptionType.CALL:
        return call_payoff(terminal, strike)
    return put_payoff(terminal, strike)
