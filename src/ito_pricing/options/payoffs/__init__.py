"""
Option payoffs.

Provides vanilla European call and put payoffs evaluated on terminal prices.
"""

from ito_pricing.options.payoffs.base import (
    OptionType,
    call_payoff,
    payoff,
    put_payoff,
)

__all__ = [
    "OptionType",
    "call_payoff",
    "payoff",
    "put_payoff",
]
