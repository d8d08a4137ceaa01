"""
Error taxonomy for ito-pricing.

All errors are precondition violations raised synchronously, before any
simulation work starts. They subclass ValueError so callers that already
catch ValueError keep working.
"""


class PricingError(ValueError):
    """Base class for pricing precondition violations."""

    pass


class InvalidConfigurationError(PricingError):
    """Raised when a Monte Carlo configuration cannot be used."""

    pass


class InvalidMarketParametersError(PricingError):
    """Raised when market parameters are outside the model's domain."""

    pass
