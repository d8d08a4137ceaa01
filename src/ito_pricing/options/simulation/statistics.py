"""
Statistical aggregation of Monte Carlo payoffs.

[T1] Price = DF * mean(payoff)
[T1] SE = DF * sqrt(s² / N), s² = Σ(x - mean)² / (N - 1)
[T1] 95% half-width = z * SE, z = SETTINGS.validation.confidence_z (1.96)

See: Glasserman (2003) Ch. 1.1.3
"""

from dataclasses import dataclass

import numpy as np

from ito_pricing.config.settings import SETTINGS
from ito_pricing.errors import InvalidConfigurationError


@dataclass(frozen=True)
class PricingResult:
    """
    Monte Carlo price estimate for one option.

    Attributes
    ----------
    price : float
        Discounted mean payoff
    standard_error : float
        Discounted standard error of the mean (>= 0)
    n_paths : int
        Number of payoffs aggregated
    discount_factor : float
        Discount factor applied to mean and SE
    """

    price: float
    standard_error: float
    n_paths: int
    discount_factor: float

    @property
    def confidence_half_width(self) -> float:
        """Half-width of the 95% confidence interval."""
        return SETTINGS.validation.confidence_z * self.standard_error

    def confidence_interval(self) -> float:
        """Half-width of the 95% confidence interval (price ± this)."""
        return self.confidence_half_width

    @property
    def confidence_bounds(self) -> tuple[float, float]:
        """95% confidence interval as (lower, upper)."""
        hw = self.confidence_half_width
        return (self.price - hw, self.price + hw)

    @property
    def ci_width(self) -> float:
        """Full width of the 95% confidence interval."""
        return 2.0 * self.confidence_half_width

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.price)

    def contains(self, value: float) -> bool:
        """Whether `value` lies inside the 95% confidence interval."""
        lower, upper = self.confidence_bounds
        return lower <= value <= upper


def discount_factor(rate: float, time_to_maturity: float) -> float:
    """[T1] DF = exp(-r * T)."""
    return float(np.exp(-rate * time_to_maturity))


def aggregate_payoffs(payoffs: np.ndarray, discount_factor: float) -> PricingResult:
    """
    Reduce undiscounted payoffs to a price, standard error and path count.

    Parameters
    ----------
    payoffs : np.ndarray
        Undiscounted payoffs, one per path
    discount_factor : float
        exp(-rT), shared by every leg priced from the same paths

    Returns
    -------
    PricingResult
        Discounted estimate with its standard error

    Raises
    ------
    InvalidConfigurationError
        If fewer than 2 payoffs are given (sample variance undefined)
    """
    payoffs = np.asarray(payoffs, dtype=float)
    n = payoffs.size
    if n < 2:
        raise InvalidConfigurationError(
            f"CRITICAL: at least 2 payoffs are needed for a sample variance, got {n}"
        )

    mean = payoffs.mean()
    variance = np.sum((payoffs - mean) ** 2) / (n - 1)
    std_error = np.sqrt(variance / n)

    return PricingResult(
        price=float(discount_factor * mean),
        standard_error=float(discount_factor * std_error),
        n_paths=int(n),
        discount_factor=float(discount_factor),
    )
