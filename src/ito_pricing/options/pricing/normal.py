"""
Standard normal density and a closed-form CDF approximation.

[T1] φ(x) = exp(-x²/2) / √(2π)
[T1] Φ(x) ≈ 1 - φ(x) * (a1 t + a2 t² + a3 t³ + a4 t⁴ + a5 t⁵),
     t = 1 / (1 + p x), x >= 0; Φ(-x) = 1 - Φ(x)

References
----------
[T1] Abramowitz, M., & Stegun, I. A. (1964). Handbook of Mathematical
     Functions, formula 26.2.17. |error| < 7.5e-8.
"""

from typing import Union

import numpy as np

ArrayLike = Union[float, np.ndarray]

INV_SQRT_2PI = 1.0 / np.sqrt(2.0 * np.pi)

# Abramowitz & Stegun 26.2.17 coefficients
_P = 0.2316419
_A1 = 0.319381530
_A2 = -0.356563782
_A3 = 1.781477937
_A4 = -1.821255978
_A5 = 1.330274429


def normal_pdf(x: ArrayLike) -> ArrayLike:
    """Standard normal probability density."""
    x = np.asarray(x, dtype=float)
    result = INV_SQRT_2PI * np.exp(-0.5 * x * x)
    return float(result) if result.ndim == 0 else result


def normal_cdf(x: ArrayLike) -> ArrayLike:
    """
    Standard normal CDF via Abramowitz & Stegun 26.2.17.

    Evaluated on |x| and reflected, so Φ(x) + Φ(-x) == 1 up to rounding.
    The polynomial gives 0.5 + 5e-10 at the origin, so Φ(0) is pinned to
    exactly 0.5 (for both signs of zero).

    Parameters
    ----------
    x : float or np.ndarray
        Evaluation point(s)

    Returns
    -------
    float or np.ndarray
        Φ(x), same shape as `x`

    Examples
    --------
    >>> round(normal_cdf(0.0), 7)
    0.5
    """
    x = np.asarray(x, dtype=float)
    ax = np.abs(x)

    t = 1.0 / (1.0 + _P * ax)
    # Horner evaluation of the degree-5 polynomial in t
    poly = t * (_A1 + t * (_A2 + t * (_A3 + t * (_A4 + t * _A5))))
    upper = 1.0 - INV_SQRT_2PI * np.exp(-0.5 * ax * ax) * poly

    result = np.where(x < 0, 1.0 - upper, upper)
    result = np.where(x == 0, 0.5, result)
    return float(result) if result.ndim == 0 else result
