"""
Seeded standard-normal sampler.

Wraps a Mersenne Twister bit generator (numpy MT19937) and the
Generator.standard_normal transform. One sampler is owned by one pricer.

The sampler is NOT thread-safe and takes no lock. Callers must draw
from the owning thread only. The parallel pipeline materializes every draw
into a buffer before any concurrent stage starts.
"""

from typing import Optional

import numpy as np

from ito_pricing.errors import InvalidConfigurationError


class NormalSampler:
    """
    Stateful N(0, 1) sampler.

    Two samplers built from the same seed and drawn from in the same order
    yield identical sequences. `draw_batch(n)` consumes the generator exactly
    like n successive `draw()` calls.

    Parameters
    ----------
    seed : int, optional
        Seed for the bit generator. None draws fresh OS entropy.

    Examples
    --------
    >>> a, b = NormalSampler(seed=42), NormalSampler(seed=42)
    >>> a.draw() == b.draw()
    True
    """

    def __init__(self, seed: Optional[int] = None):
        self._seed = seed
        self._rng = np.random.Generator(np.random.MT19937(seed))
        self._draws_consumed = 0

    @property
    def seed(self) -> Optional[int]:
        """Seed the sampler was built from."""
        return self._seed

    @property
    def draws_consumed(self) -> int:
        """Number of normals drawn so far."""
        return self._draws_consumed

    def draw(self) -> float:
        """Draw one standard-normal sample."""
        z = float(self._rng.standard_normal())
        self._draws_consumed += 1
        return z

    def draw_batch(self, n: int) -> np.ndarray:
        """
        Draw `n` standard-normal samples in order.

        Parameters
        ----------
        n : int
            Number of samples (>= 0)

        Returns
        -------
        np.ndarray
            Samples, shape (n,), dtype float64
        """
        if n < 0:
            raise InvalidConfigurationError(f"CRITICAL: n must be >= 0, got {n}")
        z = self._rng.standard_normal(n)
        self._draws_consumed += n
        return z

    def __repr__(self) -> str:
        return f"NormalSampler(seed={self._seed!r}, draws_consumed={self._draws_consumed})"
