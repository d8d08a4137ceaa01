"""
Frozen configuration settings for option pricing.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Environment variables are read once, when the singleton is built.
"""

import os
from dataclasses import dataclass
from typing import Optional

from ito_pricing.config.tolerances import CONFIDENCE_Z_95


def _env_int(name: str) -> Optional[int]:
    """
    Read an optional positive integer override from the environment.

    Returns None when the variable is unset or empty.
    """
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"CRITICAL: {name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ValueError(f"CRITICAL: {name} must be >= 1, got {value}")
    return value


# =============================================================================
# Monte Carlo Configuration
# =============================================================================

@dataclass(frozen=True)
class MonteCarloConfig:
    """
    Immutable Monte Carlo defaults.

    Attributes
    ----------
    sample_count : int
        Default number of simulated terminal prices
    seed : int
        Seed used by demos and the console entry point
    parallel_threshold : int
        AUTOMATIC policy switches to the parallel pipeline at or above this
        sample count. Override with ITO_MC_PARALLEL_THRESHOLD.
    max_workers : int, optional
        Thread count for the parallel pipeline (None = os.cpu_count()).
        Override with ITO_MC_MAX_WORKERS.
    parallel_chunk_size : int
        Upper bound on draws per parallel work item
    batch_size : int
        Draws per step of the sequential pipeline (1 = one path at a time)
    """

    sample_count: int = 100_000
    seed: int = 42
    parallel_threshold: int = None  # type: ignore[assignment]  # Set in __post_init__
    max_workers: Optional[int] = None
    parallel_chunk_size: int = 1_000_000
    batch_size: int = 1024

    def __post_init__(self) -> None:
        """Resolve environment overrides."""
        # Frozen dataclass workaround: use object.__setattr__
        if self.parallel_threshold is None:
            threshold = _env_int("ITO_MC_PARALLEL_THRESHOLD")
            object.__setattr__(
                self, "parallel_threshold", threshold if threshold is not None else 10_000
            )
        if self.max_workers is None:
            object.__setattr__(self, "max_workers", _env_int("ITO_MC_MAX_WORKERS"))


# =============================================================================
# Validation Configuration
# =============================================================================

@dataclass(frozen=True)
class ValidationConfig:
    """
    Immutable validation configuration.

    Attributes
    ----------
    confidence_z : float
        Normal quantile for the reported confidence half-width
    analytical_half_widths : float
        MC vs analytical disagreement (in half-widths) that HALTs
    arbitrage_standard_errors : float
        Slack, in standard errors, allowed on no-arbitrage bounds
    """

    confidence_z: float = CONFIDENCE_Z_95
    analytical_half_widths: float = 2.0
    arbitrage_standard_errors: float = 3.0


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from ito_pricing.config.settings import SETTINGS
    >>> SETTINGS.monte_carlo.parallel_threshold
    10000
    """

    monte_carlo: MonteCarloConfig = None  # type: ignore[assignment]
    validation: ValidationConfig = ValidationConfig()

    def __post_init__(self) -> None:
        if self.monte_carlo is None:
            object.__setattr__(self, "monte_carlo", MonteCarloConfig())


# Singleton instance - import this
SETTINGS = Settings()
