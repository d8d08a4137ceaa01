"""
Configuration: frozen settings and centralized tolerances.
"""

from ito_pricing.config.settings import (
    SETTINGS,
    MonteCarloConfig,
    Settings,
    ValidationConfig,
)
from ito_pricing.config.tolerances import (
    TOLERANCE_REGISTRY,
    get_tolerance,
    mc_tolerance,
)

__all__ = [
    "SETTINGS",
    "MonteCarloConfig",
    "Settings",
    "ValidationConfig",
    "TOLERANCE_REGISTRY",
    "get_tolerance",
    "mc_tolerance",
]
