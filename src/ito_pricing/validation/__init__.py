"""
Validation framework for Monte Carlo results.

Provides HALT/WARN/PASS gates:
- StandardErrorGate: SE finite and non-negative
- AnalyticalAgreementGate: MC vs Black-Scholes within the confidence interval
- PutCallParityGate: C - P vs S - K*exp(-rT)
- ArbitrageBoundsGate: No-arbitrage checks
"""

from ito_pricing.validation.gates import (
    AnalyticalAgreementGate,
    ArbitrageBoundsGate,
    GateResult,
    # Enums and Results
    GateStatus,
    PutCallParityGate,
    # Specific Gates
    StandardErrorGate,
    # Engine
    ValidationEngine,
    # Base Gate
    ValidationGate,
    ValidationReport,
    ensure_valid,
    # Convenience Functions
    validate_call_put_result,
)

__all__ = [
    # Enums and Results
    "GateStatus",
    "GateResult",
    "ValidationReport",
    # Base Gate
    "ValidationGate",
    # Specific Gates
    "StandardErrorGate",
    "AnalyticalAgreementGate",
    "PutCallParityGate",
    "ArbitrageBoundsGate",
    # Engine
    "ValidationEngine",
    # Convenience Functions
    "validate_call_put_result",
    "ensure_valid",
]
