"""
Validation Gates - HALT/WARN/PASS framework for Monte Carlo results.

Cross-checks a call/put estimate before it is reported: against its own
standard errors, the closed-form Black-Scholes prices, put-call parity and
the no-arbitrage bounds. Gates can HALT (reject with diagnostics), WARN
(allow with a note) or PASS.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import numpy as np

from ito_pricing.config.settings import SETTINGS
from ito_pricing.config.tolerances import ANTI_PATTERN_TOLERANCE
from ito_pricing.options.market import MarketParameters
from ito_pricing.options.pricing.black_scholes import BlackScholesModel
from ito_pricing.options.simulation.monte_carlo import CallPutResult

logger = logging.getLogger(__name__)


class GateStatus(Enum):
    """Status of a validation gate."""
    PASS = "pass"
    HALT = "halt"
    WARN = "warn"


@dataclass(frozen=True)
class GateResult:
    """
    Result of a validation gate check.

    Attributes
    ----------
    status : GateStatus
        PASS, HALT, or WARN
    gate_name : str
        Name of the gate that was checked
    message : str
        Explanation of the result
    value : Any, optional
        The value that was checked
    threshold : Any, optional
        The threshold that was applied
    """

    status: GateStatus
    gate_name: str
    message: str
    value: Optional[Any] = None
    threshold: Optional[Any] = None

    @property
    def passed(self) -> bool:
        """Check if gate passed (PASS or WARN)."""
        return self.status != GateStatus.HALT


@dataclass(frozen=True)
class ValidationReport:
    """
    Complete validation report from all gates.

    Attributes
    ----------
    results : tuple[GateResult, ...]
        Results from all gates
    """

    results: tuple[GateResult, ...]

    @property
    def overall_status(self) -> GateStatus:
        """Get worst status across all gates."""
        if any(r.status == GateStatus.HALT for r in self.results):
            return GateStatus.HALT
        elif any(r.status == GateStatus.WARN for r in self.results):
            return GateStatus.WARN
        return GateStatus.PASS

    @property
    def passed(self) -> bool:
        """Check if all gates passed (no HALTs)."""
        return self.overall_status != GateStatus.HALT

    @property
    def halted_gates(self) -> list[GateResult]:
        return [r for r in self.results if r.status == GateStatus.HALT]

    @property
    def warned_gates(self) -> list[GateResult]:
        return [r for r in self.results if r.status == GateStatus.WARN]

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "overall_status": self.overall_status.value,
            "passed": self.passed,
            "n_halted": len(self.halted_gates),
            "n_warned": len(self.warned_gates),
            "results": [
                {
                    "gate": r.gate_name,
                    "status": r.status.value,
                    "message": r.message,
                    "value": r.value,
                    "threshold": r.threshold,
                }
                for r in self.results
            ],
        }


# =============================================================================
# Gate Implementations
# =============================================================================

class ValidationGate:
    """
    Base class for validation gates.

    Subclasses implement check() to validate a call/put result.
    """

    name: str = "base_gate"

    def check(
        self, result: CallPutResult, market: MarketParameters, **context: Any
    ) -> GateResult:
        """
        Check the pricing result.

        Parameters
        ----------
        result : CallPutResult
            Monte Carlo estimate to validate
        market : MarketParameters
            Inputs the estimate was priced with
        **context : Any
            Additional context (e.g. analytical_call, analytical_put)

        Returns
        -------
        GateResult
            Validation result
        """
        raise NotImplementedError


class StandardErrorGate(ValidationGate):
    """
    Check that both legs carry a finite price and a finite, non-negative SE.

    A NaN or negative SE means the aggregation broke, not that the
    estimate is noisy.
    """

    name = "standard_error"

    def check(
        self, result: CallPutResult, market: MarketParameters, **context: Any
    ) -> GateResult:
        issues = []
        for leg, estimate in (("call", result.call), ("put", result.put)):
            if not np.isfinite(estimate.price):
                issues.append(f"{leg} price {estimate.price} is not finite")
            if not np.isfinite(estimate.standard_error):
                issues.append(f"{leg} SE {estimate.standard_error} is not finite")
            elif estimate.standard_error < 0:
                issues.append(f"{leg} SE {estimate.standard_error:.6f} is negative")

        if issues:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message=f"Standard error check failed: {'; '.join(issues)}",
                value=issues,
            )

        return GateResult(
            status=GateStatus.PASS,
            gate_name=self.name,
            message=(
                f"SE call={result.call.standard_error:.6f}, "
                f"put={result.put.standard_error:.6f}"
            ),
        )


def _analytical_prices(market: MarketParameters) -> tuple[float, float]:
    """
    Closed-form call and put prices.

    [T1] With σ√T == 0 the terminal price is the forward, so
         C = max(S - K*exp(-rT), 0) and P = max(K*exp(-rT) - S, 0).
    """
    if market.vol_sqrt_t == 0:
        intrinsic = market.parity_value
        return max(intrinsic, 0.0), max(-intrinsic, 0.0)
    model = BlackScholesModel(market)
    return model.call_price(), model.put_price()


class AnalyticalAgreementGate(ValidationGate):
    """
    Check each MC leg against the Black-Scholes price.

    [T1] |MC - BS| should fall inside the 95% half-width most of the time.

    PASS within one half-width, WARN up to `n_half_widths`, HALT beyond.
    Pass analytical_call / analytical_put in the context to override the
    closed-form reference.
    """

    name = "analytical_agreement"

    def __init__(
        self,
        n_half_widths: float = SETTINGS.validation.analytical_half_widths,
        abs_tolerance: float = ANTI_PATTERN_TOLERANCE,
    ):
        """
        Parameters
        ----------
        n_half_widths : float
            Disagreement, in 95% half-widths, that HALTs
        abs_tolerance : float
            Absolute slack for the zero-variance case (SE == 0)
        """
        self.n_half_widths = n_half_widths
        self.abs_tolerance = abs_tolerance

    def check(
        self, result: CallPutResult, market: MarketParameters, **context: Any
    ) -> GateResult:
        bs_call, bs_put = _analytical_prices(market)
        bs_call = context.get("analytical_call", bs_call)
        bs_put = context.get("analytical_put", bs_put)

        status = GateStatus.PASS
        notes = []
        worst_ratio = 0.0
        for leg, estimate, reference in (
            ("call", result.call, bs_call),
            ("put", result.put, bs_put),
        ):
            diff = abs(estimate.price - reference)
            hw = estimate.confidence_half_width
            if hw > 0:
                worst_ratio = max(worst_ratio, diff / hw)

            if diff > self.n_half_widths * hw + self.abs_tolerance:
                status = GateStatus.HALT
                notes.append(
                    f"{leg} MC {estimate.price:.6f} vs BS {reference:.6f} "
                    f"differs by {diff:.6f} > {self.n_half_widths}x half-width {hw:.6f}"
                )
            elif diff > hw + self.abs_tolerance:
                if status != GateStatus.HALT:
                    status = GateStatus.WARN
                notes.append(
                    f"{leg} MC {estimate.price:.6f} outside 95% CI of BS {reference:.6f}"
                )

        if status == GateStatus.PASS:
            message = f"MC within 95% CI of BS (call={bs_call:.6f}, put={bs_put:.6f})"
        else:
            message = "; ".join(notes)

        return GateResult(
            status=status,
            gate_name=self.name,
            message=message,
            value=worst_ratio,
            threshold=self.n_half_widths,
        )


class PutCallParityGate(ValidationGate):
    """
    Check put-call parity on the shared-path estimates.

    [T1] C - P = S - K*exp(-rT)

    Call and put come from the same paths, so C - P is the discounted mean
    of S_T - K. PASS within the call half-width, WARN up to
    `n_half_widths` of it, HALT beyond.
    """

    name = "put_call_parity"

    def __init__(
        self,
        n_half_widths: float = SETTINGS.validation.analytical_half_widths,
        abs_tolerance: float = ANTI_PATTERN_TOLERANCE,
    ):
        self.n_half_widths = n_half_widths
        self.abs_tolerance = abs_tolerance

    def check(
        self, result: CallPutResult, market: MarketParameters, **context: Any
    ) -> GateResult:
        error = result.parity_error(market)
        hw = result.call.confidence_half_width
        threshold = hw + self.abs_tolerance

        if error > self.n_half_widths * hw + self.abs_tolerance:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message=(
                    f"Put-call parity violated: C - P = {result.price_difference:.6f}, "
                    f"S - K*exp(-rT) = {market.parity_value:.6f}"
                ),
                value=error,
                threshold=threshold,
            )

        if error > threshold:
            return GateResult(
                status=GateStatus.WARN,
                gate_name=self.name,
                message=f"Parity error {error:.6f} outside call half-width {hw:.6f}",
                value=error,
                threshold=threshold,
            )

        return GateResult(
            status=GateStatus.PASS,
            gate_name=self.name,
            message=f"Parity error {error:.6f} within call half-width",
            value=error,
            threshold=threshold,
        )


class ArbitrageBoundsGate(ValidationGate):
    """
    Check no-arbitrage bounds on option values.

    [T1] 0 <= C <= S
    [T1] 0 <= P <= K*exp(-rT)

    Each bound gets `n_standard_errors` of the leg's SE as slack.
    """

    name = "arbitrage_bounds"

    def __init__(
        self,
        n_standard_errors: float = SETTINGS.validation.arbitrage_standard_errors,
        abs_tolerance: float = ANTI_PATTERN_TOLERANCE,
    ):
        self.n_standard_errors = n_standard_errors
        self.abs_tolerance = abs_tolerance

    def check(
        self, result: CallPutResult, market: MarketParameters, **context: Any
    ) -> GateResult:
        issues = []

        call_slack = self.n_standard_errors * result.call.standard_error + self.abs_tolerance
        if result.call.price < -call_slack:
            issues.append(f"call {result.call.price:.6f} is negative")
        elif result.call.price > market.spot + call_slack:
            issues.append(
                f"call {result.call.price:.6f} exceeds spot {market.spot:.6f}"
            )

        put_slack = self.n_standard_errors * result.put.standard_error + self.abs_tolerance
        put_bound = market.strike * market.discount_factor
        if result.put.price < -put_slack:
            issues.append(f"put {result.put.price:.6f} is negative")
        elif result.put.price > put_bound + put_slack:
            issues.append(
                f"put {result.put.price:.6f} exceeds K*exp(-rT) {put_bound:.6f}"
            )

        if issues:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message=f"Arbitrage violation: {'; '.join(issues)}",
                value=issues,
            )

        return GateResult(
            status=GateStatus.PASS,
            gate_name=self.name,
            message="No-arbitrage bounds satisfied",
        )


# =============================================================================
# Validation Engine
# =============================================================================

class ValidationEngine:
    """
    Engine for running validation gates on Monte Carlo results.

    Parameters
    ----------
    gates : list[ValidationGate], optional
        Custom gates to use. If None, uses default gates.

    Examples
    --------
    >>> engine = ValidationEngine()
    >>> report = engine.validate(result, market)
    >>> for gate in report.halted_gates:
    ...     print(f"HALT: {gate.message}")
    """

    def __init__(self, gates: Optional[list[ValidationGate]] = None):
        if gates is None:
            gates = self._default_gates()
        self.gates = gates

    def _default_gates(self) -> list[ValidationGate]:
        """Create default set of validation gates."""
        return [
            StandardErrorGate(),
            AnalyticalAgreementGate(),
            PutCallParityGate(),
            ArbitrageBoundsGate(),
        ]

    def validate(
        self,
        result: CallPutResult,
        market: MarketParameters,
        **context: Any,
    ) -> ValidationReport:
        """
        Run all validation gates on a call/put result.

        Returns
        -------
        ValidationReport
            Complete validation report
        """
        results = []
        for gate in self.gates:
            gate_result = gate.check(result, market, **context)
            if gate_result.status == GateStatus.HALT:
                logger.warning(f"HALT [{gate_result.gate_name}]: {gate_result.message}")
            elif gate_result.status == GateStatus.WARN:
                logger.info(f"WARN [{gate_result.gate_name}]: {gate_result.message}")
            results.append(gate_result)

        return ValidationReport(results=tuple(results))

    def validate_and_raise(
        self,
        result: CallPutResult,
        market: MarketParameters,
        **context: Any,
    ) -> CallPutResult:
        """
        Validate and raise exception on HALT.

        Raises
        ------
        ValueError
            If any gate HALTs
        """
        report = self.validate(result, market, **context)

        if not report.passed:
            halt_messages = [g.message for g in report.halted_gates]
            raise ValueError(
                "CRITICAL: Validation failed. HALTs:\n" +
                "\n".join(f"  - {m}" for m in halt_messages)
            )

        return result


# =============================================================================
# Convenience Functions
# =============================================================================

def validate_call_put_result(
    result: CallPutResult,
    market: MarketParameters,
    **context: Any,
) -> ValidationReport:
    """Run the default gates on a call/put result."""
    return ValidationEngine().validate(result, market, **context)


def ensure_valid(
    result: CallPutResult,
    market: MarketParameters,
    **context: Any,
) -> CallPutResult:
    """
    Validate and raise if invalid.

    Returns
    -------
    CallPutResult
        The same result if valid

    Raises
    ------
    ValueError
        If any default gate HALTs
    """
    return ValidationEngine().validate_and_raise(result, market, **context)
