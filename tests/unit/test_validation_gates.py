"""
Tests for the HALT/WARN/PASS validation gates.

Gates are fed hand-built CallPutResult objects so every status is
reached deterministically.
"""

import logging

import pytest

from ito_pricing.options.market import MarketParameters
from ito_pricing.options.pricing.black_scholes import BlackScholesModel
from ito_pricing.options.simulation.execution import ExecutionPolicy
from ito_pricing.options.simulation.monte_carlo import CallPutResult
from ito_pricing.options.simulation.statistics import PricingResult
from ito_pricing.validation.gates import (
    AnalyticalAgreementGate,
    ArbitrageBoundsGate,
    GateResult,
    GateStatus,
    PutCallParityGate,
    StandardErrorGate,
    ValidationEngine,
    ValidationReport,
    ensure_valid,
    validate_call_put_result,
)


def _leg(price: float, se: float, df: float = 0.951229424500714) -> PricingResult:
    return PricingResult(price=price, standard_error=se, n_paths=100_000, discount_factor=df)


def _result(call: float, put: float, call_se: float = 0.05, put_se: float = 0.03) -> CallPutResult:
    return CallPutResult(
        call=_leg(call, call_se),
        put=_leg(put, put_se),
        policy=ExecutionPolicy.SEQUENTIAL,
        seed=42,
    )


@pytest.fixture
def bs_prices(atm_market: MarketParameters) -> tuple[float, float]:
    model = BlackScholesModel(atm_market)
    return model.call_price(), model.put_price()


@pytest.fixture
def good_result(bs_prices) -> CallPutResult:
    """Exactly on the analytical prices."""
    call, put = bs_prices
    return _result(call, put)


class TestGateResultAndReport:
    """Status aggregation."""

    @pytest.mark.unit
    def test_passed_flags(self) -> None:
        assert GateResult(GateStatus.PASS, "g", "ok").passed
        assert GateResult(GateStatus.WARN, "g", "meh").passed
        assert not GateResult(GateStatus.HALT, "g", "bad").passed

    @pytest.mark.unit
    def test_overall_status_is_worst(self) -> None:
        results = (
            GateResult(GateStatus.PASS, "a", ""),
            GateResult(GateStatus.WARN, "b", ""),
        )
        assert ValidationReport(results).overall_status == GateStatus.WARN
        halted = ValidationReport(results + (GateResult(GateStatus.HALT, "c", ""),))
        assert halted.overall_status == GateStatus.HALT
        assert not halted.passed
        assert [g.gate_name for g in halted.halted_gates] == ["c"]
        assert [g.gate_name for g in halted.warned_gates] == ["b"]

    @pytest.mark.unit
    def test_empty_report_passes(self) -> None:
        assert ValidationReport(()).overall_status == GateStatus.PASS

    @pytest.mark.unit
    def test_to_dict(self) -> None:
        report = ValidationReport((GateResult(GateStatus.HALT, "x", "boom", 1.0, 0.5),))
        as_dict = report.to_dict()
        assert as_dict["overall_status"] == "halt"
        assert as_dict["n_halted"] == 1
        assert as_dict["results"][0]["gate"] == "x"


class TestStandardErrorGate:
    """SE must be finite and non-negative."""

    @pytest.mark.unit
    def test_pass(self, atm_market, good_result) -> None:
        assert StandardErrorGate().check(good_result, atm_market).status == GateStatus.PASS

    @pytest.mark.unit
    @pytest.mark.parametrize("se", [float("nan"), float("inf"), -0.1])
    def test_halt(self, atm_market, se: float) -> None:
        result = _result(10.45, 5.57, call_se=se)
        assert StandardErrorGate().check(result, atm_market).status == GateStatus.HALT

    @pytest.mark.unit
    def test_nan_price_halts(self, atm_market) -> None:
        result = _result(float("nan"), 5.57)
        assert StandardErrorGate().check(result, atm_market).status == GateStatus.HALT


class TestAnalyticalAgreementGate:
    """PASS inside one half-width, WARN up to the limit, HALT beyond."""

    @pytest.mark.unit
    def test_pass(self, atm_market, good_result) -> None:
        assert AnalyticalAgreementGate().check(good_result, atm_market).status == GateStatus.PASS

    @pytest.mark.unit
    def test_warn(self, atm_market, bs_prices) -> None:
        call, put = bs_prices
        # Half-width 0.098, off by 0.15 (about 1.5 half-widths)
        result = _result(call + 0.15, put)
        gate_result = AnalyticalAgreementGate().check(result, atm_market)
        assert gate_result.status == GateStatus.WARN
        assert "call" in gate_result.message

    @pytest.mark.unit
    def test_halt(self, atm_market, bs_prices) -> None:
        call, put = bs_prices
        result = _result(call, put + 1.0)
        gate_result = AnalyticalAgreementGate().check(result, atm_market)
        assert gate_result.status == GateStatus.HALT
        assert "put" in gate_result.message

    @pytest.mark.unit
    def test_custom_limit(self, atm_market, bs_prices) -> None:
        call, put = bs_prices
        result = _result(call + 0.15, put)
        gate = AnalyticalAgreementGate(n_half_widths=1.2)
        assert gate.check(result, atm_market).status == GateStatus.HALT

    @pytest.mark.unit
    def test_context_override(self, atm_market) -> None:
        result = _result(11.0, 6.0)
        gate_result = AnalyticalAgreementGate().check(
            result, atm_market, analytical_call=11.0, analytical_put=6.0
        )
        assert gate_result.status == GateStatus.PASS

    @pytest.mark.unit
    def test_zero_volatility_uses_intrinsic(self, zero_vol_market) -> None:
        intrinsic = zero_vol_market.parity_value
        result = _result(intrinsic, 0.0, call_se=0.0, put_se=0.0)
        assert AnalyticalAgreementGate().check(result, zero_vol_market).status == GateStatus.PASS


class TestPutCallParityGate:
    """C - P vs S - K*exp(-rT), scaled by the call half-width."""

    @pytest.mark.unit
    def test_pass(self, atm_market, good_result) -> None:
        gate_result = PutCallParityGate().check(good_result, atm_market)
        assert gate_result.status == GateStatus.PASS
        assert gate_result.value == pytest.approx(0.0, abs=1e-10)

    @pytest.mark.unit
    def test_warn(self, atm_market, bs_prices) -> None:
        call, put = bs_prices
        result = _result(call + 0.15, put)
        assert PutCallParityGate().check(result, atm_market).status == GateStatus.WARN

    @pytest.mark.unit
    def test_halt(self, atm_market, bs_prices) -> None:
        call, put = bs_prices
        result = _result(call, put - 0.5)
        gate_result = PutCallParityGate().check(result, atm_market)
        assert gate_result.status == GateStatus.HALT
        assert "parity violated" in gate_result.message


class TestArbitrageBoundsGate:
    """[T1] 0 <= C <= S, 0 <= P <= K*exp(-rT)."""

    @pytest.mark.unit
    def test_pass(self, atm_market, good_result) -> None:
        assert ArbitrageBoundsGate().check(good_result, atm_market).status == GateStatus.PASS

    @pytest.mark.unit
    def test_call_above_spot(self, atm_market) -> None:
        result = _result(101.0, 5.0)
        gate_result = ArbitrageBoundsGate().check(result, atm_market)
        assert gate_result.status == GateStatus.HALT
        assert "exceeds spot" in gate_result.message

    @pytest.mark.unit
    def test_put_above_discounted_strike(self, atm_market) -> None:
        result = _result(10.0, 96.0)
        assert ArbitrageBoundsGate().check(result, atm_market).status == GateStatus.HALT

    @pytest.mark.unit
    def test_negative_price(self, atm_market) -> None:
        result = _result(-1.0, 5.0)
        gate_result = ArbitrageBoundsGate().check(result, atm_market)
        assert gate_result.status == GateStatus.HALT
        assert "negative" in gate_result.message

    @pytest.mark.unit
    def test_slack_in_standard_errors(self, atm_market) -> None:
        """Slightly above S but within 3 SE is tolerated."""
        result = _result(100.1, 5.0, call_se=0.05)
        assert ArbitrageBoundsGate().check(result, atm_market).status == GateStatus.PASS


class TestValidationEngine:
    """Runs every gate and reports the worst status."""

    @pytest.mark.unit
    def test_default_gates(self) -> None:
        names = [gate.name for gate in ValidationEngine().gates]
        assert names == [
            "standard_error",
            "analytical_agreement",
            "put_call_parity",
            "arbitrage_bounds",
        ]

    @pytest.mark.unit
    def test_validate_passes(self, atm_market, good_result) -> None:
        report = validate_call_put_result(good_result, atm_market)
        assert report.overall_status == GateStatus.PASS
        assert len(report.results) == 4

    @pytest.mark.unit
    def test_custom_gates(self, atm_market, good_result) -> None:
        report = ValidationEngine(gates=[StandardErrorGate()]).validate(good_result, atm_market)
        assert len(report.results) == 1

    @pytest.mark.unit
    def test_ensure_valid_returns_result(self, atm_market, good_result) -> None:
        assert ensure_valid(good_result, atm_market) is good_result

    @pytest.mark.unit
    def test_ensure_valid_raises_on_halt(self, atm_market) -> None:
        with pytest.raises(ValueError, match="Validation failed"):
            ensure_valid(_result(150.0, 5.0), atm_market)

    @pytest.mark.unit
    def test_halt_logged_as_warning(self, atm_market, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="ito_pricing.validation.gates"):
            ValidationEngine().validate(_result(150.0, 5.0), atm_market)
        assert any(
            record.levelno == logging.WARNING and "HALT" in record.getMessage()
            for record in caplog.records
        )

    @pytest.mark.unit
    def test_base_gate_not_implemented(self, atm_market, good_result) -> None:
        from ito_pricing.validation.gates import ValidationGate

        with pytest.raises(NotImplementedError):
            ValidationGate().check(good_result, atm_market)
