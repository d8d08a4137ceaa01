"""
Monte Carlo vs Black-Scholes validation.

[T1] For European options the MC estimate must converge to the closed form.
These runs use realistic sample counts and fixed seeds.

See: Hull, "Options, Futures, and Other Derivatives" (10th ed.) Ch. 15
See: Glasserman (2003) Ch. 1
"""

import pytest

from ito_pricing.options.market import MarketParameters
from ito_pricing.options.pricing.black_scholes import BlackScholesModel
from ito_pricing.options.simulation.execution import ExecutionPolicy, PricingConfiguration
from ito_pricing.options.simulation.monte_carlo import MonteCarloPricer
from ito_pricing.validation.gates import GateStatus, validate_call_put_result


class TestReferenceCase:
    """S = K = 100, r = 5%, σ = 20%, T = 1."""

    @pytest.mark.validation
    def test_analytical_reference(self, atm_market: MarketParameters) -> None:
        model = BlackScholesModel(atm_market)
        assert model.call_price() == pytest.approx(10.4506, abs=1e-4)
        assert model.put_price() == pytest.approx(5.5735, abs=1e-4)

    @pytest.mark.validation
    def test_call_interval_contains_analytical(self, atm_market: MarketParameters) -> None:
        config = PricingConfiguration(sample_count=100_000, seed=42)
        result = MonteCarloPricer(config).price(atm_market)

        lower, upper = result.call.confidence_bounds
        assert result.call.contains(10.4506), (
            f"95% CI [{lower:.4f}, {upper:.4f}] misses 10.4506"
        )

    @pytest.mark.validation
    def test_reference_passes_gates(self, atm_market: MarketParameters) -> None:
        config = PricingConfiguration(sample_count=100_000, seed=42)
        result = MonteCarloPricer(config).price(atm_market)
        report = validate_call_put_result(result, atm_market)
        assert report.overall_status != GateStatus.HALT, report.to_dict()

    @pytest.mark.validation
    def test_half_width_scale(self, atm_market: MarketParameters) -> None:
        """Call payoff std ≈ 14.7 at this market, so hw ≈ 1.96 * 14.7 / √N."""
        config = PricingConfiguration(sample_count=100_000, seed=42)
        result = MonteCarloPricer(config).price(atm_market)
        assert 0.07 < result.call.confidence_half_width < 0.11


class TestAcrossMoneyness:
    """Both legs land within a few standard errors of BS."""

    @pytest.mark.validation
    @pytest.mark.parametrize("strike", [70.0, 90.0, 100.0, 110.0, 130.0])
    @pytest.mark.parametrize("policy", ["sequential", "parallel"])
    def test_within_four_standard_errors(self, strike: float, policy: str) -> None:
        market = MarketParameters(100.0, strike, 0.05, 0.20, 1.0)
        model = BlackScholesModel(market)
        config = PricingConfiguration(
            sample_count=100_000, seed=2024, execution_policy=policy
        )
        result = MonteCarloPricer(config).price(market)

        for estimate, reference in (
            (result.call, model.call_price()),
            (result.put, model.put_price()),
        ):
            error = abs(estimate.price - reference)
            assert error <= 4.0 * estimate.standard_error + 1e-10, (
                f"K={strike}: MC {estimate.price:.4f} vs BS {reference:.4f}, "
                f"SE {estimate.standard_error:.4f}"
            )


class TestDegenerateMarket:
    """σ = 0 makes S(T) deterministic."""

    @pytest.mark.validation
    def test_zero_volatility_is_intrinsic(self, zero_vol_market: MarketParameters) -> None:
        config = PricingConfiguration(
            sample_count=10_000, seed=1, execution_policy=ExecutionPolicy.SEQUENTIAL
        )
        result = MonteCarloPricer(config).price(zero_vol_market)

        assert result.call.price == pytest.approx(
            max(zero_vol_market.parity_value, 0.0), rel=1e-12
        )
        assert result.put.price == 0.0
        assert result.call.standard_error == pytest.approx(0.0, abs=1e-9)
        report = validate_call_put_result(result, zero_vol_market)
        assert report.overall_status == GateStatus.PASS, report.to_dict()
