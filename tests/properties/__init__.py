"""
Property-based testing using Hypothesis.

This package contains property tests that verify mathematical invariants
hold across randomly generated inputs.

Modules:
    test_option_properties: Black-Scholes invariants (bounds, parity, monotonicity, Greeks)
    test_payoff_properties: vanilla payoff invariants
    test_mc_properties: Monte Carlo invariants (shared paths, determinism, agreement)
"""
