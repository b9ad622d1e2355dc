"""
Property-based testing using Hypothesis.

This package contains property tests that verify mathematical invariants
hold across randomly generated inputs.

Modules:
    test_day_count_properties: sign, identity and additivity of year fractions
    test_lookback_properties: positivity, homogeneity and monotonicity of prices
    test_contract_properties: validation rules across the input space
"""
