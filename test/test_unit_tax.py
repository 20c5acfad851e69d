# Test type: Unit Test
# Validation to be executed: Validates Indian slab tax, the split-bracket
#   marginal tax calculator (bracket straddling, cess, breakdown), the flat-slab
#   fallback, and marginal bracket lookup.
# Command: pytest test/test_unit_tax.py -v

"""Unit tests for capgains.services.tax_service module."""

import pytest

from capgains.models.schemas import SalaryDataForCalc
from capgains.services.tax_service import (
    calculate_income_tax,
    calculate_split_bracket_tax,
    marginal_bracket,
    tax_on_additional_income,
)


class TestCalculateIncomeTax:
    def test_zero_income(self):
        assert calculate_income_tax(0) == 0.0

    def test_negative_income(self):
        assert calculate_income_tax(-50_000) == 0.0

    def test_new_regime_10L(self):
        """5 % of 4 L + 10 % of 3 L = ₹50,000."""
        assert calculate_income_tax(1_000_000, "new") == pytest.approx(50_000)

    def test_old_regime_10L(self):
        """5 % of 2.5 L + 20 % of 5 L = ₹1,12,500."""
        assert calculate_income_tax(1_000_000, "old") == pytest.approx(112_500)

    def test_unknown_regime(self):
        with pytest.raises(ValueError, match="Unknown tax regime"):
            calculate_income_tax(1_000_000, "flat")


class TestSplitBracketTax:
    """Tax on income stacked on top of an existing taxable income."""

    def test_zero_additional_short_circuits(self):
        result = calculate_split_bracket_tax(0, 1_000_000, "new")
        assert result.tax == 0
        assert result.breakdown == []
        assert result.effectiveRate == 0

    def test_negative_additional_short_circuits(self):
        assert calculate_split_bracket_tax(-10_000, 1_000_000, "new").tax == 0

    def test_straddles_boundary(self):
        """Base ₹10 L, +₹3 L: 2 L at 15 % + 1 L at 20 % = 50,000 + 4 % cess."""
        result = calculate_split_bracket_tax(300_000, 1_000_000, "new")
        assert [(s.rate, s.amount, s.tax) for s in result.breakdown] == [
            (15.0, 200_000, 30_000),
            (20.0, 100_000, 20_000),
        ]
        assert result.tax == 52_000
        assert result.effectiveRate == pytest.approx(52_000 / 300_000 * 100)

    def test_not_a_single_marginal_rate(self):
        """Applying the top rate (20 %) to the whole increment would overstate it."""
        result = calculate_split_bracket_tax(300_000, 1_000_000, "new")
        assert result.tax < 300_000 * 0.20 * 1.04

    def test_top_bracket(self):
        result = calculate_split_bracket_tax(100_000, 2_000_000, "new")
        assert len(result.breakdown) == 1
        assert result.breakdown[0].rate == 30.0
        assert result.tax == 31_200

    def test_from_zero_includes_nil_slab(self):
        """₹5 L from zero: 3 L at 0 %, 2 L at 5 % → 10,000 + 400 cess."""
        result = calculate_split_bracket_tax(500_000, 0, "new")
        assert [s.rate for s in result.breakdown] == [0.0, 5.0]
        assert result.tax == 10_400

    def test_old_regime(self):
        """Base ₹4 L, +₹2 L: 1 L at 5 % + 1 L at 20 % = 25,000 + 1,000 cess."""
        result = calculate_split_bracket_tax(200_000, 400_000, "old")
        assert result.tax == 26_000

    def test_without_cess(self):
        result = calculate_split_bracket_tax(300_000, 1_000_000, "new", include_cess=False)
        assert result.tax == 50_000

    def test_breakdown_sums_to_increment(self):
        result = calculate_split_bracket_tax(1_700_000, 250_000, "new")
        assert sum(s.amount for s in result.breakdown) == pytest.approx(1_700_000)

    def test_unknown_regime(self):
        with pytest.raises(ValueError):
            calculate_split_bracket_tax(100_000, 0, "flat")


class TestTaxOnAdditionalIncome:
    def test_flat_slab_with_cess(self):
        """30 % + 4 % cess on ₹1 L = ₹31,200."""
        assert tax_on_additional_income(100_000, 30) == 31_200

    def test_zero_slab(self):
        assert tax_on_additional_income(100_000, 0) == 0

    def test_salary_context_uses_brackets(self):
        salary = SalaryDataForCalc(taxableIncome=1_000_000, regime="new")
        assert tax_on_additional_income(300_000, 30, salary) == 52_000

    def test_salary_context_zero_amount(self):
        salary = SalaryDataForCalc(taxableIncome=1_000_000, regime="new")
        assert tax_on_additional_income(0, 30, salary) == 0


class TestMarginalBracket:
    def test_new_regime_mid_bracket(self):
        assert marginal_bracket(800_000, "new") == (10.0, 15.0, 200_000)

    def test_new_regime_top(self):
        assert marginal_bracket(2_000_000, "new") == (30.0, 30.0, None)

    def test_boundary_belongs_to_lower_bracket(self):
        assert marginal_bracket(1_500_000, "new") == (20.0, 30.0, 0)

    def test_old_regime(self):
        assert marginal_bracket(400_000, "old") == (5.0, 20.0, 100_000)

    def test_zero_income(self):
        assert marginal_bracket(0, "new") == (0.0, 5.0, 300_000)
