# Test type: Unit Test
# Validation to be executed: Validates reinvestment projections — compound and
#   simple interest, CAGR, property appreciation with rent, 54EC bond maturity
#   and the pay-tax-now FD baseline, with flat slab and salary brackets.
# Command: pytest test/test_unit_investment.py -v

"""Unit tests for capgains.services.investment_service module."""

import pytest

from capgains.models.schemas import SalaryDataForCalc
from capgains.services.investment_service import (
    calculate_cagr,
    compound_interest,
    project_bonds,
    project_fd_comparison,
    project_property,
    simple_interest,
)


# ── Interest math ─────────────────────────────────────────────────────────

class TestCompoundInterest:
    def test_basic(self):
        assert compound_interest(1_000_000, 0.10, 3) == pytest.approx(1_331_000)

    def test_zero_years(self):
        assert compound_interest(1_000_000, 0.10, 0) == pytest.approx(1_000_000)

    def test_zero_rate(self):
        assert compound_interest(500_000, 0.0, 5) == pytest.approx(500_000)


class TestSimpleInterest:
    def test_bond_coupon(self):
        assert simple_interest(1_000_000, 0.0525, 5) == pytest.approx(262_500)


class TestCalculateCagr:
    def test_doubling_in_one_year(self):
        assert calculate_cagr(100, 200, 1) == pytest.approx(100.0)

    def test_ten_percent(self):
        assert calculate_cagr(1_000_000, 1_331_000, 3) == pytest.approx(10.0)

    def test_zero_begin(self):
        assert calculate_cagr(0, 1_000, 5) == 0.0

    def test_zero_years(self):
        assert calculate_cagr(1_000, 2_000, 0) == 0.0

    def test_total_loss(self):
        assert calculate_cagr(1_000, 0, 5) == -100.0


# ── Property projection ──────────────────────────────────────────────────

class TestProjectProperty:
    def test_appreciation_only(self):
        """₹10 L at 10 % for 3 years → ₹13.31 L; 12.5 % + cess on ₹3.31 L."""
        p = project_property(1_000_000, 10, lock_in_years=3)
        assert p.projectedPropertyValue == 1_331_000
        assert p.capitalAppreciation == 331_000
        assert p.totalRentalIncome == 0
        assert p.taxOnAppreciation == 43_030
        assert p.totalTaxOnReturns == 43_030
        assert p.netCashInHand == 1_287_970
        assert p.annualizedReturn == pytest.approx(10.0)

    def test_rent_after_delay(self):
        """Rent from month 6 of 36 → 30 months of ₹20k taxed at 30 % + cess."""
        p = project_property(
            1_000_000, 10, lock_in_years=3,
            enable_rental=True, monthly_rent=20_000, rent_start_month=6, tax_slab=30,
        )
        assert p.rentMonths == 30
        assert p.totalRentalIncome == 600_000
        assert p.taxOnRentalIncome == 187_200
        assert p.totalReturns == 931_000
        assert p.netCashInHand == 1_700_770

    def test_rent_starts_after_lock_in(self):
        p = project_property(
            1_000_000, 10, lock_in_years=3,
            enable_rental=True, monthly_rent=20_000, rent_start_month=40,
        )
        assert p.rentMonths == 0
        assert p.totalRentalIncome == 0

    def test_rental_disabled_ignores_rent(self):
        p = project_property(1_000_000, 10, monthly_rent=20_000, enable_rental=False)
        assert p.totalRentalIncome == 0
        assert p.taxOnRentalIncome == 0

    def test_zero_investment(self):
        p = project_property(0, 8)
        assert p.projectedPropertyValue == 0
        assert p.taxOnAppreciation == 0
        assert p.netCashInHand == 0
        assert p.annualizedReturn == 0

    def test_negative_appreciation_not_taxed(self):
        p = project_property(1_000_000, -5, lock_in_years=3)
        assert p.capitalAppreciation < 0
        assert p.taxOnAppreciation == 0

    def test_rent_uses_salary_brackets(self):
        salary = SalaryDataForCalc(taxableIncome=1_000_000, regime="new")
        p = project_property(
            1_000_000, 10, lock_in_years=3,
            enable_rental=True, monthly_rent=10_000, rent_start_month=6, salary=salary,
        )
        # ₹3 L rent on ₹10 L salary: 2 L at 15 % + 1 L at 20 % + cess
        assert p.taxOnRentalIncome == 52_000


# ── 54EC bonds ────────────────────────────────────────────────────────────

class TestProjectBonds:
    def test_flat_slab(self):
        b = project_bonds(1_000_000, tax_slab=30)
        assert b.interestRate == 5.25
        assert b.lockInYears == 5
        assert b.totalInterest == 262_500
        assert b.maturityValue == 1_262_500
        assert b.taxOnInterest == 81_900
        assert b.netMaturityValue == 1_180_600

    def test_salary_brackets(self):
        """₹2.625 L interest on ₹5 L salary: 2 L at 5 % + 62.5k at 10 % + cess."""
        salary = SalaryDataForCalc(taxableIncome=500_000, regime="new")
        b = project_bonds(1_000_000, tax_slab=30, salary=salary)
        assert b.taxOnInterest == 16_900

    def test_custom_lock_in(self):
        assert project_bonds(1_000_000, lock_in_years=10).totalInterest == 525_000

    def test_zero_amount(self):
        b = project_bonds(0)
        assert b.totalInterest == 0
        assert b.netMaturityValue == 0


# ── FD baseline ───────────────────────────────────────────────────────────

class TestProjectFdComparison:
    def test_three_years(self):
        fd = project_fd_comparison(tax_paid=100_000, after_tax_amount=1_000_000, years=3, tax_slab=30)
        assert fd.taxPaid == 100_000
        assert fd.investedAmount == 1_000_000
        assert fd.fdRate == 8.0
        assert fd.grossReturns == 259_712
        assert fd.taxOnFDReturns == 81_030
        assert fd.netFDReturns == 178_682

    def test_zero_slab(self):
        fd = project_fd_comparison(0, 1_000_000, years=3, tax_slab=0)
        assert fd.taxOnFDReturns == 0
        assert fd.netFDReturns == fd.grossReturns
