"""Reinvestment projections — property, capital-gains bonds and FD baseline.

Property (Sections 54 / 54F, allocator real-estate bucket):
    value      = P × (1 + r)^t                    (compounded annually)
    rent       = monthly_rent × max(0, 12t − start_month)
    tax        = slab/bracket tax on rent + 12.5 % LTCG (+ cess) on appreciation

Section 54EC bonds:
    interest   = P × 5.25 % × 5                   (simple, paid annually)
    tax        = slab/bracket tax on interest

FD baseline:
    returns    = P × (1.08)^t − P, taxed at slab/bracket rate
"""

from __future__ import annotations

from typing import Optional

from capgains.config import settings
from capgains.models.schemas import (
    BondDetails,
    FDComparison,
    PropertyProjection,
    SalaryDataForCalc,
)
from capgains.services.tax_service import tax_on_additional_income
from capgains.utils.helpers import round_half_up


def compound_interest(principal: float, rate: float, years: int) -> float:
    """A = P × (1 + r)^t  (compounded annually, n=1)."""
    return principal * ((1 + rate) ** years)


def simple_interest(principal: float, rate: float, years: int) -> float:
    """I = P × r × t."""
    return principal * rate * years


def calculate_cagr(begin_value: float, end_value: float, years: float) -> float:
    """Compound annual growth rate in percent; 0 when undefined."""
    if begin_value <= 0 or years <= 0:
        return 0.0
    if end_value <= 0:
        return -100.0
    return ((end_value / begin_value) ** (1 / years) - 1) * 100


# ── Property ──────────────────────────────────────────────────────────────

def project_property(
    investment: float,
    appreciation_rate: float,
    lock_in_years: int = settings.PROPERTY_LOCK_IN_YEARS,
    enable_rental: bool = False,
    monthly_rent: float = 0.0,
    rent_start_month: int = 0,
    tax_slab: float = settings.DEFAULT_TAX_SLAB,
    salary: Optional[SalaryDataForCalc] = None,
) -> PropertyProjection:
    """Value of a property bought with *investment* and sold after lock-in.

    Rent is ordinary income; appreciation on the eventual sale is LTCG at
    the new-regime rate.
    """
    projected_value = round_half_up(
        compound_interest(investment, appreciation_rate / 100, lock_in_years)
    )
    appreciation = projected_value - investment

    rent_months = max(0, lock_in_years * 12 - rent_start_month)
    total_rental = monthly_rent * rent_months if enable_rental else 0.0
    total_returns = appreciation + total_rental

    tax_on_rent = tax_on_additional_income(total_rental, tax_slab, salary)
    tax_on_appreciation = (
        round_half_up(appreciation * settings.LTCG_NEW_RATE / 100 * (1 + settings.CESS_RATE))
        if appreciation > 0
        else 0.0
    )
    total_tax = tax_on_rent + tax_on_appreciation

    return PropertyProjection(
        investment=investment,
        lockInYears=lock_in_years,
        appreciationRate=appreciation_rate,
        projectedPropertyValue=projected_value,
        capitalAppreciation=appreciation,
        rentalEnabled=enable_rental,
        monthlyRent=monthly_rent,
        rentStartMonth=rent_start_month,
        rentMonths=rent_months,
        totalRentalIncome=total_rental,
        totalReturns=total_returns,
        annualizedReturn=calculate_cagr(investment, investment + total_returns, lock_in_years),
        taxSlab=tax_slab,
        taxOnRentalIncome=tax_on_rent,
        taxOnAppreciation=tax_on_appreciation,
        totalTaxOnReturns=total_tax,
        netCashInHand=investment + total_returns - total_tax,
    )


# ── Section 54EC bonds ────────────────────────────────────────────────────

def project_bonds(
    amount: float,
    tax_slab: float = settings.DEFAULT_TAX_SLAB,
    salary: Optional[SalaryDataForCalc] = None,
    lock_in_years: int = settings.BOND_LOCK_IN_YEARS,
) -> BondDetails:
    """Maturity value of capital-gains bonds net of tax on interest."""
    total_interest = round_half_up(
        simple_interest(amount, settings.BOND_INTEREST_RATE / 100, lock_in_years)
    )
    maturity_value = amount + total_interest
    tax_on_interest = tax_on_additional_income(total_interest, tax_slab, salary)
    return BondDetails(
        interestRate=settings.BOND_INTEREST_RATE,
        lockInYears=lock_in_years,
        totalInterest=total_interest,
        maturityValue=maturity_value,
        taxOnInterest=tax_on_interest,
        netMaturityValue=maturity_value - tax_on_interest,
    )


# ── Pay-tax-now baseline ──────────────────────────────────────────────────

def project_fd_comparison(
    tax_paid: float,
    after_tax_amount: float,
    years: int = settings.PROPERTY_LOCK_IN_YEARS,
    tax_slab: float = settings.DEFAULT_TAX_SLAB,
    salary: Optional[SalaryDataForCalc] = None,
) -> FDComparison:
    """Returns from parking the after-tax proceeds in a fixed deposit."""
    gross = round_half_up(
        compound_interest(after_tax_amount, settings.FD_RATE / 100, years) - after_tax_amount
    )
    fd_tax = tax_on_additional_income(gross, tax_slab, salary)
    return FDComparison(
        taxPaid=tax_paid,
        investedAmount=after_tax_amount,
        fdRate=settings.FD_RATE,
        grossReturns=gross,
        taxOnFDReturns=fd_tax,
        netFDReturns=gross - fd_tax,
    )
