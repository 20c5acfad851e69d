"""Capital-gains exemption strategies for long-term gains.

Section 54   – residential sale, reinvest the gain in a new house
               (≤ ₹10 Cr, within 2 years, 3-year lock-in)
Section 54EC – any sale, reinvest the gain in NHAI/REC/PFC/IRFC bonds
               (≤ ₹50 L per FY, within 6 months, 5-year lock-in)
Section 54F  – non-residential sale, reinvest the whole net consideration
               in a house (proportionate exemption, 3-year lock-in)

Every strategy carries a projection of the reinvestment net of future
tax, so it can be compared with paying the tax today.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from capgains.config import settings
from capgains.models.schemas import (
    CapitalGainsResult,
    ExemptionStrategy,
    PropertyDetails,
    PropertyProjection,
    SalaryDataForCalc,
    Section54ProjectionState,
)
from capgains.services.capital_gains_service import original_property_cagr
from capgains.services.investment_service import (
    project_bonds,
    project_fd_comparison,
    project_property,
)
from capgains.services.temporal_service import (
    section_54_deadline,
    section_54ec_deadline,
)
from capgains.utils.helpers import format_date, round_half_up

logger = logging.getLogger(__name__)

_SECTION_54_NOTES = [
    "Purchase within 1 year before or 2 years after sale",
    "Or construct within 3 years of sale",
    "Only ONE new residential property allowed",
    "Lock-in period: 3 years (cannot sell new property)",
    "Max exemption: ₹10 Crore (from AY 2024-25)",
]

_SECTION_54F_NOTES = [
    "Applicable for sale of any asset EXCEPT residential house",
    "Must not own more than one residential house on sale date",
    "Full exemption if entire net consideration is reinvested",
    "Proportionate exemption if partial reinvestment",
    "Lock-in period: 3 years",
]


def _section_54ec_notes(tax_slab: float) -> List[str]:
    return [
        "Invest within 6 months of sale date",
        "Maximum investment: ₹50 lakhs per financial year",
        "Lock-in period: 5 years",
        f"Interest taxed at {tax_slab:g}% (your slab rate)",
        "Bonds: NHAI, REC, PFC, IRFC",
    ]


def _tax_saved(exempt_amount: float, tax_rate: float) -> float:
    return exempt_amount * tax_rate / 100 * (1 + settings.CESS_RATE)


def default_projection_state(
    prop: PropertyDetails,
    gains: CapitalGainsResult,
) -> Section54ProjectionState:
    """Projection defaults, with appreciation set to the sold property's CAGR."""
    state = Section54ProjectionState()
    cagr = original_property_cagr(prop, gains)
    if cagr > 0:
        state.appreciationRate = round_half_up(cagr * 10) / 10
    return state


def _property_projection(
    investment: float,
    prop: PropertyDetails,
    gains: CapitalGainsResult,
    projection: Section54ProjectionState,
    salary: Optional[SalaryDataForCalc],
) -> PropertyProjection:
    """Projection of a new house plus the pay-tax-now FD baseline."""
    result = project_property(
        investment=investment,
        appreciation_rate=projection.appreciationRate,
        lock_in_years=settings.PROPERTY_LOCK_IN_YEARS,
        enable_rental=projection.enableRental,
        monthly_rent=projection.monthlyRent,
        rent_start_month=projection.rentStartMonth,
        tax_slab=projection.taxSlab,
        salary=salary,
    )
    result.originalPropertyCAGR = original_property_cagr(prop, gains)
    result.comparisonWithoutExemption = project_fd_comparison(
        tax_paid=gains.totalTax,
        after_tax_amount=gains.netSaleConsideration - gains.totalTax,
        years=settings.PROPERTY_LOCK_IN_YEARS,
        tax_slab=projection.taxSlab,
        salary=salary,
    )
    return result


def calculate_exemptions(
    prop: PropertyDetails,
    gains: CapitalGainsResult,
    projection: Section54ProjectionState,
    salary: Optional[SalaryDataForCalc] = None,
) -> List[ExemptionStrategy]:
    """Build the eligible exemption strategies for a sale.

    Returns an empty list for short-term sales or when there is no gain.
    *salary*, when given, switches every tax on ordinary income to true
    bracket computation on top of the salary.
    """
    capital_gain = max(0.0, gains.capitalGain)
    strategies: list[ExemptionStrategy] = []

    if not gains.holdingPeriod.isLongTerm or capital_gain <= 0:
        return strategies

    sale_date = prop.sale_date

    # Section 54 – residential only
    if prop.propertyType == "residential":
        max_exemption = min(capital_gain, settings.SECTION_54_CAP)
        strategies.append(
            ExemptionStrategy(
                section="54",
                name="Buy New Residential Property",
                description="Reinvest capital gains in a new residential house",
                maxExemption=max_exemption,
                investmentRequired=max_exemption,
                taxSaved=_tax_saved(max_exemption, gains.taxRate),
                deadline=format_date(section_54_deadline(sale_date)),
                lockInYears=settings.PROPERTY_LOCK_IN_YEARS,
                notes=list(_SECTION_54_NOTES),
                propertyProjection=_property_projection(
                    max_exemption, prop, gains, projection, salary
                ),
            )
        )

    # Section 54EC – always available on LTCG
    max_bonds = min(capital_gain, settings.SECTION_54EC_CAP)
    strategies.append(
        ExemptionStrategy(
            section="54EC",
            name="Capital Gains Bonds",
            description="Invest in NHAI/REC/PFC bonds",
            maxExemption=max_bonds,
            investmentRequired=max_bonds,
            taxSaved=_tax_saved(max_bonds, gains.taxRate),
            deadline=format_date(section_54ec_deadline(sale_date)),
            lockInYears=settings.BOND_LOCK_IN_YEARS,
            notes=_section_54ec_notes(projection.taxSlab),
            bondDetails=project_bonds(max_bonds, projection.taxSlab, salary),
        )
    )

    # Section 54F – non-residential only
    if prop.propertyType != "residential":
        net_consideration = gains.netSaleConsideration
        ratio = min(1.0, capital_gain / net_consideration) if net_consideration > 0 else 0.0
        max_exemption_54f = round_half_up(capital_gain * ratio)
        strategies.append(
            ExemptionStrategy(
                section="54F",
                name="Buy Residential Property (54F)",
                description="For sale of non-residential assets",
                maxExemption=max_exemption_54f,
                investmentRequired=net_consideration,
                taxSaved=_tax_saved(max_exemption_54f, gains.taxRate),
                deadline=format_date(section_54_deadline(sale_date)),
                lockInYears=settings.PROPERTY_LOCK_IN_YEARS,
                notes=list(_SECTION_54F_NOTES),
                propertyProjection=_property_projection(
                    net_consideration, prop, gains, projection, salary
                ),
            )
        )

    logger.debug("Built %d exemption strategies", len(strategies))
    return strategies
