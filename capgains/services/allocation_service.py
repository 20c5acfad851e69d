"""Reinvestment allocation of the after-tax sale proceeds.

Buckets (each independently enabled):
    personalUse – taken out immediately, no growth
    bonds       – Section 54EC bonds, min(user amount, ₹50 L, what is left)
    realEstate  – whatever remains after personalUse and bonds

Identity:
    personalUse + bonds + realEstate + unallocated == netProceeds

The total projected value adds amounts available at different times
(today, after 3 years, after 5 years); ``lockInHorizons`` labels them.
"""

from __future__ import annotations

import logging
from typing import Optional

from capgains.config import settings
from capgains.models.schemas import (
    AllocationResult,
    ReinvestmentAllocation,
    SalaryDataForCalc,
)
from capgains.services.investment_service import project_bonds, project_property

logger = logging.getLogger(__name__)


def max_bond_amount(net_proceeds: float) -> float:
    """Statutory 54EC cap, bounded by the proceeds."""
    return max(0.0, min(settings.SECTION_54EC_CAP, net_proceeds))


def calculate_allocation(
    net_proceeds: float,
    allocation: ReinvestmentAllocation,
    tax_slab: float = settings.DEFAULT_TAX_SLAB,
    salary: Optional[SalaryDataForCalc] = None,
) -> AllocationResult:
    """Split *net_proceeds* across the enabled buckets and project each."""
    available = max(0.0, net_proceeds)

    personal_use = (
        min(allocation.personalUse.amount, available)
        if allocation.personalUse.enabled
        else 0.0
    )
    remaining = available - personal_use

    bonds_amount = (
        min(allocation.bonds.amount, settings.SECTION_54EC_CAP, remaining)
        if allocation.bonds.enabled
        else 0.0
    )
    remaining_after_bonds = remaining - bonds_amount

    real_estate = allocation.realEstate
    real_estate_amount = remaining_after_bonds if real_estate.enabled else 0.0
    unallocated = net_proceeds - personal_use - bonds_amount - real_estate_amount

    bonds = project_bonds(bonds_amount, tax_slab, salary)
    property_projection = project_property(
        investment=real_estate_amount,
        appreciation_rate=real_estate.appreciationRate,
        lock_in_years=settings.PROPERTY_LOCK_IN_YEARS,
        enable_rental=real_estate.enableRental and real_estate_amount > 0,
        monthly_rent=real_estate.monthlyRent,
        rent_start_month=real_estate.rentStartMonth,
        tax_slab=tax_slab,
        salary=salary,
    )

    bond_net = bonds.netMaturityValue
    real_estate_net = property_projection.netCashInHand
    total = personal_use + bond_net + real_estate_net + unallocated

    logger.debug(
        "Allocation: personal=%s bonds=%s real_estate=%s unallocated=%s",
        personal_use, bonds_amount, real_estate_amount, unallocated,
    )

    return AllocationResult(
        netProceeds=net_proceeds,
        maxBondAmount=max_bond_amount(net_proceeds),
        personalUseAmount=personal_use,
        bondsAmount=bonds_amount,
        realEstateAmount=real_estate_amount,
        unallocated=unallocated,
        remainingAfterPersonalAndBonds=remaining_after_bonds,
        bonds=bonds,
        realEstate=property_projection,
        bondNetValue=bond_net,
        realEstateNetValue=real_estate_net,
        totalProjectedValue=total,
        lockInHorizons={
            "personalUse": 0,
            "bonds": settings.BOND_LOCK_IN_YEARS,
            "realEstate": settings.PROPERTY_LOCK_IN_YEARS,
        },
    )


def toggle_bonds(
    allocation: ReinvestmentAllocation,
    net_proceeds: float,
) -> ReinvestmentAllocation:
    """Flip the bonds bucket, pre-filling the largest amount that fits.

    Enabling sets the amount to ``min(max bond amount, what personal use
    leaves)``; disabling zeroes it. Returns a new allocation.
    """
    updated = allocation.model_copy(deep=True)
    if allocation.bonds.enabled:
        updated.bonds.enabled = False
        updated.bonds.amount = 0.0
        return updated

    personal_use = allocation.personalUse.amount if allocation.personalUse.enabled else 0.0
    remaining = max(0.0, net_proceeds - personal_use)
    updated.bonds.enabled = True
    updated.bonds.amount = min(max_bond_amount(net_proceeds), remaining)
    return updated
