"""Capital gains on the sale of immovable property.

Long-term (held ≥ 24 months):
    Old regime – 20 % on the gain over the CII-indexed cost
    New regime – 12.5 % on the gain over the un-indexed cost
    Purchases on/after 23-Jul-2024 must use the new regime; earlier
    purchases may pick either, and the cheaper one is recommended.

Short-term:
    Gain over un-indexed cost at a flat 30 % (top slab approximation).

All taxes carry 4 % health & education cess.
"""

from __future__ import annotations

import logging
from typing import Optional

from capgains.config import settings
from capgains.models.schemas import (
    ActiveRegime,
    CapitalGainsResult,
    PropertyDetails,
    RegimeValues,
)
from capgains.services.investment_service import calculate_cagr
from capgains.services.temporal_service import get_cii, holding_period
from capgains.utils.helpers import parse_date, round_half_up

logger = logging.getLogger(__name__)


def _tax_with_cess(gain: float, rate: float) -> float:
    return max(0.0, gain) * rate / 100 * (1 + settings.CESS_RATE)


def calculate_capital_gains(prop: PropertyDetails) -> CapitalGainsResult:
    """Compute gain, tax and net proceeds for one property sale.

    Both regimes are evaluated whenever the taxpayer may choose; the
    headline figures follow the mandatory or recommended regime.
    """
    purchase_date = prop.purchase_date
    sale_date = prop.sale_date
    period = holding_period(purchase_date, sale_date)

    purchase_cii = get_cii(purchase_date)
    sale_cii = get_cii(sale_date)

    must_use_new = purchase_date >= parse_date(settings.NEW_REGIME_CUTOFF)
    can_choose = period.isLongTerm and not must_use_new

    total_purchase_cost = prop.purchasePrice + prop.stampDuty
    transfer_expenses = prop.brokerage + prop.legalFees
    net_consideration = prop.salePrice - transfer_expenses

    # Old regime: indexed cost
    indexed_purchase = total_purchase_cost
    indexed_improvement = prop.improvementCost
    if period.isLongTerm:
        indexed_purchase = round_half_up(total_purchase_cost * sale_cii / purchase_cii)
        improvement_date = prop.improvement_date
        if prop.improvementCost > 0 and improvement_date is not None:
            improvement_cii = get_cii(improvement_date)
            indexed_improvement = round_half_up(prop.improvementCost * sale_cii / improvement_cii)
    total_indexed = indexed_purchase + indexed_improvement
    gain_old = net_consideration - total_indexed
    tax_old = _tax_with_cess(gain_old, settings.LTCG_OLD_RATE)

    # New regime: no indexation
    gain_new = net_consideration - total_purchase_cost - prop.improvementCost
    tax_new = _tax_with_cess(gain_new, settings.LTCG_NEW_RATE)

    recommended = "old" if tax_old <= tax_new else "new"
    use_new = must_use_new or (can_choose and recommended == "new")

    if not period.isLongTerm:
        capital_gain = gain_new
        tax_rate = settings.STCG_SLAB_RATE
        total_tax = _tax_with_cess(capital_gain, tax_rate)
    elif use_new:
        capital_gain, tax_rate, total_tax = gain_new, settings.LTCG_NEW_RATE, tax_new
    else:
        capital_gain, tax_rate, total_tax = gain_old, settings.LTCG_OLD_RATE, tax_old

    tax_before_cess = total_tax / (1 + settings.CESS_RATE)
    net_proceeds = prop.salePrice - transfer_expenses - total_tax

    old_values = new_values = None
    if can_choose:
        old_values = RegimeValues(
            capitalGain=gain_old,
            taxRate=settings.LTCG_OLD_RATE,
            totalTax=tax_old,
            netProceeds=prop.salePrice - transfer_expenses - tax_old,
        )
        new_values = RegimeValues(
            capitalGain=gain_new,
            taxRate=settings.LTCG_NEW_RATE,
            totalTax=tax_new,
            netProceeds=prop.salePrice - transfer_expenses - tax_new,
        )

    logger.debug(
        "Gains computed: months=%s long_term=%s gain=%s tax=%s",
        period.months, period.isLongTerm, capital_gain, total_tax,
    )

    return CapitalGainsResult(
        holdingPeriod=period,
        purchaseCII=purchase_cii,
        saleCII=sale_cii,
        indexedPurchaseCost=indexed_purchase,
        indexedImprovementCost=indexed_improvement,
        totalIndexedCost=total_indexed,
        transferExpenses=transfer_expenses,
        netSaleConsideration=net_consideration,
        capitalGain=capital_gain,
        taxRate=tax_rate,
        taxBeforeCess=tax_before_cess,
        cess=total_tax - tax_before_cess,
        totalTax=total_tax,
        netProceeds=net_proceeds,
        useNewRegime=use_new,
        mustUseNewRegime=must_use_new,
        canChooseRegime=can_choose,
        oldRegime=old_values,
        newRegime=new_values,
        recommendedRegime=recommended if can_choose else None,
    )


def resolve_active_regime(
    result: CapitalGainsResult,
    selected: Optional[str] = None,
) -> ActiveRegime:
    """Pick the regime whose figures drive downstream planning.

    Without a choice the engine's headline values stand. With a choice the
    caller's *selected* regime wins, falling back to the recommendation.
    """
    if not result.canChooseRegime:
        return ActiveRegime(
            regime="new" if result.useNewRegime else "old",
            capitalGain=result.capitalGain,
            taxRate=result.taxRate,
            totalTax=result.totalTax,
            netProceeds=result.netProceeds,
        )

    if selected not in (None, "old", "new"):
        raise ValueError(f"Unknown tax regime: '{selected}'")
    regime = selected or result.recommendedRegime or "new"
    values = result.oldRegime if regime == "old" else result.newRegime
    return ActiveRegime(regime=regime, **values.model_dump())


def original_property_cagr(prop: PropertyDetails, result: CapitalGainsResult) -> float:
    """Realised CAGR of the sold property on purchase price + stamp duty."""
    return calculate_cagr(
        prop.purchasePrice + prop.stampDuty,
        prop.salePrice,
        result.holdingPeriod.months / 12,
    )
