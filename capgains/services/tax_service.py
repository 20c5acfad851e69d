"""Indian income-tax slabs and the split-bracket marginal tax calculator.

New regime (FY 2024-25 onwards):
    ₹0 – ₹3,00,000            → 0 %
    ₹3,00,001 – ₹7,00,000     → 5 %
    ₹7,00,001 – ₹10,00,000    → 10 %
    ₹10,00,001 – ₹12,00,000   → 15 %
    ₹12,00,001 – ₹15,00,000   → 20 %
    Above ₹15,00,000           → 30 %

Old regime:
    ₹0 – ₹2,50,000            → 0 %
    ₹2,50,001 – ₹5,00,000     → 5 %
    ₹5,00,001 – ₹10,00,000    → 20 %
    Above ₹10,00,000           → 30 %

Income earned on top of a salary (rent, bond or FD interest) is taxed
slice by slice from where the salary leaves off, not at one flat rate.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from capgains.config import settings
from capgains.models.schemas import BracketSlice, SalaryDataForCalc, SplitBracketResult
from capgains.utils.helpers import round_half_up

# (lower_bound, upper_bound, rate_percent)
_NEW_REGIME_SLABS: list[tuple[float, float, float]] = [
    (0.0,           300_000.0,    0.0),
    (300_000.0,     700_000.0,    5.0),
    (700_000.0,   1_000_000.0,   10.0),
    (1_000_000.0, 1_200_000.0,   15.0),
    (1_200_000.0, 1_500_000.0,   20.0),
    (1_500_000.0, float("inf"),  30.0),
]

_OLD_REGIME_SLABS: list[tuple[float, float, float]] = [
    (0.0,           250_000.0,    0.0),
    (250_000.0,     500_000.0,    5.0),
    (500_000.0,   1_000_000.0,   20.0),
    (1_000_000.0, float("inf"),  30.0),
]


def get_slabs(regime: str) -> List[Tuple[float, float, float]]:
    """Slab table for *regime* (``new`` or ``old``)."""
    if regime == "new":
        return _NEW_REGIME_SLABS
    if regime == "old":
        return _OLD_REGIME_SLABS
    raise ValueError(f"Unknown tax regime: '{regime}'")


def calculate_income_tax(taxable_income: float, regime: str = "new") -> float:
    """Slab tax on a whole income, before cess."""
    if taxable_income <= 0:
        return 0.0

    tax = 0.0
    for lower, upper, rate in get_slabs(regime):
        if taxable_income <= lower:
            break
        taxable_in_slab = min(taxable_income, upper) - lower
        tax += taxable_in_slab * rate / 100
    return tax


def calculate_split_bracket_tax(
    additional_income: float,
    current_taxable_income: float,
    regime: str = "new",
    include_cess: bool = True,
) -> SplitBracketResult:
    """Tax on *additional_income* stacked on top of *current_taxable_income*.

    Each slice that lands in a bracket is taxed at that bracket's rate and
    rounded to the rupee; cess is applied once on the summed tax.
    """
    if additional_income <= 0:
        return SplitBracketResult(tax=0.0, breakdown=[], effectiveRate=0.0)

    slabs = get_slabs(regime)
    cess_rate = settings.CESS_RATE if include_cess else 0.0

    breakdown: list[BracketSlice] = []
    remaining = additional_income
    total_income = current_taxable_income
    total_tax = 0.0

    for lower, upper, rate in slabs:
        if remaining <= 0:
            break
        # Income already past this bracket
        if total_income >= upper:
            continue
        room = upper - max(total_income, lower)
        in_bracket = min(remaining, room)
        if in_bracket > 0:
            slice_tax = round_half_up(in_bracket * rate / 100)
            total_tax += slice_tax
            breakdown.append(BracketSlice(rate=rate, amount=in_bracket, tax=slice_tax))
            remaining -= in_bracket
            total_income += in_bracket

    final_tax = total_tax + round_half_up(total_tax * cess_rate)
    return SplitBracketResult(
        tax=final_tax,
        breakdown=breakdown,
        effectiveRate=final_tax / additional_income * 100,
    )


def tax_on_additional_income(
    amount: float,
    tax_slab: float,
    salary: Optional[SalaryDataForCalc] = None,
) -> float:
    """Tax on ordinary income earned from a reinvestment.

    Uses true brackets when salary context is in use, otherwise the flat
    *tax_slab* (percent) plus cess, rounded to the rupee.
    """
    if salary is not None and amount > 0:
        return calculate_split_bracket_tax(
            additional_income=amount,
            current_taxable_income=salary.taxableIncome,
            regime=salary.regime,
        ).tax
    return round_half_up(amount * tax_slab / 100 * (1 + settings.CESS_RATE))


def marginal_bracket(taxable_income: float, regime: str = "new") -> Tuple[float, float, Optional[float]]:
    """Return (marginal_rate, next_bracket_rate, room_in_bracket).

    ``room_in_bracket`` is ``None`` in the top bracket. An income sitting
    exactly on a boundary belongs to the lower bracket.
    """
    slabs = get_slabs(regime)
    for i, (lower, upper, rate) in enumerate(slabs):
        if taxable_income <= upper:
            if upper == float("inf"):
                return rate, rate, None
            next_rate = slabs[i + 1][2]
            return rate, next_rate, upper - taxable_income
    top = slabs[-1][2]
    return top, top, None
